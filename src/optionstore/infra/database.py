"""Database infrastructure: engines, schema and transactional scopes."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig

_active = threading.local()


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine_options = config.sqlalchemy_engine_options()
    engine = create_engine(config.DATABASE_URL, **engine_options)
    return engine


def init_database(engine: Engine) -> None:
    """Create the options table if it does not exist."""
    from ..models import OptionRecord

    SQLModel.metadata.create_all(engine, tables=[OptionRecord.__table__])


_AFTER_COMMIT = "optionstore.after_commit"
_AFTER_ROLLBACK = "optionstore.after_rollback"


def after_commit(session: Session, callback: Callable[[], None]) -> None:
    """Run ``callback`` once the scope that owns ``session`` has committed."""
    session.info.setdefault(_AFTER_COMMIT, []).append(callback)


def after_rollback(session: Session, callback: Callable[[], None]) -> None:
    """Run ``callback`` if the scope that owns ``session`` rolls back."""
    session.info.setdefault(_AFTER_ROLLBACK, []).append(callback)


def _run_callbacks(session: Session, name: str) -> None:
    callbacks = session.info.pop(name, [])
    session.info.pop(_AFTER_ROLLBACK if name == _AFTER_COMMIT else _AFTER_COMMIT, None)
    for callback in callbacks:
        callback()


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around operations.

    Callbacks queued with :func:`after_commit` run only after a successful
    commit; those queued with :func:`after_rollback` run after a rollback.
    """
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        _run_callbacks(session, _AFTER_ROLLBACK)
        raise
    finally:
        session.close()
    _run_callbacks(session, _AFTER_COMMIT)


def _active_sessions() -> dict[int, Session]:
    sessions = getattr(_active, "sessions", None)
    if sessions is None:
        sessions = _active.sessions = {}
    return sessions


@contextmanager
def option_transaction(engine: Engine, isolation_level: str | None = None) -> Iterator[Session]:
    """Run a unit of work against ``engine`` under ``isolation_level``.

    A scope opened while another one for the same engine is active on this
    thread joins the outer session instead of starting a second transaction;
    the isolation level of the outermost scope applies.
    """
    sessions = _active_sessions()
    scope_key = id(engine)
    outer = sessions.get(scope_key)
    if outer is not None:
        yield outer
        return

    bind = engine.execution_options(isolation_level=isolation_level) if isolation_level else engine
    with session_scope(bind) as session:
        sessions[scope_key] = session
        try:
            yield session
        finally:
            sessions.pop(scope_key, None)


def bootstrap_database(config: BaseConfig | None = None) -> Tuple[Engine, BaseConfig]:
    """Convenience bootstrap for an engine with the schema in place.

    Used by the CLI and tests to ensure consistent engine options.
    Returns (engine, config).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    return engine, cfg
