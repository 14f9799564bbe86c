"""Pytest configuration and shared fixtures for optionstore tests.

Every test gets throwaway SQLite databases so option reads and writes never
touch a real configuration table.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional

import pytest
from sqlmodel import Session, create_engine, select

from optionstore.infra.database import init_database
from optionstore.models import OptionRecord
from optionstore.store import OptionStore

# =============================================================================
# Database Fixtures
# =============================================================================


def _temporary_engine():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    init_database(engine)
    return engine, db_path


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database with the options table.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    engine, db_path = _temporary_engine()

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def other_engine():
    """A second, independent database for cross-database tests."""
    engine, db_path = _temporary_engine()

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture
def store(db_engine):
    """An option store bound to the test database."""
    option_store = OptionStore(db_engine)
    yield option_store
    option_store.clear_required()


# =============================================================================
# Raw Row Helpers
# =============================================================================


@pytest.fixture
def put_row(db_engine):
    """Write a row directly, bypassing Option and its cache."""

    def _put(key: str, value: Optional[str], engine=None) -> None:
        with Session(engine or db_engine) as session:
            record = session.exec(select(OptionRecord).where(OptionRecord.key == key)).first()
            if record is None:
                record = OptionRecord(key=key, value=value)
            else:
                record.value = value
            session.add(record)
            session.commit()

    return _put


@pytest.fixture
def get_row(db_engine):
    """Read a row directly; returns the OptionRecord or None."""

    def _get(key: str, engine=None) -> Optional[OptionRecord]:
        with Session(engine or db_engine, expire_on_commit=False) as session:
            return session.exec(select(OptionRecord).where(OptionRecord.key == key)).first()

    return _get


@pytest.fixture
def count_rows(db_engine):
    def _count(engine=None) -> int:
        with Session(engine or db_engine) as session:
            return len(session.exec(select(OptionRecord)).all())

    return _count
