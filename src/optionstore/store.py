"""Option declaration and required-option validation."""

from __future__ import annotations

import threading
from datetime import timedelta
from typing import Any, Callable, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .errors import AggregateRequiredMissing, DatabaseNotBoundError, RequiredOptionMissing
from .infra.database import bootstrap_database, init_database
from .logging_config import get_logger
from .option import Option
from .transformers import Transformer, TransformerRegistry

logger = get_logger(__name__)


class OptionStore:
    """Owns the default database, the transformer registry and the required set.

    Each store is independent, so separate configuration scopes (or test
    runs) never share tracked options or transformers.
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        transformers: Optional[TransformerRegistry] = None,
        default_cache_time: timedelta | float | None = None,
    ):
        self.engine = engine
        self.transformers = transformers or TransformerRegistry()
        self.default_cache_time = default_cache_time
        self._required: list[Option[Any]] = []
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: Optional[BaseConfig] = None) -> OptionStore:
        """Build a store bound to the configured database, creating the table."""
        engine, cfg = bootstrap_database(config)
        return cls(engine, default_cache_time=cfg.CACHE_SECONDS)

    def bind(self, engine: Engine) -> OptionStore:
        """Use ``engine`` for options declared without a database."""
        self.engine = engine
        return self

    def create_schema(self) -> None:
        if self.engine is None:
            raise DatabaseNotBoundError("Cannot create the options table without an engine")
        init_database(self.engine)

    def option(
        self,
        key: str,
        value_type: Any,
        cache_time: timedelta | float | None = None,
        transformer: Optional[Transformer[Any]] = None,
        database: Optional[Engine] = None,
        isolation_level: Optional[str] = None,
        resolver: Optional[Callable[[Option[Any]], Any]] = None,
    ) -> Option[Any]:
        """Declare an option.

        Args:
            key: Unique, non-empty row key
            value_type: Value type; ``Optional[X]`` / ``X | None`` makes it nullable
            cache_time: Seconds or timedelta to reuse a read value (``INFINITE`` allowed);
                falls back to the store's ``default_cache_time``
            transformer: Custom conversion; defaults to the registry entry for ``value_type``
            database: Engine to use instead of the store's default
            isolation_level: SQLAlchemy isolation level name for this option's transactions
            resolver: Computes the current value; defaults to ``Option.get_or_throw``

        Returns:
            The declared option. Non-nullable options are tracked as required.
        """
        declared: Option[Any] = Option(
            key,
            value_type,
            store=self,
            transformer=transformer,
            cache_time=cache_time if cache_time is not None else self.default_cache_time,
            database=database,
            isolation_level=isolation_level,
            resolver=resolver,
        )
        if not declared.nullable:
            self.track_required(declared)
        logger.debug(f"Declared {declared!r}")
        return declared

    # Required options

    def track_required(self, option: Option[Any]) -> None:
        with self._lock:
            self._required.append(option)

    @property
    def required_options(self) -> tuple[Option[Any], ...]:
        with self._lock:
            return tuple(self._required)

    def check_required(self) -> None:
        """Read every required option and report all that are missing at once.

        Raises:
            AggregateRequiredMissing: naming every key with no value
        """
        missing: list[str] = []
        for option in self.required_options:
            try:
                value = option.value
            except RequiredOptionMissing:
                value = None
            if value is None:
                missing.append(option.key)

        if missing:
            logger.warning(f"Required options missing: {', '.join(missing)}")
            raise AggregateRequiredMissing(missing)

    def clear_required(self) -> None:
        with self._lock:
            self._required.clear()


__all__ = ["OptionStore"]
