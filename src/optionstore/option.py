"""Typed handles to rows of the options table."""

from __future__ import annotations

import functools
import math
import operator
from contextlib import AbstractContextManager
from datetime import timedelta
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .cache import Cacheable
from .errors import (
    DatabaseNotBoundError,
    RequiredOptionMissing,
    TransformError,
    UnsupportedOperationError,
)
from .infra.database import after_commit, after_rollback, option_transaction
from .infra.repositories.options import SQLModelOptionRepository
from .logging_config import get_logger
from .transformers import Transformer, split_optional

if TYPE_CHECKING:  # pragma: no cover
    from .store import OptionStore

T = TypeVar("T")

logger = get_logger(__name__)


def _truncated_divide(dividend: int, divisor: int) -> int:
    """Integer quotient rounded toward zero."""
    quotient = abs(dividend) // abs(divisor)
    return -quotient if (dividend < 0) != (divisor < 0) else quotient


def _truncated_remainder(dividend: int, divisor: int) -> int:
    """Remainder carrying the sign of the dividend."""
    return dividend - divisor * _truncated_divide(dividend, divisor)


_INTEGER_OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": _truncated_divide,
    "remainder": _truncated_remainder,
}
_FLOAT_OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
    "remainder": math.fmod,
}
# Decimal's own % already takes the sign of the dividend.
_DECIMAL_OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
    "remainder": operator.mod,
}
_NUMERIC_KINDS: dict[str, tuple[dict[str, Callable[[Any, Any], Any]], tuple[type, ...]]] = {
    # kind: (operations, accepted operand types)
    "integer": (_INTEGER_OPERATIONS, (int,)),
    "float": (_FLOAT_OPERATIONS, (int, float)),
    "decimal": (_DECIMAL_OPERATIONS, (int, Decimal)),
}


def numeric_kind(value_type: Any) -> str | None:
    """Return the arithmetic kind for ``value_type`` or None when it has none."""

    if not isinstance(value_type, type) or issubclass(value_type, (bool, Enum)):
        return None
    if issubclass(value_type, int):
        return "integer"
    if issubclass(value_type, float):
        return "float"
    if issubclass(value_type, Decimal):
        return "decimal"
    return None


class Option(Generic[T]):
    """A named, typed value stored in the options table.

    ``value`` runs the option's resolver inside :meth:`transaction`. When a
    cache duration was given, a fresh cached value is returned without
    touching the database, and :meth:`set` updates the cache eagerly.
    """

    def __init__(
        self,
        key: str,
        value_type: Any,
        *,
        store: OptionStore,
        transformer: Optional[Transformer[T]] = None,
        cache_time: timedelta | float | None = None,
        database: Optional[Engine] = None,
        isolation_level: Optional[str] = None,
        resolver: Optional[Callable[[Option[T]], T]] = None,
    ):
        if not key:
            raise ValueError("Option key must not be empty")
        self.key = key
        self.value_type, self.nullable = split_optional(value_type)
        self.store = store
        self.transformer: Transformer[T] = transformer or store.transformers.get_or_create(value_type)
        self.cache: Optional[Cacheable[T]] = Cacheable(cache_time) if cache_time is not None else None
        self.database = database
        self.isolation_level = isolation_level
        self.resolver: Callable[[Option[T]], T] = resolver or Option.get_or_throw

    def __repr__(self) -> str:
        type_name = getattr(self.value_type, "__qualname__", repr(self.value_type))
        suffix = " | None" if self.nullable else ""
        return f"Option({self.key!r}, {type_name}{suffix})"

    @property
    def engine(self) -> Engine:
        engine = self.database if self.database is not None else self.store.engine
        if engine is None:
            raise DatabaseNotBoundError(
                f"Option {self.key} has no database; pass one or bind the store to an engine"
            )
        return engine

    def transaction(self) -> AbstractContextManager[Session]:
        """Open (or join) a unit of work on this option's database."""
        return option_transaction(self.engine, self.isolation_level)

    # Reads and writes

    def _resolve(self) -> T:
        with self.transaction():
            return self.resolver(self)

    def read(self) -> T:
        if self.cache is None:
            return self._resolve()
        return self.cache.get_or_compute(self._resolve)

    @property
    def value(self) -> T:
        return self.read()

    def set(self, value: Optional[T]) -> Option[T]:
        """Store ``value`` (``None`` becomes SQL NULL) and return the option.

        The cached value is replaced once the enclosing transaction commits.
        Until then reads go to the database, and a rollback leaves the cache
        empty.
        """

        if value is None and not self.nullable:
            raise TypeError(f"Option {self.key} is not nullable")
        try:
            text = None if value is None else self.transformer.unwrap(value)
        except (TypeError, ValueError) as exc:
            raise TransformError(f"Option {self.key}: {exc}", key=self.key) from exc
        with self.transaction() as session:
            SQLModelOptionRepository(session).upsert(self.key, text)
            if self.cache is not None:
                self.cache.refresh()
                after_commit(session, functools.partial(self.cache.set, value))
                after_rollback(session, self.cache.refresh)
        logger.debug(f"Option {self.key} written")
        return self

    write = set

    def refresh(self) -> None:
        """Forget the cached value; the next read goes to the database."""
        if self.cache is not None:
            self.cache.refresh()

    # Accessors

    def get_or_null(self) -> Optional[T]:
        """Return the stored value, or None when no value is stored."""

        with self.transaction() as session:
            record = SQLModelOptionRepository(session).select_by_key(self.key)
            text = record.value if record is not None else None
        if text is None:
            return None
        try:
            return self.transformer.wrap(text)
        except ValueError as exc:
            raise TransformError(f"Option {self.key}: {exc}", key=self.key) from exc

    def get_or_throw(self) -> T:
        value = self.get_or_null()
        if value is None:
            raise RequiredOptionMissing(self.key)
        return value

    def get_or_set(self, default: Optional[T]) -> Optional[T]:
        """Return the stored value, storing ``default`` first when there is none.

        A ``None`` default is never written.
        """

        with self.transaction():
            current = self.get_or_null()
            if current is not None:
                return current
            if default is None:
                return None
            self.set(default)
            return default

    # Numeric mutation

    def _coerce(self, result: Any) -> T:
        if numeric_kind(self.value_type) == "decimal":
            return result
        try:
            return self.value_type(result)
        except OverflowError as exc:
            raise TransformError(f"Option {self.key}: {exc}", key=self.key) from exc

    def _mutate(self, operation: str, operand: Any) -> Option[T]:
        kind = numeric_kind(self.value_type)
        if kind is None:
            type_name = getattr(self.value_type, "__qualname__", repr(self.value_type))
            raise UnsupportedOperationError(
                f"Option {self.key} of type {type_name} does not support {operation}"
            )
        operations, operand_types = _NUMERIC_KINDS[kind]
        if isinstance(operand, bool) or not isinstance(operand, operand_types):
            raise UnsupportedOperationError(
                f"Option {self.key} cannot {operation} a {type(operand).__name__} operand"
            )

        with self.transaction():
            current = self.value
            if current is None:
                if self.nullable:
                    return self
                raise RequiredOptionMissing(self.key)
            self.set(self._coerce(operations[operation](current, operand)))
        return self

    def increment(self) -> Option[T]:
        return self._mutate("add", 1)

    def decrement(self) -> Option[T]:
        return self._mutate("subtract", 1)

    def add(self, operand: Any) -> Option[T]:
        return self._mutate("add", operand)

    def subtract(self, operand: Any) -> Option[T]:
        return self._mutate("subtract", operand)

    def multiply(self, operand: Any) -> Option[T]:
        return self._mutate("multiply", operand)

    def divide(self, operand: Any) -> Option[T]:
        return self._mutate("divide", operand)

    def remainder(self, operand: Any) -> Option[T]:
        return self._mutate("remainder", operand)

    __iadd__ = add
    __isub__ = subtract
    __imul__ = multiply
    __itruediv__ = divide
    __imod__ = remainder


__all__ = ["Option", "numeric_kind"]
