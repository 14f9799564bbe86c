"""Exception types raised by option declaration, reads and writes."""

from __future__ import annotations

from typing import Iterable


class OptionStoreError(Exception):
    """Base class for every error raised by this package."""


class RequiredOptionMissing(OptionStoreError, LookupError):
    """An option was read but no value is stored for its key."""

    def __init__(self, key: str):
        super().__init__(f"Required option {key} is not set in database")
        self.key = key


class AggregateRequiredMissing(OptionStoreError):
    """One or more required options are not populated."""

    def __init__(self, keys: Iterable[str]):
        self.keys = list(keys)
        super().__init__(f"Required options {', '.join(self.keys)} are not set in database")


class TransformError(OptionStoreError, ValueError):
    """Stored text could not be converted to the option's type."""

    def __init__(self, message: str, *, key: str | None = None):
        super().__init__(message)
        self.key = key


class UnsupportedTypeError(OptionStoreError, TypeError):
    """No built-in transformer exists for the requested type."""

    def __init__(self, value_type: object):
        name = getattr(value_type, "__qualname__", None) or repr(value_type)
        super().__init__(
            f"Option cannot be converted to {name}; provide a custom transformer"
        )
        self.value_type = value_type


class UnsupportedOperationError(OptionStoreError, TypeError):
    """A numeric mutation was invoked on a non-numeric option."""


class DatabaseNotBoundError(OptionStoreError, RuntimeError):
    """An option needs a database but neither it nor its store has one."""


__all__ = [
    "AggregateRequiredMissing",
    "DatabaseNotBoundError",
    "OptionStoreError",
    "RequiredOptionMissing",
    "TransformError",
    "UnsupportedOperationError",
    "UnsupportedTypeError",
]
