"""Typed, database-backed configuration options."""

from __future__ import annotations

from .cache import INFINITE, Cacheable
from .config import BaseConfig
from .errors import (
    AggregateRequiredMissing,
    DatabaseNotBoundError,
    OptionStoreError,
    RequiredOptionMissing,
    TransformError,
    UnsupportedOperationError,
    UnsupportedTypeError,
)
from .option import Option
from .store import OptionStore
from .transformers import Transformer, TransformerRegistry, transformer
from .types import Char, Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64

__all__ = [
    "AggregateRequiredMissing",
    "BaseConfig",
    "Cacheable",
    "Char",
    "DatabaseNotBoundError",
    "INFINITE",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Option",
    "OptionStore",
    "OptionStoreError",
    "RequiredOptionMissing",
    "TransformError",
    "Transformer",
    "TransformerRegistry",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedOperationError",
    "UnsupportedTypeError",
    "transformer",
]
