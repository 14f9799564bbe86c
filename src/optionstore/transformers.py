"""Conversion between stored text and typed option values."""

from __future__ import annotations

import re
import threading
import types
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union, get_args, get_origin

from .errors import TransformError, UnsupportedTypeError
from .logging_config import get_logger
from .types import Char, FixedWidthInt

T = TypeVar("T")

logger = get_logger(__name__)

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+", re.ASCII)


@dataclass(frozen=True)
class Transformer(Generic[T]):
    """A pair of functions converting ``T`` to stored text and back.

    ``unwrap`` is only called with non-null values; ``None`` is stored as SQL
    NULL without consulting the transformer.
    """

    unwrap: Callable[[T], str]
    wrap: Callable[[str], T]


def transformer(unwrap: Callable[[T], str], wrap: Callable[[str], T]) -> Transformer[T]:
    """Build a :class:`Transformer` from two plain functions."""

    return Transformer(unwrap=unwrap, wrap=wrap)


def split_optional(value_type: Any) -> tuple[Any, bool]:
    """Return ``(inner_type, nullable)`` for ``X``, ``Optional[X]`` or ``X | None``."""

    origin = get_origin(value_type)
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(value_type) if arg is not type(None)]
        nullable = len(members) != len(get_args(value_type))
        if len(members) == 1:
            return members[0], nullable
        inner = Union[tuple(members)] if members else type(None)
        return inner, nullable
    if value_type is None or value_type is type(None):
        return type(None), True
    return value_type, False


def _type_name(value_type: Any) -> str:
    return getattr(value_type, "__qualname__", None) or repr(value_type)


def _parsing(value_type: Any, parse: Callable[[str], T], *errors: type[Exception]) -> Callable[[str], T]:
    """Wrap ``parse`` so the listed exceptions become :class:`TransformError`."""

    caught = errors or (ValueError,)

    def wrap(text: str) -> T:
        try:
            return parse(text)
        except caught as exc:
            raise TransformError(f"{text!r} is not a valid {_type_name(value_type)}: {exc}") from exc

    return wrap


def _enum_transformer(enum_type: type[Enum]) -> Transformer[Any]:
    def wrap(text: str) -> Enum:
        member = enum_type.__members__.get(text)
        if member is None:
            names = ", ".join(enum_type.__members__)
            raise TransformError(
                f"{text!r} does not match any member of {enum_type.__qualname__} ({names})"
            )
        return member

    return Transformer(unwrap=lambda member: member.name, wrap=wrap)


def _parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError("expected 'true' or 'false'")


def _integer_parser(value_type: type[int]) -> Callable[[str], int]:
    def parse(text: str) -> int:
        if _INTEGER_TEXT.fullmatch(text) is None:
            raise ValueError("expected decimal digits with an optional sign")
        return value_type(text)

    return parse


def _parse_decimal(text: str) -> Decimal:
    return Decimal(text)


def _built_in_transformers() -> dict[Any, Transformer[Any]]:
    return {
        str: Transformer(unwrap=str, wrap=lambda text: text),
        Char: Transformer(unwrap=str, wrap=_parsing(Char, Char)),
        int: Transformer(unwrap=lambda v: str(int(v)), wrap=_parsing(int, _integer_parser(int))),
        float: Transformer(unwrap=repr, wrap=_parsing(float, float)),
        Decimal: Transformer(
            unwrap=str, wrap=_parsing(Decimal, _parse_decimal, InvalidOperation, ValueError)
        ),
        bool: Transformer(unwrap=lambda v: "true" if v else "false", wrap=_parsing(bool, _parse_bool)),
        date: Transformer(unwrap=date.isoformat, wrap=_parsing(date, date.fromisoformat)),
        datetime: Transformer(unwrap=datetime.isoformat, wrap=_parsing(datetime, datetime.fromisoformat)),
        time: Transformer(unwrap=time.isoformat, wrap=_parsing(time, time.fromisoformat)),
    }


class TransformerRegistry:
    """Memoizes one transformer per requested type.

    Built-ins cover ``str``, :class:`~optionstore.types.Char`, ``int``, the
    fixed-width integers, ``float``, ``Decimal``, ``bool``, ``date``,
    ``datetime``, ``time`` and every ``Enum`` subclass. ``Optional[X]`` uses
    the transformer for ``X``. Anything else raises
    :class:`UnsupportedTypeError` until a transformer is registered for it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._transformers: dict[Any, Transformer[Any]] = _built_in_transformers()

    def __contains__(self, value_type: Any) -> bool:
        inner, _ = split_optional(value_type)
        with self._lock:
            return inner in self._transformers

    def register(self, value_type: Any, value_transformer: Transformer[Any]) -> None:
        """Use ``value_transformer`` for ``value_type`` from now on."""

        inner, _ = split_optional(value_type)
        with self._lock:
            self._transformers[inner] = value_transformer

    def get_or_create(self, value_type: Any) -> Transformer[Any]:
        inner, _ = split_optional(value_type)
        with self._lock:
            existing = self._transformers.get(inner)
        if existing is not None:
            return existing

        built = self._build(inner)
        logger.debug(f"Built transformer for {_type_name(inner)}")
        with self._lock:
            # A concurrent first build for the same type may have won; keep one.
            return self._transformers.setdefault(inner, built)

    def _build(self, value_type: Any) -> Transformer[Any]:
        if isinstance(value_type, type):
            if issubclass(value_type, Enum):
                return _enum_transformer(value_type)
            if issubclass(value_type, FixedWidthInt):
                return Transformer(
                    unwrap=lambda v: str(int(v)),
                    wrap=_parsing(value_type, _integer_parser(value_type), ValueError, OverflowError),
                )
        raise UnsupportedTypeError(value_type)


__all__ = ["Transformer", "TransformerRegistry", "split_optional", "transformer"]
