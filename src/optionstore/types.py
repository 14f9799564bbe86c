"""Type witnesses for values Python has no dedicated builtin for.

Fixed-width integers behave exactly like ``int`` but refuse values outside
their range, so an option declared as ``Int16`` cannot silently store a value
another reader of the same table would reject. ``Char`` is a one code point
string.
"""

from __future__ import annotations

from typing import ClassVar


class FixedWidthInt(int):
    """An ``int`` constrained to ``[MIN, MAX]``."""

    MIN: ClassVar[int]
    MAX: ClassVar[int]

    def __new__(cls, value=0):
        number = int.__new__(cls, value)
        if not cls.MIN <= number <= cls.MAX:
            raise OverflowError(
                f"{int(number)} is out of range for {cls.__name__} [{cls.MIN}, {cls.MAX}]"
            )
        return number

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"


class Int8(FixedWidthInt):
    MIN, MAX = -(2**7), 2**7 - 1


class Int16(FixedWidthInt):
    MIN, MAX = -(2**15), 2**15 - 1


class Int32(FixedWidthInt):
    MIN, MAX = -(2**31), 2**31 - 1


class Int64(FixedWidthInt):
    MIN, MAX = -(2**63), 2**63 - 1


class UInt8(FixedWidthInt):
    MIN, MAX = 0, 2**8 - 1


class UInt16(FixedWidthInt):
    MIN, MAX = 0, 2**16 - 1


class UInt32(FixedWidthInt):
    MIN, MAX = 0, 2**32 - 1


class UInt64(FixedWidthInt):
    MIN, MAX = 0, 2**64 - 1


class Char(str):
    """A string holding exactly one code point."""

    def __new__(cls, value: str):
        text = str.__new__(cls, value)
        if len(text) != 1:
            raise ValueError(f"Char requires exactly one character, got {len(text)}")
        return text


FIXED_WIDTH_INTS = (Int8, Int16, Int32, Int64, UInt8, UInt16, UInt32, UInt64)

__all__ = [
    "Char",
    "FIXED_WIDTH_INTS",
    "FixedWidthInt",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
]
