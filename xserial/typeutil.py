"""Scalar kinds that serializers exchange, and their numeric limits."""

from __future__ import annotations

import enum
import math
import struct
import sys
from dataclasses import dataclass
from typing import Any

_FLOAT_MAX = 3.4028234663852886e38
_DOUBLE_MAX = sys.float_info.max


class ScalarKind(enum.Enum):
    """The scalar types a serializer accepts."""

    BOOL = "bool"
    CHAR = "char"
    SCHAR = "signed char"
    UCHAR = "unsigned char"
    SHORT = "short"
    USHORT = "unsigned short"
    INT = "int"
    UINT = "unsigned int"
    LONG = "long"
    ULONG = "unsigned long"
    LONGLONG = "long long"
    ULONGLONG = "unsigned long long"
    FLOAT = "float"
    DOUBLE = "double"
    LONGDOUBLE = "long double"
    STRING = "string"

    def is_integer(self) -> bool:
        """True for the character and integer kinds, not for bool."""
        return self in _INTEGER_LIMITS

    def is_floating(self) -> bool:
        """True for the floating-point kinds."""
        return self in _FLOAT_LIMITS

    def limits(self) -> tuple[int | float, int | float]:
        """The lowest and highest value this kind can hold."""
        if self is ScalarKind.BOOL:
            return (0, 1)
        if self in _INTEGER_LIMITS:
            return _INTEGER_LIMITS[self]
        if self in _FLOAT_LIMITS:
            return _FLOAT_LIMITS[self]
        raise TypeError(f"{self.value} has no numeric limits")


def _bits(width: int, signed: bool) -> tuple[int, int]:
    if signed:
        return (-(1 << (width - 1)), (1 << (width - 1)) - 1)
    return (0, (1 << width) - 1)


_INTEGER_LIMITS = {
    ScalarKind.CHAR: _bits(8, True),
    ScalarKind.SCHAR: _bits(8, True),
    ScalarKind.UCHAR: _bits(8, False),
    ScalarKind.SHORT: _bits(16, True),
    ScalarKind.USHORT: _bits(16, False),
    ScalarKind.INT: _bits(32, True),
    ScalarKind.UINT: _bits(32, False),
    ScalarKind.LONG: _bits(64, True),
    ScalarKind.ULONG: _bits(64, False),
    ScalarKind.LONGLONG: _bits(64, True),
    ScalarKind.ULONGLONG: _bits(64, False),
}

_FLOAT_LIMITS = {
    ScalarKind.FLOAT: (-_FLOAT_MAX, _FLOAT_MAX),
    ScalarKind.DOUBLE: (-_DOUBLE_MAX, _DOUBLE_MAX),
    ScalarKind.LONGDOUBLE: (-_DOUBLE_MAX, _DOUBLE_MAX),
}


def _normalize(kind: ScalarKind, value: Any) -> Any:
    if kind is ScalarKind.BOOL:
        if not isinstance(value, bool):
            raise TypeError(f"bool expected, got {value!r}")
        return value
    if kind is ScalarKind.STRING:
        if not isinstance(value, str):
            raise TypeError(f"str expected, got {value!r}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"number expected for {kind.value}, got {value!r}")
    if kind.is_integer():
        if not isinstance(value, int):
            raise TypeError(f"int expected for {kind.value}, got {value!r}")
        lowest, highest = kind.limits()
        if not lowest <= value <= highest:
            raise OverflowError(f"{value} does not fit in {kind.value}")
        return value
    result = float(value)
    if kind is ScalarKind.FLOAT:
        if math.isfinite(result) and abs(result) > _FLOAT_MAX:
            raise OverflowError(f"{value} does not fit in float")
        result = struct.unpack("f", struct.pack("f", result))[0]
    return result


@dataclass(frozen=True)
class Scalar:
    """A value tagged with the exact scalar kind it is written as."""

    kind: ScalarKind
    value: Any

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _normalize(self.kind, self.value))


def kind_of(value: Any) -> ScalarKind | None:
    """The scalar kind a value is written as, or None if it is not a scalar."""
    if isinstance(value, Scalar):
        return value.kind
    if isinstance(value, bool):
        return ScalarKind.BOOL
    if isinstance(value, int):
        for kind in (ScalarKind.INT, ScalarKind.LONGLONG, ScalarKind.ULONGLONG):
            lowest, highest = kind.limits()
            if lowest <= value <= highest:
                return kind
        raise OverflowError(f"{value} does not fit in any integer kind")
    if isinstance(value, float):
        return ScalarKind.DOUBLE
    if isinstance(value, str):
        return ScalarKind.STRING
    return None


def can_assign(kind: ScalarKind, value: int | float) -> bool:
    """Whether a number lies within the range of a numeric kind."""
    if kind is ScalarKind.STRING:
        raise TypeError("string is not a numeric kind")
    if not isinstance(value, (int, float)):
        raise TypeError(f"number expected, got {value!r}")
    lowest, highest = kind.limits()
    return lowest <= value <= highest


def is_weak_convertible(kind: ScalarKind) -> bool:
    """Whether values of this kind may be converted between numeric kinds."""
    return kind.is_integer() or kind.is_floating()