"""Conversion of raw JSON values into Python scalars.

A Target names the Python value a caller wants back from Row.get() and
the declared column types it can be produced from. Every target has a
nullable variant (``INT.or_none()``) that maps JSON null to None instead
of raising.
"""

from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from firebolt_client.core.exceptions import SerializationError
from firebolt_client.core.types import Type

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

HEX_PREFIX = "\\x"

# Plain decimal notation only: no whitespace, no "_" separators, no NaN/Infinity
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_int32(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        if _INT32_MIN <= value <= _INT32_MAX:
            return value
    raise SerializationError(f"Failed to convert {value!r} to int32")


def _to_bigint(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        if not _INTEGER_RE.fullmatch(value):
            msg = f"Failed to parse big integer from string {value!r}"
            raise SerializationError(msg)
        return int(value, 10)
    raise SerializationError(f"Failed to convert {value!r} to big integer")


def _as_float(value: Any, target: str) -> float:
    if not _is_number(value):
        raise SerializationError(f"Failed to convert {value!r} to {target}")
    try:
        return float(value)
    except OverflowError:
        msg = f"Failed to convert {value!r} to {target}: out of range"
        raise SerializationError(msg) from None


def _to_float32(value: Any) -> float:
    result = _as_float(value, "float32")
    try:
        return struct.unpack("f", struct.pack("f", result))[0]
    except OverflowError:
        return math.copysign(math.inf, result)


def _to_float64(value: Any) -> float:
    return _as_float(value, "float64")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, str):
        if not _DECIMAL_RE.fullmatch(value):
            msg = f"Failed to parse decimal from string {value!r}"
            raise SerializationError(msg)
        try:
            result = Decimal(value)
        except InvalidOperation:
            msg = f"Failed to parse decimal from string {value!r}"
            raise SerializationError(msg) from None
    elif _is_number(value):
        # str() keeps the shortest repr, Decimal(float) would not
        result = Decimal(str(value))
    else:
        raise SerializationError(f"Failed to convert {value!r} to decimal")
    if not result.is_finite():
        raise SerializationError(f"Failed to convert {value!r} to decimal")
    return result


def _to_text(value: Any) -> str:
    if not isinstance(value, str):
        raise SerializationError(f"Failed to convert {value!r} to text")
    return value


def _to_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise SerializationError(f"Failed to convert {value!r} to boolean")
    return value


def _to_bytes(value: Any) -> bytes:
    if not isinstance(value, str):
        raise SerializationError(f"Failed to convert {value!r} to bytes")
    if value.startswith(HEX_PREFIX):
        try:
            return bytes.fromhex(value[len(HEX_PREFIX) :])
        except ValueError:
            raise SerializationError("Failed to decode hex string") from None
    return value.encode("utf-8")


@dataclass(frozen=True)
class Target:
    """A Python value Row.get() can produce.

    ``accepts`` of None means any declared column type is allowed.
    """

    name: str
    accepts: frozenset[Type] | None
    decode: Callable[[Any], Any]
    nullable: bool = False

    def or_none(self) -> Target:
        return replace(self, nullable=True)

    def __str__(self) -> str:
        return f"Optional[{self.name}]" if self.nullable else self.name

    def convert(self, value: Any, column_type: Type) -> Any:
        if self.accepts is None:
            return value
        if value is None and self.nullable:
            return None
        if column_type not in self.accepts:
            raise SerializationError(f"Cannot convert {column_type} to {self}")
        if value is None:
            raise SerializationError("Cannot convert null to non-nullable type")
        return self.decode(value)


INT = Target("int32", frozenset({Type.INT}), _to_int32)
BIGINT = Target("bigint", frozenset({Type.LONG}), _to_bigint)
FLOAT = Target("float32", frozenset({Type.FLOAT}), _to_float32)
DOUBLE = Target("float64", frozenset({Type.DOUBLE}), _to_float64)
DECIMAL = Target("Decimal", frozenset({Type.DECIMAL}), _to_decimal)
TEXT = Target("str", frozenset({Type.TEXT}), _to_text)
BOOLEAN = Target("bool", frozenset({Type.BOOLEAN}), _to_bool)
BYTES = Target("bytes", frozenset({Type.BYTES}), _to_bytes)
RAW = Target("raw", None, lambda value: value)

OPTIONAL_INT = INT.or_none()
OPTIONAL_BIGINT = BIGINT.or_none()
OPTIONAL_FLOAT = FLOAT.or_none()
OPTIONAL_DOUBLE = DOUBLE.or_none()
OPTIONAL_DECIMAL = DECIMAL.or_none()
OPTIONAL_TEXT = TEXT.or_none()
OPTIONAL_BOOLEAN = BOOLEAN.or_none()
OPTIONAL_BYTES = BYTES.or_none()
