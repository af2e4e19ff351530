"""Firebolt wire types and the grammar of their textual descriptors.

Column metadata in a JSON_Compact response carries types as text, e.g.
``int``, ``null::text``, ``decimal(38, 9)`` or ``array(int)``.
parse_type() maps such a descriptor onto the closed Type enum.
"""

from __future__ import annotations

import re
from enum import StrEnum
from typing import NamedTuple

from firebolt_client.core.exceptions import UnsupportedTypeError

NULLABLE_PREFIX = "null::"

_DECIMAL_RE = re.compile(r"^decimal\((\d+),\s*(\d+)\)$")


class Type(StrEnum):
    """Scalar and composite kinds a result column can have."""

    INT = "Int"
    LONG = "Long"
    FLOAT = "Float"
    DOUBLE = "Double"
    DECIMAL = "Decimal"
    TEXT = "Text"
    DATE = "Date"
    TIMESTAMP = "Timestamp"
    TIMESTAMPTZ = "TimestampTZ"
    BOOLEAN = "Boolean"
    ARRAY = "Array"
    STRUCT = "Struct"
    GEOGRAPHY = "Geography"
    BYTES = "Bytes"


_ALIASES: dict[str, Type] = {
    "int": Type.INT,
    "bigint": Type.LONG,
    "long": Type.LONG,
    "float4": Type.FLOAT,
    "float": Type.FLOAT,
    "double": Type.DOUBLE,
    "float8": Type.DOUBLE,
    "decimal": Type.DECIMAL,
    "text": Type.TEXT,
    "string": Type.TEXT,
    "date": Type.DATE,
    "timestamp": Type.TIMESTAMP,
    "timestamptz": Type.TIMESTAMPTZ,
    "bool": Type.BOOLEAN,
    "boolean": Type.BOOLEAN,
    "bytea": Type.BYTES,
    "geography": Type.GEOGRAPHY,
}


class ParsedType(NamedTuple):
    type: Type
    is_nullable: bool
    precision: int | None = None
    scale: int | None = None


def parse_type(descriptor: str) -> ParsedType:
    """Parse a wire type descriptor.

    Array element types are not parsed; array values are surfaced as raw
    JSON. Raises UnsupportedTypeError for anything outside the grammar.
    """
    is_nullable = descriptor.startswith(NULLABLE_PREFIX)
    name = descriptor[len(NULLABLE_PREFIX) :] if is_nullable else descriptor

    match = _DECIMAL_RE.match(name)
    if match:
        return ParsedType(
            Type.DECIMAL, is_nullable, int(match.group(1)), int(match.group(2))
        )

    if name.startswith("array"):
        return ParsedType(Type.ARRAY, is_nullable)

    if name in _ALIASES:
        return ParsedType(_ALIASES[name], is_nullable)

    if name.startswith("struct"):
        return ParsedType(Type.STRUCT, is_nullable)

    raise UnsupportedTypeError(descriptor)
