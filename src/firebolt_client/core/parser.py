"""Decoding of JSON_Compact response bodies into ResultSet objects."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from firebolt_client.core.exceptions import QueryError, SerializationError
from firebolt_client.core.models import (
    Column,
    ColumnMeta,
    CompactResponse,
    ResultSet,
    Row,
)
from firebolt_client.core.types import parse_type


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _column_name(doc: Any, index: int) -> Any:
    try:
        return doc["meta"][index].get("name")
    except (KeyError, IndexError, TypeError, AttributeError):
        return None


def _envelope_error(e: ValidationError, doc: Any) -> QueryError:
    """Map the first validation failure to a message about the envelope."""
    loc = e.errors()[0]["loc"]
    field = loc[0] if loc else "meta"
    if field == "meta":
        if len(loc) <= 1:
            return QueryError("Missing or invalid 'meta' field in response")
        if len(loc) == 2:
            return QueryError("Column metadata is not an object")
        if loc[2] == "name":
            return QueryError("Missing column name")
        return QueryError(f"Missing type for column '{_column_name(doc, loc[1])}'")
    if len(loc) <= 1:
        return QueryError("Missing or invalid 'data' field in response")
    return QueryError("Row data is not an array")


def _parse_column(meta: ColumnMeta) -> Column:
    parsed = parse_type(meta.type)
    return Column(
        name=meta.name,
        type=parsed.type,
        precision=parsed.precision,
        scale=parsed.scale,
        is_nullable=parsed.is_nullable,
    )


def parse_response(body: str | bytes) -> ResultSet:
    """Build a ResultSet from a successful response body.

    Only the structure is checked here; values stay raw until Row.get().
    Statements without a result (SET, USE DATABASE, DDL) answer with an
    empty body, which decodes to an empty ResultSet.

    Raises:
        SerializationError: body is not valid JSON (NaN and Infinity included).
        QueryError: ``meta`` or ``data`` missing or malformed.
        UnsupportedTypeError: a column type is outside the wire grammar.
    """
    if not body.strip():
        return ResultSet(columns=(), rows=[])

    try:
        doc = json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        raise SerializationError(f"Failed to parse JSON: {e}") from e

    try:
        page = CompactResponse.model_validate(doc)
    except ValidationError as e:
        raise _envelope_error(e, doc) from e

    columns = tuple(_parse_column(m) for m in page.meta)

    rows: list[Row] = []
    for i, values in enumerate(page.data):
        if len(values) != len(columns):
            msg = (
                f"Row {i} has {len(values)} values, "
                f"expected {len(columns)} columns"
            )
            raise QueryError(msg)
        rows.append(Row(values, columns))

    return ResultSet(columns=columns, rows=rows)


def parse_server_error(body: str) -> QueryError:
    """Wrap a non-2xx response body into a QueryError."""
    return QueryError(f"Server error: {body}")
