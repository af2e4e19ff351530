"""Query result models for the Firebolt client.

Column and ResultSet are pydantic models; Row is a light view that keeps
the raw JSON values and converts them only when asked.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict

from firebolt_client.core.conversion import RAW, Target
from firebolt_client.core.exceptions import ColumnIndexError, ColumnNotFoundError
from firebolt_client.core.types import Type

# Zero-based ordinal or column name.
ColumnRef = int | str


class Column(BaseModel):
    """Metadata for a single result column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Type
    precision: int | None = None
    scale: int | None = None
    is_nullable: bool = False


class Row:
    """One result row.

    Values stay in their JSON representation until get() converts them,
    so repeated calls redo the conversion and never change the row.
    """

    __slots__ = ("_data", "_columns")

    def __init__(self, data: Sequence[Any], columns: tuple[Column, ...]) -> None:
        self._data = tuple(data)
        self._columns = columns

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def data(self) -> tuple[Any, ...]:
        return self._data

    def _resolve(self, ref: ColumnRef) -> int:
        if isinstance(ref, bool) or not isinstance(ref, (int, str)):
            msg = f"Column reference must be an int or str, got {type(ref).__name__}"
            raise TypeError(msg)
        if isinstance(ref, int):
            if not 0 <= ref < len(self._columns):
                raise ColumnIndexError(f"Column index {ref} out of bounds")
            return ref
        for index, column in enumerate(self._columns):
            if column.name == ref:
                return index
        raise ColumnNotFoundError(f"Column '{ref}' not found")

    def get(self, ref: ColumnRef, target: Target = RAW) -> Any:
        """Return the value of a column converted to ``target``.

        Raises:
            ColumnIndexError: ordinal outside the row.
            ColumnNotFoundError: no column with that name.
            SerializationError: value cannot become ``target``.
        """
        index = self._resolve(ref)
        return target.convert(self._data[index], self._columns[index].type)

    def as_dict(self) -> dict[str, Any]:
        """Raw values keyed by column name."""
        return {
            col.name: val for col, val in zip(self._columns, self._data, strict=True)
        }

    def __getitem__(self, ref: ColumnRef) -> Any:
        return self.get(ref)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._data == other._data and self._columns == other._columns

    def __repr__(self) -> str:
        return f"Row({list(self._data)!r})"


class ResultSet(BaseModel):
    """Result of a SQL query execution."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    columns: tuple[Column, ...]
    rows: list[Row]

    @property
    def column_names(self) -> list[str]:
        return [col.name for col in self.columns]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


class ColumnMeta(BaseModel):
    """One entry of the ``meta`` array as sent on the wire."""

    name: str
    type: str


class CompactResponse(BaseModel):
    """JSON_Compact response envelope. Unknown keys (rows, statistics) are ignored."""

    meta: list[ColumnMeta]
    data: list[list[Any]]
