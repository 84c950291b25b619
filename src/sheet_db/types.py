"""Core data types for sheet_db: cell values, column indexes and sort specs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sheet_db.errors import InvalidArgumentError, InvalidColumnError

# Positional row, one cell per header column
Record = list[Any]

# Column name -> cell value
RecordObject = dict[str, Any]

# Placeholder written to cells that have no value
EMPTY = ""

# Row 1 is the header, so data index 0 lives on physical row 2
DATA_ROW_OFFSET = 2


def cell_text(value: Any) -> str:
    """Return the text form of a cell value used for matching and naming.

    ``None`` and the empty sentinel both render as ``""``, booleans render in
    lower case and integral floats drop their fractional part, so a number read
    back from a spreadsheet as ``7.0`` has the same text as ``7`` and ``"7"``.
    """
    if value is None:
        return EMPTY
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_number(value: Any) -> bool:
    """Return whether value is an int or float (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SortOrder(Enum):
    """Direction of a sort."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, value: Any) -> SortOrder:
        """Parse a SortOrder from an enum member or a case-insensitive string."""
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise InvalidArgumentError(f"Invalid sort order: {value!r}")


@dataclass(frozen=True)
class SortSpec:
    """A column to sort by and the direction to sort in."""

    column: str
    order: SortOrder = SortOrder.ASC

    @classmethod
    def coerce(cls, value: Any) -> SortSpec | None:
        """Build a SortSpec from the shapes callers commonly pass.

        Accepts ``None`` (no sorting), an existing SortSpec, a mapping with
        ``column`` and optional ``order`` keys, or a ``(column, order)`` tuple.
        """
        if value is None or isinstance(value, SortSpec):
            return value
        if isinstance(value, Mapping):
            if "column" not in value:
                raise InvalidArgumentError("Sort spec mapping requires a 'column' key")
            return cls(value["column"], SortOrder.parse(value.get("order", SortOrder.ASC)))
        if isinstance(value, tuple) and len(value) == 2:
            return cls(value[0], SortOrder.parse(value[1]))
        raise InvalidArgumentError(f"Invalid sort spec: {value!r}")


@dataclass(frozen=True)
class ColumnIndex:
    """Immutable mapping from column name to zero-based position.

    Built once from a header row snapshot. When the header repeats a name,
    the last column carrying that name wins in lookups, but every header
    cell still counts towards the record width.
    """

    header: tuple[str, ...]
    positions: Mapping[str, int] = field(repr=False)

    @classmethod
    def from_header(cls, header: Iterable[Any]) -> ColumnIndex:
        names = tuple(name if isinstance(name, str) else cell_text(name) for name in header)
        positions: dict[str, int] = {}
        for position, name in enumerate(names):
            positions[name] = position
        return cls(names, positions)

    @property
    def width(self) -> int:
        """Return the number of header cells (the length of every record)."""
        return len(self.header)

    @property
    def names(self) -> list[str]:
        """Return the distinct column names in header order."""
        return list(self.positions)

    def position(self, column: Any, table: str | None = None) -> int:
        """Return the position for a column name.

        Raises:
            InvalidColumnError: If the name is not in the header.
        """
        try:
            return self.positions[column]
        except (KeyError, TypeError):
            raise InvalidColumnError(column, table) from None

    def __contains__(self, column: object) -> bool:
        return column in self.positions

    def __len__(self) -> int:
        return len(self.positions)
