"""Grid storage contract and an in-memory implementation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from openpyxl.utils.cell import column_index_from_string, coordinate_from_string, get_column_letter
from openpyxl.utils.exceptions import CellCoordinatesException

from sheet_db.errors import InvalidArgumentError, TableNotFoundError
from sheet_db.types import EMPTY

logger = logging.getLogger(__name__)


class CellAddress(NamedTuple):
    """1-based physical position of a cell."""

    row: int
    column: int

    @property
    def a1(self) -> str:
        return f"{get_column_letter(self.column)}{self.row}"


def parse_cell_address(address: str) -> CellAddress:
    """Parse an A1-style address such as ``"B3"`` or ``"$AA$10"``.

    Raises:
        InvalidArgumentError: If the address is not valid A1 notation.
    """
    if not isinstance(address, str):
        raise InvalidArgumentError(f"Cell address must be a string, got {type(address).__name__}")
    try:
        letters, row = coordinate_from_string(address.strip())
        return CellAddress(row, column_index_from_string(letters))
    except (CellCoordinatesException, ValueError) as e:
        raise InvalidArgumentError(f"Invalid cell address: {address!r}") from e


class GridStore:
    """Storage for named two-dimensional grids.

    Rows and columns are 1-based physical positions; row 1 holds the
    header. Handles returned by :meth:`resolve_table` are opaque to callers
    and only passed back into the same store.
    """

    def resolve_table(self, name: str) -> Any:
        """Return a handle for the grid called ``name``.

        Raises:
            TableNotFoundError: If no such grid exists.
        """
        raise NotImplementedError

    def table_names(self) -> list[str]:
        """Return the names of all grids in the store."""
        raise NotImplementedError

    def read_header_row(self, handle: Any) -> list[Any]:
        raise NotImplementedError

    def read_all_data_rows(self, handle: Any) -> list[list[Any]]:
        """Return every row below the header, blank cells as the empty sentinel."""
        raise NotImplementedError

    def append_row(self, handle: Any, record: Sequence[Any]) -> None:
        raise NotImplementedError

    def write_row_block(self, handle: Any, start_row: int, records: Sequence[Sequence[Any]]) -> None:
        raise NotImplementedError

    def write_row(self, handle: Any, row: int, record: Sequence[Any]) -> None:
        raise NotImplementedError

    def write_cell(self, handle: Any, row: int, column: int, value: Any) -> None:
        raise NotImplementedError

    def batch_write_cells(self, handle: Any, updates: Mapping[CellAddress, Any]) -> bool:
        """Write many cells in one request and report whether it was applied."""
        raise NotImplementedError

    @contextmanager
    def deferred_writes(self) -> Iterator[None]:
        """Group several write calls so the store can persist them once."""
        yield

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self) -> GridStore:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


@dataclass
class MemorySheet:
    """A grid held in memory. ``rows[0]`` is the header row."""

    name: str
    rows: list[list[Any]] = field(default_factory=list)

    def ensure_cell(self, row: int, column: int) -> None:
        """Grow the grid so that the 1-based (row, column) cell exists."""
        while len(self.rows) < row:
            self.rows.append([])
        cells = self.rows[row - 1]
        if len(cells) < column:
            cells.extend([EMPTY] * (column - len(cells)))


class MemoryGridStore(GridStore):
    """GridStore keeping every grid in process memory."""

    def __init__(self, sheets: Mapping[str, Iterable[Iterable[Any]]] | None = None) -> None:
        """Initialize the store.

        Args:
            sheets: Optional mapping of sheet name to rows, the first row
                being the header.
        """
        self._sheets: dict[str, MemorySheet] = {}
        for name, rows in (sheets or {}).items():
            self._sheets[name] = MemorySheet(name, [list(row) for row in rows])

    def add_table(self, name: str, header: Sequence[Any], rows: Iterable[Sequence[Any]] = ()) -> MemorySheet:
        """Create (or replace) a grid with a header and optional data rows."""
        sheet = MemorySheet(name, [list(header)] + [list(row) for row in rows])
        self._sheets[name] = sheet
        return sheet

    def resolve_table(self, name: str) -> MemorySheet:
        try:
            return self._sheets[name]
        except KeyError:
            raise TableNotFoundError(name) from None

    def table_names(self) -> list[str]:
        return list(self._sheets)

    def read_header_row(self, handle: MemorySheet) -> list[Any]:
        return list(handle.rows[0]) if handle.rows else []

    def read_all_data_rows(self, handle: MemorySheet) -> list[list[Any]]:
        return [[EMPTY if value is None else value for value in row] for row in handle.rows[1:]]

    def append_row(self, handle: MemorySheet, record: Sequence[Any]) -> None:
        handle.rows.append(list(record))

    def write_row_block(self, handle: MemorySheet, start_row: int, records: Sequence[Sequence[Any]]) -> None:
        for offset, record in enumerate(records):
            self.write_row(handle, start_row + offset, record)

    def write_row(self, handle: MemorySheet, row: int, record: Sequence[Any]) -> None:
        for column, value in enumerate(record, start=1):
            self.write_cell(handle, row, column, value)

    def write_cell(self, handle: MemorySheet, row: int, column: int, value: Any) -> None:
        handle.ensure_cell(row, column)
        handle.rows[row - 1][column - 1] = value

    def batch_write_cells(self, handle: MemorySheet, updates: Mapping[CellAddress, Any]) -> bool:
        for address, value in updates.items():
            self.write_cell(handle, address.row, address.column, value)
        logger.debug("Wrote %d cells to %s", len(updates), handle.name)
        return True


__all__ = [
    "CellAddress",
    "GridStore",
    "MemoryGridStore",
    "MemorySheet",
    "parse_cell_address",
]
