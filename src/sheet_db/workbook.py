"""GridStore backed by an .xlsx workbook on disk."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.worksheet.worksheet import Worksheet

from sheet_db.errors import InvalidArgumentError, TableNotFoundError
from sheet_db.grid import CellAddress, GridStore
from sheet_db.types import EMPTY

logger = logging.getLogger(__name__)


def _from_cell(value: Any) -> Any:
    return EMPTY if value is None else value


def _to_cell(value: Any) -> Any:
    # Blank cells are stored as real blanks, not empty strings
    return None if isinstance(value, str) and value == EMPTY else value


class WorkbookGridStore(GridStore):
    """Exposes each worksheet of an openpyxl workbook as a grid.

    With ``autosave`` enabled every write operation saves the workbook once
    when it finishes; otherwise call :meth:`save` explicitly.
    """

    def __init__(self, path: Path | str, autosave: bool = True, create: bool = False) -> None:
        """Open or create a workbook.

        Args:
            path: Location of the .xlsx file.
            autosave: Save after every write operation.
            create: Start a new empty workbook when ``path`` does not exist.

        Raises:
            FileNotFoundError: If ``path`` does not exist and ``create`` is False.
        """
        self.path = Path(path)
        self.autosave = autosave
        self._deferred = 0
        if self.path.exists():
            self._workbook = openpyxl.load_workbook(self.path)
        elif create:
            self._workbook = openpyxl.Workbook()
            # Drop the default sheet so the workbook starts without tables
            self._workbook.remove(self._workbook.active)
        else:
            raise FileNotFoundError(f"Workbook not found: {self.path}")

    @property
    def workbook(self) -> openpyxl.Workbook:
        return self._workbook

    def create_table(self, name: str, header: Sequence[Any]) -> Worksheet:
        """Add a worksheet whose first row is ``header``."""
        if name in self._workbook.sheetnames:
            raise InvalidArgumentError(f"Table '{name}' already exists")
        sheet = self._workbook.create_sheet(title=name)
        sheet.append(list(header))
        self._flush()
        return sheet

    def resolve_table(self, name: str) -> Worksheet:
        if name not in self._workbook.sheetnames:
            raise TableNotFoundError(name)
        return self._workbook[name]

    def table_names(self) -> list[str]:
        return list(self._workbook.sheetnames)

    def read_header_row(self, handle: Worksheet) -> list[Any]:
        header = [cell.value for cell in handle[1]]
        while header and header[-1] in (None, EMPTY):
            header.pop()
        return [_from_cell(value) for value in header]

    def read_all_data_rows(self, handle: Worksheet) -> list[list[Any]]:
        return [
            [_from_cell(value) for value in row]
            for row in handle.iter_rows(min_row=2, values_only=True)
        ]

    def append_row(self, handle: Worksheet, record: Sequence[Any]) -> None:
        handle.append([_to_cell(value) for value in record])
        self._flush()

    def write_row_block(self, handle: Worksheet, start_row: int, records: Sequence[Sequence[Any]]) -> None:
        for offset, record in enumerate(records):
            self._set_row(handle, start_row + offset, record)
        self._flush()

    def write_row(self, handle: Worksheet, row: int, record: Sequence[Any]) -> None:
        self._set_row(handle, row, record)
        self._flush()

    def write_cell(self, handle: Worksheet, row: int, column: int, value: Any) -> None:
        handle.cell(row=row, column=column, value=_to_cell(value))
        self._flush()

    def batch_write_cells(self, handle: Worksheet, updates: Mapping[CellAddress, Any]) -> bool:
        for address, value in updates.items():
            handle.cell(row=address.row, column=address.column, value=_to_cell(value))
        self._flush()
        return True

    @contextmanager
    def deferred_writes(self) -> Iterator[None]:
        """Hold autosave until the block exits, then save once."""
        self._deferred += 1
        try:
            yield
        finally:
            self._deferred -= 1
            self._flush()

    def save(self) -> None:
        """Write the workbook to disk."""
        self._workbook.save(self.path)
        logger.debug("Saved workbook %s", self.path)

    def close(self) -> None:
        self._workbook.close()

    def _set_row(self, handle: Worksheet, row: int, record: Sequence[Any]) -> None:
        for column, value in enumerate(record, start=1):
            handle.cell(row=row, column=column, value=_to_cell(value))

    def _flush(self) -> None:
        if self.autosave and not self._deferred:
            self.save()


__all__ = ["WorkbookGridStore"]
