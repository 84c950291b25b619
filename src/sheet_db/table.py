"""Record-level access to a single grid."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from sheet_db.codec import decode, encode, fit_width
from sheet_db.errors import InvalidArgumentError, TypeMismatchError
from sheet_db.grid import CellAddress, GridStore, parse_cell_address
from sheet_db.query import matches, resolve_criteria, sort_records, values_match
from sheet_db.types import (
    DATA_ROW_OFFSET,
    EMPTY,
    ColumnIndex,
    Record,
    RecordObject,
    SortSpec,
    is_number,
)

logger = logging.getLogger(__name__)


def _require_column_name(column: Any, argument: str) -> None:
    if not isinstance(column, str) or column == "":
        raise InvalidArgumentError(f"Invalid {argument}: {column!r}")


class RecordTable:
    """Reads and writes the rows of one grid as records keyed by column name.

    The column index is built from the header row when the table is created
    and never refreshed. Data rows are read from the store again by every
    operation; writes are addressed by physical row number, computed from
    the position of the row in that fresh read.

    The table does no locking. Callers must not let other writers modify
    the same grid between a read and the write that follows it.
    """

    def __init__(self, store: GridStore, name: str) -> None:
        """Open a table.

        Args:
            store: Store holding the grid.
            name: Name of the grid.

        Raises:
            TableNotFoundError: If the store has no grid called ``name``.
        """
        self.store = store
        self.name = name
        self._handle = store.resolve_table(name)
        self.column_index = ColumnIndex.from_header(store.read_header_row(self._handle))
        logger.debug("Opened table %s with columns %s", name, list(self.column_index.header))

    @property
    def columns(self) -> list[str]:
        """Return the distinct column names in header order."""
        return self.column_index.names

    # Inserts

    def insert(self, obj: Mapping[str, Any]) -> int:
        """Append one record as a new row and return the number of rows added."""
        self.store.append_row(self._handle, encode(obj, self.column_index))
        return 1

    def insert_all(self, objs: Sequence[Mapping[str, Any]]) -> int:
        """Write records as one contiguous block after the last row.

        Raises:
            InvalidArgumentError: If ``objs`` is empty.
        """
        if not objs:
            raise InvalidArgumentError("insert_all requires at least one record")
        records = [encode(obj, self.column_index) for obj in objs]
        start_row = len(self._read_records()) + DATA_ROW_OFFSET
        self.store.write_row_block(self._handle, start_row, records)
        logger.debug("Inserted %d rows into %s at row %d", len(records), self.name, start_row)
        return len(records)

    # Selects

    def select_by_pk(self, pk_column: str, pk_value: Any, sort_by: Any = None) -> RecordObject | None:
        """Return the first record whose ``pk_column`` matches, or None.

        Primary keys are not assumed to be unique; later duplicates are
        ignored.
        """
        position = self._position(pk_column)
        spec = SortSpec.coerce(sort_by)
        if spec is not None:
            self._position(spec.column)
        found = self._find_first(position, pk_value)
        if found is None:
            return None
        return decode(found[1], self.column_index)

    def select_by_column(self, column: str, value: Any, sort_by: Any = None) -> list[RecordObject]:
        """Return every record whose ``column`` matches ``value``."""
        return self.select_by_columns({column: value}, sort_by)

    def select_by_columns(self, criteria: Mapping[str, Any], sort_by: Any = None) -> list[RecordObject]:
        """Return every record matching all criteria; empty criteria match all."""
        resolved = resolve_criteria(criteria, self.column_index, self.name)
        records = [record for record in self._read_records() if matches(record, resolved)]
        return self._decode_sorted(records, sort_by)

    def select_all(self, sort_by: Any = None) -> list[RecordObject]:
        """Return every record in physical row order, or sorted by ``sort_by``."""
        return self._decode_sorted(self._read_records(), sort_by)

    def select_by_pk_sorted(self, pk_column: str, pk_value: Any, sort_by: Any) -> RecordObject | None:
        return self.select_by_pk(pk_column, pk_value, sort_by)

    def select_by_column_sorted(self, column: str, value: Any, sort_by: Any) -> list[RecordObject]:
        return self.select_by_column(column, value, sort_by)

    def select_by_columns_sorted(self, criteria: Mapping[str, Any], sort_by: Any) -> list[RecordObject]:
        return self.select_by_columns(criteria, sort_by)

    def select_all_sorted(self, sort_by: Any) -> list[RecordObject]:
        return self.select_all(sort_by)

    def select_max(self, column: str) -> int | float | None:
        """Return the largest numeric value in ``column``.

        Cells that are not numbers are skipped. Returns None when the table
        has no rows or the column holds no numbers.
        """
        _require_column_name(column, "column name")
        position = self._position(column)
        numbers = [record[position] for record in self._read_records() if is_number(record[position])]
        return max(numbers) if numbers else None

    # Updates

    def select_by_pk_and_increment(
        self, pk_column: str, pk_value: Any, column: str, increment: int | float = 1
    ) -> int | float | None:
        """Add ``increment`` to one cell of the first matching row.

        An empty cell counts as 0. Only the changed cell is written back.
        This is a read followed by a write and is not atomic.

        Returns:
            The new value, or None if no row matches.

        Raises:
            InvalidArgumentError: For an empty column name or a non-numeric increment.
            TypeMismatchError: If the cell holds a value that is not a number.
        """
        _require_column_name(pk_column, "pk column name")
        _require_column_name(column, "column name")
        if not is_number(increment) or math.isnan(increment):
            raise InvalidArgumentError(f"Invalid increment value: {increment!r}")

        pk_position = self._position(pk_column)
        position = self._position(column)
        found = self._find_first(pk_position, pk_value)
        if found is None:
            return None

        data_index, record = found
        current = record[position]
        if current is None or current == EMPTY:
            current = 0
        elif not is_number(current):
            raise TypeMismatchError(
                f"Column '{column}' in table '{self.name}' is not a number: {current!r}"
            )

        new_value = current + increment
        self.store.write_cell(self._handle, data_index + DATA_ROW_OFFSET, position + 1, new_value)
        return new_value

    def update_by_pk(self, pk_column: str, pk_value: Any, obj: Mapping[str, Any]) -> RecordObject | None:
        """Replace the whole first matching row with ``obj``.

        Columns missing from ``obj`` are reset to the empty sentinel.
        """
        position = self._position(pk_column)
        found = self._find_first(position, pk_value)
        if found is None:
            return None
        record = encode(obj, self.column_index)
        self._write_record(found[0], record)
        return decode(record, self.column_index)

    def update_item_by_pk(self, pk_column: str, pk_value: Any, column: str, value: Any) -> RecordObject | None:
        """Set one column on the first matching row, keeping the other cells."""
        return self._patch_first(pk_column, pk_value, {column: value})

    def update_item_by_columns(self, criteria: Mapping[str, Any], column: str, value: Any) -> list[RecordObject]:
        """Set one column on every row matching ``criteria``."""
        return self.update_items_by_columns(criteria, {column: value})

    def update_items_by_columns(
        self, criteria: Mapping[str, Any], column_values: Mapping[str, Any]
    ) -> list[RecordObject]:
        """Set several columns on every row matching ``criteria``.

        Each matching row is rewritten in full. Returns the updated records,
        or an empty list when nothing matched.
        """
        resolved = resolve_criteria(criteria, self.column_index, self.name)
        patch = resolve_criteria(column_values, self.column_index, self.name)
        updated = []
        with self.store.deferred_writes():
            for data_index, record in enumerate(self._read_records()):
                if not matches(record, resolved):
                    continue
                for position, value in patch:
                    record[position] = value
                self._write_record(data_index, record)
                updated.append(decode(record, self.column_index))
        return updated

    def update_cells(self, cell_updates: Mapping[str, Any]) -> bool:
        """Write several cells, addressed in A1 notation, in one store request.

        Returns:
            True if the store applied the batch. A rejected or failed batch
            is logged and reported as False rather than raised.

        Raises:
            InvalidArgumentError: If ``cell_updates`` is not a mapping or holds
                a malformed address.
        """
        if not isinstance(cell_updates, Mapping):
            raise InvalidArgumentError(
                "cell_updates must be a mapping of cell addresses to new values"
            )
        updates: dict[CellAddress, Any] = {
            parse_cell_address(address): value for address, value in cell_updates.items()
        }
        if not updates:
            return True

        try:
            applied = self.store.batch_write_cells(self._handle, updates)
        except Exception:
            logger.exception("Batch write of %d cells to %s failed", len(updates), self.name)
            return False
        if not applied:
            logger.warning("Store rejected batch write of %d cells to %s", len(updates), self.name)
            return False
        return True

    # Helpers

    def _position(self, column: Any) -> int:
        return self.column_index.position(column, self.name)

    def _read_records(self) -> list[Record]:
        return [fit_width(row, self.column_index) for row in self.store.read_all_data_rows(self._handle)]

    def _find_first(self, position: int, value: Any) -> tuple[int, Record] | None:
        for data_index, record in enumerate(self._read_records()):
            if values_match(record[position], value):
                return data_index, record
        return None

    def _patch_first(self, pk_column: str, pk_value: Any, column_values: Mapping[str, Any]) -> RecordObject | None:
        pk_position = self._position(pk_column)
        patch = resolve_criteria(column_values, self.column_index, self.name)
        found = self._find_first(pk_position, pk_value)
        if found is None:
            return None
        data_index, record = found
        for position, value in patch:
            record[position] = value
        self._write_record(data_index, record)
        return decode(record, self.column_index)

    def _write_record(self, data_index: int, record: Record) -> None:
        row = data_index + DATA_ROW_OFFSET
        self.store.write_row(self._handle, row, record)
        logger.debug("Wrote row %d of %s", row, self.name)

    def _decode_sorted(self, records: list[Record], sort_by: Any) -> list[RecordObject]:
        records = sort_records(records, SortSpec.coerce(sort_by), self.column_index, self.name)
        return [decode(record, self.column_index) for record in records]

    def __repr__(self) -> str:
        return f"RecordTable({self.name!r}, columns={self.columns!r})"
