"""Database facade addressing tables by name."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from sheet_db.grid import GridStore, MemoryGridStore
from sheet_db.registry import TableRegistry
from sheet_db.table import RecordTable
from sheet_db.types import RecordObject
from sheet_db.workbook import WorkbookGridStore


class SheetDatabase:
    """A set of grids used as tables, each operation taking a table name first."""

    def __init__(self, store: GridStore, registry: TableRegistry | None = None) -> None:
        """Initialize a database.

        Args:
            store: Store holding the grids.
            registry: Table cache to use. A new one is created when omitted.
        """
        self.store = store
        self.registry = registry if registry is not None else TableRegistry(store)

    @classmethod
    def open(cls, path: Path | str, create: bool = False, autosave: bool = True) -> SheetDatabase:
        """Open a database stored in an .xlsx workbook.

        Args:
            path: Location of the workbook.
            create: Start a new workbook if ``path`` does not exist.
            autosave: Save the workbook after every write.

        Returns:
            A new SheetDatabase.

        Raises:
            FileNotFoundError: If the workbook is missing and ``create`` is False.
        """
        return cls(WorkbookGridStore(path, autosave=autosave, create=create))

    @classmethod
    def in_memory(cls, sheets: Mapping[str, Iterable[Iterable[Any]]] | None = None) -> SheetDatabase:
        """Create a database held in memory.

        Args:
            sheets: Mapping of table name to rows, the first row being the header.
        """
        return cls(MemoryGridStore(sheets))

    def table(self, name: str) -> RecordTable:
        """Return the cached table called ``name``."""
        return self.registry.get(name)

    def table_names(self) -> list[str]:
        return self.store.table_names()

    def insert(self, table: str, obj: Mapping[str, Any]) -> int:
        return self.table(table).insert(obj)

    def insert_all(self, table: str, objs: Sequence[Mapping[str, Any]]) -> int:
        return self.table(table).insert_all(objs)

    def select_by_pk(self, table: str, pk_column: str, pk_value: Any, sort_by: Any = None) -> RecordObject | None:
        return self.table(table).select_by_pk(pk_column, pk_value, sort_by)

    def select_by_column(self, table: str, column: str, value: Any, sort_by: Any = None) -> list[RecordObject]:
        return self.table(table).select_by_column(column, value, sort_by)

    def select_by_column_sorted(self, table: str, column: str, value: Any, sort_by: Any) -> list[RecordObject]:
        """Same as :meth:`select_by_column` with a required sort."""
        return self.table(table).select_by_column_sorted(column, value, sort_by)

    def select_by_columns(
        self, table: str, criteria: Mapping[str, Any], sort_by: Any = None
    ) -> list[RecordObject]:
        return self.table(table).select_by_columns(criteria, sort_by)

    def select_all(self, table: str, sort_by: Any = None) -> list[RecordObject]:
        return self.table(table).select_all(sort_by)

    def select_max(self, table: str, column: str) -> int | float | None:
        return self.table(table).select_max(column)

    def select_by_pk_and_increment(
        self, table: str, pk_column: str, pk_value: Any, column: str, increment: int | float = 1
    ) -> int | float | None:
        return self.table(table).select_by_pk_and_increment(pk_column, pk_value, column, increment)

    def update_by_pk(
        self, table: str, pk_column: str, pk_value: Any, obj: Mapping[str, Any]
    ) -> RecordObject | None:
        return self.table(table).update_by_pk(pk_column, pk_value, obj)

    def update_item_by_pk(
        self, table: str, pk_column: str, pk_value: Any, column: str, value: Any
    ) -> RecordObject | None:
        return self.table(table).update_item_by_pk(pk_column, pk_value, column, value)

    def update_item_by_columns(
        self, table: str, criteria: Mapping[str, Any], column: str, value: Any
    ) -> list[RecordObject]:
        return self.table(table).update_item_by_columns(criteria, column, value)

    def update_items_by_columns(
        self, table: str, criteria: Mapping[str, Any], column_values: Mapping[str, Any]
    ) -> list[RecordObject]:
        return self.table(table).update_items_by_columns(criteria, column_values)

    def update_cells(self, table: str, cell_updates: Mapping[str, Any]) -> bool:
        return self.table(table).update_cells(cell_updates)

    def close(self) -> None:
        """Close the underlying store."""
        self.store.close()

    def __enter__(self) -> SheetDatabase:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
