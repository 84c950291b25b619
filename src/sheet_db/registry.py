"""Cache of record tables by name."""

from __future__ import annotations

import logging

from sheet_db.grid import GridStore
from sheet_db.table import RecordTable

logger = logging.getLogger(__name__)


class TableRegistry:
    """Hands out one RecordTable per table name for the registry's lifetime.

    Tables are created on first access and never invalidated, so a header
    change in the store after that point is not seen. Build a new registry
    to pick up schema changes.
    """

    def __init__(self, store: GridStore) -> None:
        self.store = store
        self._tables: dict[str, RecordTable] = {}

    def get(self, name: str) -> RecordTable:
        """Get or create the table for the given name.

        Raises:
            TableNotFoundError: If the store has no grid called ``name``.
        """
        if name in self._tables:
            return self._tables[name]

        table = RecordTable(self.store, name)
        self._tables[name] = table
        logger.debug("Cached table %s", name)
        return table

    def cached_names(self) -> list[str]:
        """Return the names of tables created so far."""
        return list(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)
