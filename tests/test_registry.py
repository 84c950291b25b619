"""Tests for the table registry and the SheetDatabase facade."""

import pytest

from sheet_db import SheetDatabase, TableRegistry
from sheet_db.errors import InvalidColumnError, TableNotFoundError
from sheet_db.grid import MemoryGridStore
from sheet_db.table import RecordTable


@pytest.fixture
def store():
    return MemoryGridStore(
        {
            "Orders": [["id", "status", "qty"], [1, "open", 2], [2, "closed", 5]],
            "Customers": [["name"], ["alice"]],
        }
    )


class TestTableRegistry:
    """Tests for table caching."""

    def test_get_returns_cached_instance(self, store):
        registry = TableRegistry(store)
        first = registry.get("Orders")
        assert isinstance(first, RecordTable)
        assert registry.get("Orders") is first
        assert "Orders" in registry
        assert registry.cached_names() == ["Orders"]

    def test_tables_cached_per_name(self, store):
        registry = TableRegistry(store)
        assert registry.get("Orders") is not registry.get("Customers")
        assert len(registry) == 2

    def test_missing_table_not_cached(self, store):
        registry = TableRegistry(store)
        with pytest.raises(TableNotFoundError):
            registry.get("Products")
        assert "Products" not in registry

    def test_stale_header_kept(self, store):
        """A header change after first access is not picked up."""
        registry = TableRegistry(store)
        first = registry.get("Orders")
        store.resolve_table("Orders").rows[0] = ["order_id", "status", "qty"]
        second = registry.get("Orders")
        assert second is first
        assert second.columns == ["id", "status", "qty"]

    def test_new_registry_sees_new_header(self, store):
        TableRegistry(store).get("Orders")
        store.resolve_table("Orders").rows[0] = ["order_id", "status", "qty"]
        assert TableRegistry(store).get("Orders").columns == ["order_id", "status", "qty"]


class TestSheetDatabase:
    """Tests for operations addressed by table name."""

    def test_select_operations(self, store):
        db = SheetDatabase(store)
        assert db.select_by_pk("Orders", "id", 2)["status"] == "closed"
        assert [r["id"] for r in db.select_by_column("Orders", "status", "open")] == [1]
        assert [r["id"] for r in db.select_by_columns("Orders", {})] == [1, 2]
        assert [r["id"] for r in db.select_all("Orders", {"column": "qty", "order": "DESC"})] == [2, 1]
        assert [r["id"] for r in db.select_by_column_sorted("Orders", "status", "open", {"column": "id"})] == [1]
        assert db.select_max("Orders", "qty") == 5

    def test_write_operations(self, store):
        db = SheetDatabase(store)
        assert db.insert("Orders", {"id": 3, "status": "open"}) == 1
        assert db.insert_all("Orders", [{"id": 4}, {"id": 5}]) == 2
        assert db.select_by_pk_and_increment("Orders", "id", 3, "qty", 5) == 5
        assert db.update_by_pk("Orders", "id", 4, {"id": 4, "qty": 1}) == {"id": 4, "status": "", "qty": 1}
        assert db.update_item_by_pk("Orders", "id", 5, "status", "held")["status"] == "held"
        assert len(db.update_item_by_columns("Orders", {"status": "open"}, "qty", 0)) == 2
        assert len(db.update_items_by_columns("Orders", {"qty": 0}, {"status": "done"})) == 2
        assert db.update_cells("Orders", {"C2": 9}) is True
        assert db.select_by_pk("Orders", "id", 1) == {"id": 1, "status": "done", "qty": 9}

    def test_uses_one_registry(self, store):
        db = SheetDatabase(store)
        assert db.table("Orders") is db.registry.get("Orders")

    def test_injected_registry(self, store):
        registry = TableRegistry(store)
        db = SheetDatabase(store, registry)
        assert db.registry is registry

    def test_errors_propagate(self, store):
        db = SheetDatabase(store)
        with pytest.raises(TableNotFoundError):
            db.select_all("Products")
        with pytest.raises(InvalidColumnError):
            db.select_by_column("Orders", "sku", 1)

    def test_in_memory(self):
        db = SheetDatabase.in_memory({"T": [["a"], [1], [2]]})
        assert db.table_names() == ["T"]
        assert db.select_all("T") == [{"a": 1}, {"a": 2}]
