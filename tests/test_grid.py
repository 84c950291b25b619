"""Tests for cell addresses and the in-memory grid store."""

import pytest

from sheet_db.errors import InvalidArgumentError, TableNotFoundError
from sheet_db.grid import CellAddress, MemoryGridStore, parse_cell_address


class TestCellAddress:
    """Tests for A1 notation."""

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("A1", CellAddress(1, 1)),
            ("b3", CellAddress(3, 2)),
            ("Z10", CellAddress(10, 26)),
            ("AA2", CellAddress(2, 27)),
            ("$AB$12", CellAddress(12, 28)),
        ],
    )
    def test_parse(self, address, expected):
        assert parse_cell_address(address) == expected

    @pytest.mark.parametrize("address", ["", "A", "1", "A0", "1A", "A-1", "ABCD1"])
    def test_parse_invalid(self, address):
        with pytest.raises(InvalidArgumentError):
            parse_cell_address(address)

    def test_parse_non_string(self):
        with pytest.raises(InvalidArgumentError):
            parse_cell_address(11)

    def test_parse_keeps_cause(self):
        with pytest.raises(InvalidArgumentError) as excinfo:
            parse_cell_address("A0")
        assert excinfo.value.__cause__ is not None

    def test_a1(self):
        assert CellAddress(1, 1).a1 == "A1"
        assert CellAddress(10, 26).a1 == "Z10"
        assert CellAddress(4, 28).a1 == "AB4"
        assert CellAddress(1, 703).a1 == "AAA1"


class TestMemoryGridStore:
    """Tests for the in-memory store."""

    def test_resolve_missing(self):
        with pytest.raises(TableNotFoundError, match="Table 'Orders' not found"):
            MemoryGridStore().resolve_table("Orders")

    def test_read_header_and_rows(self):
        store = MemoryGridStore({"T": [["a", "b"], [1, None], [2, "x"]]})
        handle = store.resolve_table("T")
        assert store.read_header_row(handle) == ["a", "b"]
        assert store.read_all_data_rows(handle) == [[1, ""], [2, "x"]]
        assert store.table_names() == ["T"]

    def test_write_grows_grid(self):
        store = MemoryGridStore()
        sheet = store.add_table("T", ["a", "b"])
        store.write_cell(sheet, 3, 2, "z")
        assert sheet.rows == [["a", "b"], [], ["", "z"]]

    def test_batch_write(self):
        store = MemoryGridStore({"T": [["a", "b"], [1, 2]]})
        sheet = store.resolve_table("T")
        assert store.batch_write_cells(sheet, {CellAddress(2, 1): 9, CellAddress(2, 2): 8})
        assert sheet.rows[1] == [9, 8]

    def test_deferred_writes_is_passthrough(self):
        store = MemoryGridStore({"T": [["a"], [1]]})
        sheet = store.resolve_table("T")
        with store.deferred_writes():
            store.write_cell(sheet, 2, 1, 5)
        assert sheet.rows[1] == [5]
