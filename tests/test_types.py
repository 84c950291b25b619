"""Tests for column indexes, sort specs and the record codec."""

import pytest

from sheet_db.codec import decode, encode, fit_width
from sheet_db.errors import InvalidArgumentError, InvalidColumnError
from sheet_db.types import EMPTY, ColumnIndex, SortOrder, SortSpec, cell_text, is_number


class TestColumnIndex:
    """Tests for building column indexes from header rows."""

    def test_positions_follow_header(self):
        """Each name maps to its zero-based position."""
        index = ColumnIndex.from_header(["id", "name", "qty"])
        assert index.position("id") == 0
        assert index.position("name") == 1
        assert index.position("qty") == 2
        assert index.width == 3
        assert index.names == ["id", "name", "qty"]

    def test_duplicate_name_last_wins(self):
        """A repeated header name resolves to its last column."""
        index = ColumnIndex.from_header(["id", "note", "note"])
        assert index.position("note") == 2
        assert len(index) == 2
        # Width still counts every header cell
        assert index.width == 3

    def test_empty_header(self):
        """An empty header gives an index where every lookup fails."""
        index = ColumnIndex.from_header([])
        assert index.width == 0
        with pytest.raises(InvalidColumnError):
            index.position("id")

    def test_unknown_column(self):
        """Unknown names raise InvalidColumnError, which is also a KeyError."""
        index = ColumnIndex.from_header(["id"])
        with pytest.raises(KeyError, match="Invalid column name: 'missing' in table 'Orders'"):
            index.position("missing", "Orders")

    def test_non_string_header_cells(self):
        """Numeric header cells are named by their text form."""
        index = ColumnIndex.from_header(["id", 2024, 2025.0])
        assert index.names == ["id", "2024", "2025"]

    def test_contains(self):
        index = ColumnIndex.from_header(["id", "name"])
        assert "name" in index
        assert "qty" not in index


class TestCellText:
    """Tests for the text form used in matching."""

    def test_values(self):
        assert cell_text(None) == ""
        assert cell_text("") == ""
        assert cell_text(7) == "7"
        assert cell_text(7.0) == "7"
        assert cell_text(7.5) == "7.5"
        assert cell_text(True) == "true"
        assert cell_text(False) == "false"
        assert cell_text("abc") == "abc"

    def test_is_number(self):
        assert is_number(1)
        assert is_number(1.5)
        assert not is_number(True)
        assert not is_number("1")
        assert not is_number(None)


class TestSortSpec:
    """Tests for coercing sort specs."""

    def test_none(self):
        assert SortSpec.coerce(None) is None

    def test_spec_passthrough(self):
        spec = SortSpec("qty", SortOrder.DESC)
        assert SortSpec.coerce(spec) is spec

    def test_mapping(self):
        assert SortSpec.coerce({"column": "qty", "order": "DESC"}) == SortSpec("qty", SortOrder.DESC)
        assert SortSpec.coerce({"column": "qty", "order": "asc"}) == SortSpec("qty", SortOrder.ASC)
        assert SortSpec.coerce({"column": "qty"}) == SortSpec("qty", SortOrder.ASC)

    def test_tuple(self):
        assert SortSpec.coerce(("qty", "DESC")) == SortSpec("qty", SortOrder.DESC)

    def test_invalid(self):
        with pytest.raises(InvalidArgumentError):
            SortSpec.coerce({"order": "ASC"})
        with pytest.raises(InvalidArgumentError):
            SortSpec.coerce({"column": "qty", "order": "sideways"})
        with pytest.raises(InvalidArgumentError):
            SortSpec.coerce(42)


class TestCodec:
    """Tests for encoding and decoding records."""

    def test_encode_fills_missing_columns(self):
        """Columns missing from the object become the empty sentinel."""
        index = ColumnIndex.from_header(["id", "name", "qty"])
        assert encode({"id": 1, "qty": 5}, index) == [1, EMPTY, 5]

    def test_encode_ignores_unknown_keys(self):
        index = ColumnIndex.from_header(["id", "name"])
        assert encode({"id": 1, "color": "red"}, index) == [1, EMPTY]

    def test_encode_duplicate_header(self):
        """Writes to a duplicated name land in its last column."""
        index = ColumnIndex.from_header(["id", "note", "note"])
        assert encode({"note": "x"}, index) == [EMPTY, EMPTY, "x"]

    def test_decode(self):
        index = ColumnIndex.from_header(["id", "name", "qty"])
        assert decode([1, "Widget", 3], index) == {"id": 1, "name": "Widget", "qty": 3}

    def test_decode_then_encode_preserves_record(self):
        index = ColumnIndex.from_header(["id", "name", "qty"])
        record = [2, "Gadget", ""]
        assert encode(decode(record, index), index) == record

    def test_fit_width(self):
        """Short rows are padded and long rows trimmed to the header width."""
        index = ColumnIndex.from_header(["a", "b", "c"])
        assert fit_width([1], index) == [1, EMPTY, EMPTY]
        assert fit_width([1, 2, 3, 4], index) == [1, 2, 3]
