"""Sheet DB - Spreadsheet grids used as lightweight record tables."""

from sheet_db.codec import decode, encode
from sheet_db.database import SheetDatabase
from sheet_db.errors import (
    InvalidArgumentError,
    InvalidColumnError,
    SheetDBError,
    TableNotFoundError,
    TypeMismatchError,
)
from sheet_db.grid import CellAddress, GridStore, MemoryGridStore, parse_cell_address
from sheet_db.query import sort_records, values_match
from sheet_db.registry import TableRegistry
from sheet_db.table import RecordTable
from sheet_db.types import EMPTY, ColumnIndex, SortOrder, SortSpec
from sheet_db.workbook import WorkbookGridStore

__all__ = [
    # Main API
    "SheetDatabase",
    "TableRegistry",
    "RecordTable",
    # Storage
    "GridStore",
    "MemoryGridStore",
    "WorkbookGridStore",
    "CellAddress",
    "parse_cell_address",
    # Records
    "ColumnIndex",
    "EMPTY",
    "SortOrder",
    "SortSpec",
    "decode",
    "encode",
    "sort_records",
    "values_match",
    # Errors
    "SheetDBError",
    "TableNotFoundError",
    "InvalidColumnError",
    "InvalidArgumentError",
    "TypeMismatchError",
]

__version__ = "0.1.0"
