"""Exceptions raised by sheet_db."""

from __future__ import annotations


class SheetDBError(Exception):
    """Base class for all sheet_db errors."""


class TableNotFoundError(SheetDBError, LookupError):
    """Raised when no grid with the requested name exists in the store."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Table '{name}' not found")
        self.name = name


class InvalidColumnError(SheetDBError, KeyError):
    """Raised when a column name is not present in a table's header."""

    def __init__(self, column: object, table: str | None = None) -> None:
        where = f" in table '{table}'" if table else ""
        super().__init__(f"Invalid column name: {column!r}{where}")
        self.column = column
        self.table = table

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class InvalidArgumentError(SheetDBError, ValueError):
    """Raised for malformed arguments (bad increment, empty batch, ...)."""


class TypeMismatchError(SheetDBError, TypeError):
    """Raised when a cell holds a value of the wrong type for the operation."""
