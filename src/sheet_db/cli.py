"""Command-line access to a workbook database."""

from __future__ import annotations

import argparse
import logging
import sys
import zipfile
from pathlib import Path
from typing import Any

from openpyxl.utils.exceptions import InvalidFileException

from sheet_db.database import SheetDatabase
from sheet_db.errors import SheetDBError
from sheet_db.types import RecordObject, SortOrder, SortSpec


def parse_value(text: str) -> Any:
    """Parse a command-line value as int, then float, else keep the string."""
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            pass
    return text


def parse_criterion(text: str) -> tuple[str, str]:
    """Split ``COLUMN=VALUE`` into a column name and the raw value text.

    Matching compares text forms, so criteria values are left unparsed.
    """
    column, sep, value = text.partition("=")
    if not sep or not column:
        raise argparse.ArgumentTypeError(f"expected COLUMN=VALUE, got {text!r}")
    return column, value


def parse_assignment(text: str) -> tuple[str, Any]:
    """Split ``COLUMN=VALUE`` into a column name and a parsed value."""
    column, value = parse_criterion(text)
    return column, parse_value(value)


def parse_sort(text: str) -> SortSpec:
    """Parse ``COLUMN`` or ``COLUMN:asc|desc`` into a SortSpec."""
    column, _, order = text.rpartition(":")
    if not column:
        return SortSpec(text)
    if order.upper() not in ("ASC", "DESC"):
        # The colon belongs to the column name
        return SortSpec(text)
    return SortSpec(column, SortOrder(order.upper()))


def format_value(value: Any, max_width: int = 40) -> str:
    """Format a cell value for display."""
    if value is None or value == "":
        return ""
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float):
        return f"{value:.6g}"
    s = str(value)
    if len(s) > max_width:
        return s[:max_width - 3] + "..."
    return s


def print_records(records: list[RecordObject], columns: list[str]) -> None:
    """Print records as an aligned text table."""
    if not records:
        print("(no results)")
        return

    col_widths = {col: len(col) for col in columns}
    for record in records:
        for col in columns:
            col_widths[col] = max(col_widths[col], len(format_value(record.get(col))))

    header = " | ".join(col.ljust(col_widths[col]) for col in columns)
    print(header)
    print("-" * len(header))
    for record in records:
        print(" | ".join(format_value(record.get(col)).ljust(col_widths[col]) for col in columns))

    print(f"\n({len(records)} row{'s' if len(records) != 1 else ''})")


def run_command(db: SheetDatabase, args: argparse.Namespace) -> int:
    """Run one parsed subcommand against an open database."""
    if args.command == "tables":
        for name in db.table_names():
            print(name)
        return 0

    table = db.table(args.table)
    if args.command == "select":
        records = table.select_by_columns(dict(args.where), args.sort)
        print_records(records, table.columns)
    elif args.command == "max":
        result = table.select_max(args.column)
        print("NULL" if result is None else format_value(result))
    elif args.command == "insert":
        count = table.insert(dict(args.values))
        print(f"Inserted {count} row")
    elif args.command == "increment":
        result = table.select_by_pk_and_increment(args.pk_column, args.pk_value, args.column, args.by)
        if result is None:
            print("(no match)")
        else:
            print(format_value(result))
    elif args.command == "update":
        records = table.update_items_by_columns(dict(args.where), dict(args.set))
        print_records(records, table.columns)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sheetdb",
        description="Query and update the sheets of an .xlsx workbook as tables",
    )
    parser.add_argument("workbook", type=Path, help="Path to the .xlsx workbook")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("tables", help="List the tables in the workbook")

    select = commands.add_parser("select", help="Select rows")
    select.add_argument("table")
    select.add_argument(
        "--where",
        type=parse_criterion,
        action="append",
        default=[],
        metavar="COL=VALUE",
        help="Only rows whose column matches the value (repeatable)",
    )
    select.add_argument(
        "--sort",
        type=parse_sort,
        default=None,
        metavar="COL[:asc|desc]",
        help="Sort the result by a column",
    )

    max_parser = commands.add_parser("max", help="Largest number in a column")
    max_parser.add_argument("table")
    max_parser.add_argument("column")

    insert = commands.add_parser("insert", help="Append a row")
    insert.add_argument("table")
    insert.add_argument("values", type=parse_assignment, nargs="+", metavar="COL=VALUE")

    increment = commands.add_parser("increment", help="Increment a cell on the row with a primary key")
    increment.add_argument("table")
    increment.add_argument("pk_column")
    increment.add_argument("pk_value")
    increment.add_argument("column")
    increment.add_argument("--by", type=parse_value, default=1, help="Amount to add (default 1)")

    update = commands.add_parser("update", help="Set columns on matching rows")
    update.add_argument("table")
    update.add_argument("--where", type=parse_criterion, action="append", default=[], metavar="COL=VALUE")
    update.add_argument("--set", type=parse_assignment, action="append", required=True, metavar="COL=VALUE")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.workbook.exists():
        print(f"Error: Workbook not found: {args.workbook}", file=sys.stderr)
        return 1

    try:
        with SheetDatabase.open(args.workbook) as db:
            return run_command(db, args)
    except SheetDBError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (InvalidFileException, zipfile.BadZipFile) as e:
        print(f"Error: Cannot read workbook {args.workbook}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
