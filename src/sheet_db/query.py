"""Criteria matching and sorting over positional records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from functools import cmp_to_key
from typing import Any

from sheet_db.types import ColumnIndex, Record, SortOrder, SortSpec, cell_text, is_number


def values_match(cell: Any, expected: Any) -> bool:
    """Return whether a cell value matches an expected value.

    Values match when their text forms are equal, so ``7`` matches ``"7"``
    and ``None`` matches the empty sentinel. Every pk and criteria comparison
    goes through this function.
    """
    return cell_text(cell) == cell_text(expected)


def resolve_criteria(
    criteria: Mapping[str, Any], index: ColumnIndex, table: str | None = None
) -> list[tuple[int, Any]]:
    """Resolve criteria column names to positions, failing on unknown names."""
    return [(index.position(column, table), value) for column, value in criteria.items()]


def matches(record: Sequence[Any], resolved: Sequence[tuple[int, Any]]) -> bool:
    """Return whether a record satisfies every resolved criterion.

    An empty criteria list matches every record.
    """
    return all(values_match(record[position], value) for position, value in resolved)


def _type_rank(value: Any) -> int:
    if isinstance(value, bool) or is_number(value):
        return 0
    if isinstance(value, (date, datetime, time)):
        return 1
    return 2


def compare_values(a: Any, b: Any) -> int:
    """Three-way comparison using the native ``<``/``>`` operators.

    Pairs Python refuses to compare (a string against a number, say) fall
    back to ordering by type rank (numbers, then dates, then text) and then
    by their text form.
    """
    try:
        return -1 if a < b else 1 if a > b else 0
    except TypeError:
        key_a = (_type_rank(a), cell_text(a))
        key_b = (_type_rank(b), cell_text(b))
        return -1 if key_a < key_b else 1 if key_a > key_b else 0


def sort_records(
    records: list[Record],
    sort_by: SortSpec | None,
    index: ColumnIndex,
    table: str | None = None,
) -> list[Record]:
    """Sort records by one column.

    ``None`` returns the records unchanged. The sort is stable, so records
    that compare equal keep their input order in both directions.

    Raises:
        InvalidColumnError: If the sort column is not in the header.
    """
    if sort_by is None:
        return records
    position = index.position(sort_by.column, table)
    sign = -1 if sort_by.order is SortOrder.DESC else 1

    def compare(row_a: Record, row_b: Record) -> int:
        return sign * compare_values(row_a[position], row_b[position])

    return sorted(records, key=cmp_to_key(compare))


__all__ = ["compare_values", "matches", "resolve_criteria", "sort_records", "values_match"]
