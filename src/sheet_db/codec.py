"""Conversion between record objects and positional records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sheet_db.types import EMPTY, ColumnIndex, Record, RecordObject


def encode(obj: Mapping[str, Any], index: ColumnIndex) -> Record:
    """Encode a record object into a positional record.

    Keys that are not column names are ignored; columns missing from ``obj``
    are filled with the empty sentinel.
    """
    record: Record = [EMPTY] * index.width
    for column, value in obj.items():
        position = index.positions.get(column) if isinstance(column, str) else None
        if position is not None:
            record[position] = value
    return record


def decode(record: Sequence[Any], index: ColumnIndex) -> RecordObject:
    """Decode a positional record into a record object keyed by column name."""
    return {column: record[position] for column, position in index.positions.items()}


def fit_width(row: Sequence[Any], index: ColumnIndex) -> Record:
    """Pad a row read from a store with empty cells, or trim it, to the header width."""
    width = index.width
    record = list(row[:width])
    if len(record) < width:
        record.extend([EMPTY] * (width - len(record)))
    return record


__all__ = ["decode", "encode", "fit_width"]
