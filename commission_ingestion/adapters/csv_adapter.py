"""
CSV operation adapter.

Reads header-less operation files, one operation per line:

    date,person_id,person_type,operation_type,amount,currency

Uses csv.DictReader with fixed field names. Handles BOM via utf-8-sig when
encoding is utf-8. Streams rows; blank lines are skipped. Rows with too many
columns keep the surplus under ``EXTRA_COLUMNS_KEY``; missing columns are
``None``. Both are reported later by ``parse_record``.
"""

from __future__ import annotations

import csv
from collections.abc import Iterator
from pathlib import Path
from typing import Any

OPERATION_COLUMNS: tuple[str, ...] = (
    "date",
    "person_id",
    "person_type",
    "operation_type",
    "amount",
    "currency",
)

EXTRA_COLUMNS_KEY = "_extra"


def _get_encoding(encoding: str) -> str:
    if encoding.lower() == "utf-8":
        return "utf-8-sig"  # Strip BOM if present
    return encoding


class CsvOperationAdapter:
    """Read operation CSV files as one dict per row. Streams; does not load entire file."""

    def __init__(self, delimiter: str = ",", encoding: str = "utf-8"):
        self.delimiter = delimiter
        self.encoding = _get_encoding(encoding)

    def read(self, source_path: Path | str) -> Iterator[dict[str, Any]]:
        with Path(source_path).open("r", encoding=self.encoding, newline="") as f:
            reader = csv.DictReader(
                f,
                fieldnames=list(OPERATION_COLUMNS),
                restkey=EXTRA_COLUMNS_KEY,
                delimiter=self.delimiter,
            )
            yield from reader
