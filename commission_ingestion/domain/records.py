"""
commission_ingestion.domain.records -- raw row to ``OperationRecord``.

ZERO I/O. Parses only the shape of a row: the date (optionally with a time),
an integer person id and a decimal-safe amount of at most
``MAX_AMOUNT_INTEGER_DIGITS`` integer digits. Person type, operation type and currency are kept as
text; the kernel validates them against configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from commission_ingestion.adapters.csv_adapter import EXTRA_COLUMNS_KEY, OPERATION_COLUMNS
from commission_kernel.exceptions import InvalidRecordError

# Larger amounts do not fit the kernel's working precision once converted.
MAX_AMOUNT_INTEGER_DIGITS = 30


@dataclass(frozen=True)
class OperationRecord:
    """One parsed input row. ``amount`` stays text so no precision is lost."""

    row_number: int
    date: datetime
    person_id: int
    person_type: str
    operation_type: str
    amount: str
    currency: str


def _text(row: Mapping[str, Any], name: str, row_number: int) -> str:
    value = row.get(name)
    if value is None:
        raise InvalidRecordError(row_number, name, value, "is missing")
    text = str(value).strip()
    if not text:
        raise InvalidRecordError(row_number, name, value, "is empty")
    return text


def _parse_date(text: str, row_number: int) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise InvalidRecordError(
            row_number, "date", text, "is not an ISO date (YYYY-MM-DD[ HH:MM:SS])"
        ) from None


def _parse_person_id(text: str, row_number: int) -> int:
    try:
        return int(text)
    except ValueError:
        raise InvalidRecordError(row_number, "person_id", text, "is not an integer") from None


def _parse_amount(text: str, row_number: int) -> str:
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidRecordError(row_number, "amount", text, "is not a decimal number") from None
    if not amount.is_finite():
        raise InvalidRecordError(row_number, "amount", text, "is not a finite number")
    if amount < 0:
        raise InvalidRecordError(row_number, "amount", text, "must be non-negative")
    if amount.adjusted() >= MAX_AMOUNT_INTEGER_DIGITS:
        raise InvalidRecordError(
            row_number,
            "amount",
            text,
            f"has more than {MAX_AMOUNT_INTEGER_DIGITS} integer digits",
        )
    if amount.is_zero():
        return str(amount.copy_abs())  # "-0.00" -> "0.00"
    return text


def parse_record(row: Mapping[str, Any], row_number: int) -> OperationRecord:
    """
    Parse one raw row.

    Raises:
        InvalidRecordError: wrong column count, bad date, non-integer id or
            non-decimal amount.
    """
    extra = row.get(EXTRA_COLUMNS_KEY)
    if extra:
        raise InvalidRecordError(
            row_number,
            "row",
            list(extra),
            f"has more than {len(OPERATION_COLUMNS)} columns",
        )

    return OperationRecord(
        row_number=row_number,
        date=_parse_date(_text(row, "date", row_number), row_number),
        person_id=_parse_person_id(_text(row, "person_id", row_number), row_number),
        person_type=_text(row, "person_type", row_number),
        operation_type=_text(row, "operation_type", row_number),
        amount=_parse_amount(_text(row, "amount", row_number), row_number),
        currency=_text(row, "currency", row_number),
    )
