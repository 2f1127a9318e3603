"""
commission_services.calculator -- per-record commission driver.

Responsibility:
    Turns operation records into commission strings. For each record it
    queries the weekly history for the person's withdrawal count and volume,
    builds the typed operation, appends it to the history and renders the
    rounded commission.

Architecture position:
    Services -- stateful orchestration over the kernel. Owns exactly one
    ``WeeklyHistory`` per calculator; settings are injected.

Invariants enforced:
    - Snapshot-then-append: the history is queried before operation N is
      built and updated right after, so operation N never sees itself and
      always sees operations 1..N-1.
    - A record that fails validation, or whose commission cannot be
      computed, is never pushed into the history.
    - ``process`` never raises for a kernel error; it returns an error
      ``CommissionOutcome`` carrying the error code.

Failure modes:
    - ``calculate`` raises the kernel's typed errors
      (``UnsupportedCurrencyError``, ``UnsupportedPersonTypeError``,
      ``UnsupportedOperationTypeError``, ``InvalidRecordError``,
      ``AmountOutOfRangeError``).
    - ``run`` with ``on_error="abort"`` stops after the first error outcome.

Usage:
    from commission_config import get_active_config
    from commission_ingestion import CsvOperationAdapter
    from commission_services import CommissionCalculator

    calculator = CommissionCalculator(get_active_config())
    for outcome in calculator.run(CsvOperationAdapter().read("input.csv")):
        print(outcome.commission)
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import uuid4

from commission_ingestion.domain.records import OperationRecord, parse_record
from commission_kernel.domain.currency import CurrencyConverter
from commission_kernel.domain.history import WeeklyHistory
from commission_kernel.domain.operations import create_operation
from commission_kernel.domain.person import Person
from commission_kernel.domain.settings import CommissionSettings
from commission_kernel.domain.types import OperationType
from commission_kernel.exceptions import CommissionKernelError
from commission_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.calculator")


class OnError(str, Enum):
    """What ``run`` does after a record fails."""

    ABORT = "abort"
    SKIP = "skip"


@dataclass(frozen=True)
class CommissionOutcome:
    """Result of processing one record: a commission or an error, never both."""

    row_number: int
    commission: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.error_code is None

    @classmethod
    def success(cls, row_number: int, commission: str) -> CommissionOutcome:
        return cls(row_number=row_number, commission=commission)

    @classmethod
    def failure(cls, row_number: int, error: CommissionKernelError) -> CommissionOutcome:
        return cls(row_number=row_number, error_code=error.code, error_message=str(error))


class CommissionCalculator:
    """Computes commissions for a sequence of operation records."""

    def __init__(
        self,
        settings: CommissionSettings,
        history: WeeklyHistory | None = None,
    ):
        self._settings = settings
        self._converter = CurrencyConverter(settings.currencies)
        self._history = history if history is not None else WeeklyHistory(self._converter)

    @property
    def settings(self) -> CommissionSettings:
        return self._settings

    @property
    def converter(self) -> CurrencyConverter:
        return self._converter

    @property
    def history(self) -> WeeklyHistory:
        return self._history

    def calculate(self, record: OperationRecord) -> str:
        """Compute, record and return the rounded commission for one record."""
        person = Person.create(record.person_id, record.person_type, self._settings)

        sequence_number = 1 + self._history.operations_count_in_week(
            person, record.date, OperationType.WITHDRAWAL
        )
        already_used = self._history.amount_used_in_week(
            person, record.date, OperationType.WITHDRAWAL
        )

        operation = create_operation(
            operation_type=record.operation_type,
            date=record.date,
            person=person,
            amount=record.amount,
            currency=record.currency,
            sequence_number=sequence_number,
            already_used_this_week=already_used,
            settings=self._settings,
            converter=self._converter,
        )
        # Commission first: a failing record never reaches the history.
        commission = operation.rounded_commission()
        self._history.push(operation)

        logger.info("commission_calculated", extra={
            "operation_type": operation.type.value,
            "person_type": person.type.value,
            "amount": str(operation.amount.amount),
            "currency": operation.currency.code,
            "sequence_number": sequence_number,
            "already_used": str(already_used.amount),
            "commission": commission,
        })
        return commission

    def process(
        self,
        record: OperationRecord | Mapping[str, Any],
        row_number: int | None = None,
    ) -> CommissionOutcome:
        """
        Compute one record, returning an outcome instead of raising.

        ``record`` may be a raw row mapping from an adapter; it is parsed
        first and a malformed row becomes an ``INVALID_RECORD`` outcome.
        """
        if row_number is None:
            row_number = record.row_number if isinstance(record, OperationRecord) else 0

        with LogContext.bind(row_number=row_number):
            try:
                if not isinstance(record, OperationRecord):
                    record = parse_record(record, row_number)
                with LogContext.bind(person_id=record.person_id):
                    commission = self.calculate(record)
            except CommissionKernelError as e:
                logger.warning("record_failed", extra={
                    "error_code": e.code,
                    "error_message": str(e),
                })
                return CommissionOutcome.failure(row_number, e)
        return CommissionOutcome.success(row_number, commission)

    def run(
        self,
        records: Iterable[OperationRecord | Mapping[str, Any]],
        on_error: OnError | str = OnError.ABORT,
        source: str | None = None,
    ) -> Iterator[CommissionOutcome]:
        """
        Process records in order, yielding one outcome per record.

        Raw rows are numbered from 1 in iteration order. With ``abort`` the
        failing record's outcome is the last one yielded.
        """
        mode = OnError(on_error)
        run_id = str(uuid4())
        processed = failed = 0
        aborted = False

        with LogContext.bind(run_id=run_id, source=source):
            t0 = time.monotonic()
            logger.info("run_started", extra={"on_error": mode.value})

            for index, record in enumerate(records, start=1):
                row_number = record.row_number if isinstance(record, OperationRecord) else index
                outcome = self.process(record, row_number)
                processed += 1
                if not outcome.is_success:
                    failed += 1
                yield outcome
                if not outcome.is_success and mode is OnError.ABORT:
                    aborted = True
                    break

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info("run_completed", extra={
                "records_processed": processed,
                "records_failed": failed,
                "aborted": aborted,
                "history_size": len(self._history),
                "duration_ms": duration_ms,
            })
