"""
WeeklyHistory -- per-person, per-week record of processed operations.

Responsibility:
    Stores every operation in a bucket keyed by the Monday-Sunday week that
    contains its date and the person id, and answers "how much / how many
    this week" queries used to build the next operation.

Architecture position:
    Kernel > Domain -- in-memory, single owner, zero I/O. One instance per
    run, owned by the driver.

Protocol:
    For each record the driver queries the history FIRST (sequence number,
    volume already used) and pushes the new operation AFTER constructing
    it. An operation therefore never sees its own contribution.

Invariants enforced:
    - A bucket only holds operations of one person in one Monday-Sunday week.
    - Buckets keep arrival order; history is never pruned or reordered.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from types import MappingProxyType

from commission_kernel.domain.currency import CurrencyConverter
from commission_kernel.domain.operations import Operation
from commission_kernel.domain.person import Person
from commission_kernel.domain.types import OperationType
from commission_kernel.domain.values import Money
from commission_kernel.exceptions import UnsupportedOperationTypeError
from commission_kernel.logging_config import get_logger

logger = get_logger("domain.history")


@dataclass(frozen=True, order=True)
class WeekKey:
    """Bucket key: the Monday and Sunday of a week plus the person id."""

    monday: date
    sunday: date
    person_id: int

    @classmethod
    def for_date(cls, person_id: int, when: date | datetime) -> WeekKey:
        day = when.date() if isinstance(when, datetime) else when
        monday = day - timedelta(days=day.weekday())
        return cls(monday=monday, sunday=monday + timedelta(days=6), person_id=person_id)

    def __str__(self) -> str:
        return f"{self.monday.isoformat()}/{self.sunday.isoformat()}#{self.person_id}"


def _resolve_filter(operation_type: str | OperationType | None) -> OperationType | None:
    if operation_type is None or isinstance(operation_type, OperationType):
        return operation_type
    try:
        return OperationType(operation_type)
    except ValueError:
        raise UnsupportedOperationTypeError(
            str(operation_type), [t.value for t in OperationType]
        ) from None


class WeeklyHistory:
    """Operations grouped by (week, person) in arrival order."""

    def __init__(self, converter: CurrencyConverter):
        self._converter = converter
        self._buckets: dict[WeekKey, list[Operation]] = {}
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def buckets(self) -> Mapping[WeekKey, tuple[Operation, ...]]:
        """Read-only snapshot of all buckets."""
        return MappingProxyType({key: tuple(ops) for key, ops in self._buckets.items()})

    def week_key(self, person_id: int, when: date | datetime) -> WeekKey:
        return WeekKey.for_date(person_id, when)

    def push(self, operation: Operation) -> WeeklyHistory:
        """Append ``operation`` to its bucket. Returns self for chaining."""
        key = WeekKey.for_date(operation.person.id, operation.date)
        self._buckets.setdefault(key, []).append(operation)
        self._count += 1
        logger.debug("operation_pushed", extra={
            "week": str(key),
            "operation_type": operation.type.value,
            "bucket_size": len(self._buckets[key]),
        })
        return self

    def operations_in_week(
        self,
        person: Person,
        when: date | datetime,
        operation_type: str | OperationType | None = None,
    ) -> tuple[Operation, ...]:
        """Operations of ``person`` in the week of ``when``, optionally filtered by type."""
        kind = _resolve_filter(operation_type)
        bucket = self._buckets.get(WeekKey.for_date(person.id, when), [])
        if kind is None:
            return tuple(bucket)
        return tuple(op for op in bucket if op.type is kind)

    def amount_used_in_week(
        self,
        person: Person,
        when: date | datetime,
        operation_type: str | OperationType | None = None,
    ) -> Money:
        """Total amount, in the main currency, of the matching operations."""
        main = self._converter.main
        scale = self._converter.scale
        total = Money.zero(main)
        for operation in self.operations_in_week(person, when, operation_type):
            in_main = self._converter.convert_money(operation.amount, main)
            total = total.plus(in_main, scale)
        return total

    def operations_count_in_week(
        self,
        person: Person,
        when: date | datetime,
        operation_type: str | OperationType | None = None,
    ) -> int:
        """Number of matching operations of ``person`` in the week of ``when``."""
        return len(self.operations_in_week(person, when, operation_type))
