"""
Operations -- per-type commission rules.

Responsibility:
    Represents one deposit or withdrawal together with the weekly history
    snapshot it was built from, and computes its commission.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Operations are built by the driver
    from a history snapshot and pushed into ``WeeklyHistory`` right after
    construction.

Commission pipeline (shared by all variants):
    1. base = amount_for_commission()        (variant hook)
    2. raw  = base * percent[type]
    3. validate_commission(raw)              (variant hook: cap or floor)
    4. rounded to the display scale on request

Variants:
    Deposit     -- full amount; commission capped by the configured maximum.
    Withdrawal  -- legal: full amount, commission floored by the configured
                   minimum. natural: weekly free allowance by count and
                   volume, only the part above the allowance is charged.

Failure modes:
    - UnsupportedOperationTypeError: type not in the configured set.
    - UnexpectedOperationTypeError: type known but built with the wrong variant.
    - UnsupportedCurrencyError: currency not supported.
    - UnsupportedPersonTypeError: guard inside withdrawal rule evaluation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from commission_kernel.domain.currency import CurrencyConverter
from commission_kernel.domain.person import Person
from commission_kernel.domain.rounding import round_amount
from commission_kernel.domain.settings import CommissionSettings
from commission_kernel.domain.types import OperationType, PersonType
from commission_kernel.domain.values import Currency, Money, to_decimal
from commission_kernel.exceptions import (
    UnexpectedOperationTypeError,
    UnsupportedOperationTypeError,
    UnsupportedPersonTypeError,
)
from commission_kernel.logging_config import get_logger

logger = get_logger("domain.operations")


def resolve_operation_type(
    operation_type: str | OperationType,
    settings: CommissionSettings,
) -> OperationType:
    """Map a raw type value to an OperationType allowed by configuration."""
    raw = operation_type.value if isinstance(operation_type, OperationType) else operation_type
    if raw not in settings.operation_types:
        raise UnsupportedOperationTypeError(str(raw), settings.operation_types)
    try:
        return OperationType(raw)
    except ValueError:
        raise UnsupportedOperationTypeError(str(raw), settings.operation_types) from None


@dataclass(frozen=True)
class Operation(ABC):
    """
    Base class for a single deposit or withdrawal.

    ``sequence_number`` is this person's 1-based withdrawal count in the
    week including this operation. ``already_used_this_week`` is the
    withdrawal volume, in the main currency, the person used this week
    before this operation.
    """

    operation_type: ClassVar[OperationType]

    date: datetime | date
    person: Person
    amount: Money
    sequence_number: int
    already_used_this_week: Money
    settings: CommissionSettings = field(compare=False, repr=False)
    converter: CurrencyConverter = field(compare=False, repr=False)

    @classmethod
    def create(
        cls,
        *,
        operation_type: str | OperationType,
        date: datetime | date,
        person: Person,
        amount: Decimal | str | int,
        currency: str | Currency,
        sequence_number: int,
        already_used_this_week: Money,
        settings: CommissionSettings,
        converter: CurrencyConverter,
    ) -> Operation:
        """Validate raw values and build the variant."""
        kind = resolve_operation_type(operation_type, settings)
        if kind is not cls.operation_type:
            raise UnexpectedOperationTypeError(kind.value, cls.operation_type.value)
        validated = converter.validate(currency)
        return cls(
            date=date,
            person=person,
            amount=Money(to_decimal(amount), validated),
            sequence_number=sequence_number,
            already_used_this_week=already_used_this_week,
            settings=settings,
            converter=converter,
        )

    @property
    def type(self) -> OperationType:
        return self.operation_type

    @property
    def currency(self) -> Currency:
        return self.amount.currency

    def commission(self) -> Decimal:
        """Commission in the operation's own currency, before display rounding."""
        base = self.amount_for_commission()
        raw = base.multiplied_by(self.settings.rate_for(self.type))
        return self.validate_commission(raw.amount)

    def rounded_commission(self) -> str:
        """Commission rendered at the currency's display scale."""
        return round_amount(self.commission(), self.currency, self.settings.currencies)

    @abstractmethod
    def amount_for_commission(self) -> Money:
        """Part of the amount, in own currency, that the percentage applies to."""

    @abstractmethod
    def validate_commission(self, actual: Decimal) -> Decimal:
        """Apply the variant's cap or floor to a raw commission."""


@dataclass(frozen=True)
class Deposit(Operation):
    """Cash-in operation: percentage of the full amount, capped."""

    operation_type: ClassVar[OperationType] = OperationType.DEPOSIT

    def amount_for_commission(self) -> Money:
        return self.amount

    def validate_commission(self, actual: Decimal) -> Decimal:
        limit = self.settings.deposit.max_commission
        cap = self.converter.convert(limit.amount, limit.currency, self.currency)
        if actual <= cap:
            return actual
        logger.debug("deposit_commission_capped", extra={
            "actual": str(actual),
            "cap": str(cap),
            "currency": self.currency.code,
        })
        return cap


@dataclass(frozen=True)
class Withdrawal(Operation):
    """Cash-out operation: weekly free allowance for natural persons, floor for legal."""

    operation_type: ClassVar[OperationType] = OperationType.WITHDRAWAL

    def amount_for_commission(self) -> Money:
        if self.person.is_legal:
            return self.amount

        rules = self.settings.withdrawal
        main = self.converter.main
        scale = self.converter.scale

        amount_in_main = self.converter.convert_money(self.amount, main)
        free = rules.natural_free_amount
        max_free = Money(self.converter.convert(free.amount, free.currency, main), main)
        projected = self.already_used_this_week.plus(amount_in_main, scale)

        # Order matters: count window first, then exhausted volume, then crossing.
        if self.sequence_number > rules.natural_free_count:
            branch, chargeable = "free_count_exhausted", self.amount
        elif self.already_used_this_week >= max_free:
            branch, chargeable = "free_amount_exhausted", self.amount
        elif projected > max_free:
            excess = projected.minus(max_free, scale)
            branch, chargeable = "free_amount_crossed", self.converter.convert_money(
                excess, self.currency
            )
        else:
            branch, chargeable = "within_free_allowance", Money.zero(self.currency)

        logger.debug("withdrawal_allowance_evaluated", extra={
            "branch": branch,
            "sequence_number": self.sequence_number,
            "already_used": str(self.already_used_this_week.amount),
            "projected": str(projected.amount),
            "max_free": str(max_free.amount),
            "chargeable": str(chargeable.amount),
            "currency": self.currency.code,
        })
        return chargeable

    def validate_commission(self, actual: Decimal) -> Decimal:
        if self.person.type is PersonType.NATURAL:
            return actual
        if self.person.type is PersonType.LEGAL:
            limit = self.settings.withdrawal.legal_min_commission
            floor = self.converter.convert(limit.amount, limit.currency, self.currency)
            return actual if actual >= floor else floor
        raise UnsupportedPersonTypeError(str(self.person.type), self.settings.person_types)


OPERATION_CLASSES: dict[OperationType, type[Operation]] = {
    OperationType.DEPOSIT: Deposit,
    OperationType.WITHDRAWAL: Withdrawal,
}


def create_operation(
    *,
    operation_type: str | OperationType,
    date: datetime | date,
    person: Person,
    amount: Decimal | str | int,
    currency: str | Currency,
    sequence_number: int,
    already_used_this_week: Money,
    settings: CommissionSettings,
    converter: CurrencyConverter,
) -> Operation:
    """Build the Operation variant matching ``operation_type``."""
    kind = resolve_operation_type(operation_type, settings)
    return OPERATION_CLASSES[kind].create(
        operation_type=kind,
        date=date,
        person=person,
        amount=amount,
        currency=currency,
        sequence_number=sequence_number,
        already_used_this_week=already_used_this_week,
        settings=settings,
        converter=converter,
    )
