"""
Settings -- the fixed configuration structure consumed by the kernel.

Responsibility:
    Typed, frozen view of every value the commission rules read: scales,
    currencies and rates, allowed person/operation types, percentages,
    the deposit cap, the legal withdrawal floor and the natural free
    allowance.

Architecture position:
    Kernel > Domain. Built by ``commission_config`` (YAML) or directly in
    tests, then injected into every component at construction. The kernel
    never reads configuration files itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from commission_kernel.domain.types import CrossRounding, OperationType

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class AmountLimit:
    """An absolute amount expressed in a specific currency."""

    amount: Decimal
    currency: str


@dataclass(frozen=True)
class CurrencySettings:
    """Supported currencies, the pivot currency and its exchange rates."""

    main: str
    supported: tuple[str, ...]
    # Units of the keyed currency per 1 unit of ``main``
    exchange_rates: dict[str, Decimal] = field(default_factory=dict)
    zero_decimal: tuple[str, ...] = ()
    conversion_scale: int = 5
    display_scale: int = 2
    cross_rounding: CrossRounding = CrossRounding.PER_LEG


@dataclass(frozen=True)
class DepositRules:
    """Commission rules for deposits."""

    percent: Decimal
    max_commission: AmountLimit

    @property
    def rate(self) -> Decimal:
        """Percent as a multiplier (0.03 -> 0.0003)."""
        return self.percent / _HUNDRED


@dataclass(frozen=True)
class WithdrawalRules:
    """Commission rules for withdrawals."""

    percent: Decimal
    legal_min_commission: AmountLimit
    natural_free_amount: AmountLimit
    natural_free_count: int

    @property
    def rate(self) -> Decimal:
        """Percent as a multiplier (0.3 -> 0.003)."""
        return self.percent / _HUNDRED


@dataclass(frozen=True)
class CommissionSettings:
    """Complete configuration for one calculation run."""

    currencies: CurrencySettings
    person_types: tuple[str, ...]
    operation_types: tuple[str, ...]
    deposit: DepositRules
    withdrawal: WithdrawalRules

    def rate_for(self, operation_type: OperationType) -> Decimal:
        """Commission multiplier for an operation type."""
        if operation_type is OperationType.DEPOSIT:
            return self.deposit.rate
        return self.withdrawal.rate
