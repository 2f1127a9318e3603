"""
Commission domain: pure value objects and rules, zero I/O.

Usage:
    from commission_kernel.domain import CurrencyConverter, WeeklyHistory, create_operation
"""

from commission_kernel.domain.currency import CurrencyConverter
from commission_kernel.domain.history import WeekKey, WeeklyHistory
from commission_kernel.domain.operations import (
    OPERATION_CLASSES,
    Deposit,
    Operation,
    Withdrawal,
    create_operation,
    resolve_operation_type,
)
from commission_kernel.domain.person import Person
from commission_kernel.domain.rounding import display_scale, round_amount
from commission_kernel.domain.settings import (
    AmountLimit,
    CommissionSettings,
    CurrencySettings,
    DepositRules,
    WithdrawalRules,
)
from commission_kernel.domain.types import CrossRounding, OperationType, PersonType
from commission_kernel.domain.values import Currency, ExchangeRate, Money, rescale

__all__ = [
    "AmountLimit",
    "CommissionSettings",
    "CrossRounding",
    "Currency",
    "CurrencyConverter",
    "CurrencySettings",
    "Deposit",
    "DepositRules",
    "ExchangeRate",
    "Money",
    "OPERATION_CLASSES",
    "Operation",
    "OperationType",
    "Person",
    "PersonType",
    "WeekKey",
    "WeeklyHistory",
    "Withdrawal",
    "WithdrawalRules",
    "create_operation",
    "display_scale",
    "rescale",
    "resolve_operation_type",
    "round_amount",
]
