"""
Configuration Validator (``commission_config.validator``).

Responsibility
--------------
Checks a parsed ``CommissionSettings`` for structural consistency before it
is handed to the kernel.

Architecture position
---------------------
**Config layer** -- called by ``commission_config.get_active_config`` after
loading. The kernel never imports this module.

Checks
------
* The main currency is one of the supported currencies.
* Every supported currency other than main has a positive exchange rate.
* Zero-decimal currencies, the deposit cap, the legal floor and the natural
  free allowance are all expressed in supported currencies.
* Scales, percentages and the free count are non-negative.
* Person and operation types are values the kernel knows how to price.

Failure modes
-------------
* Errors (``ConfigValidationResult.errors``)  -> settings MUST NOT be used.
* Warnings (``ConfigValidationResult.warnings``)  -> usable, but review them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from commission_kernel.domain.settings import AmountLimit, CommissionSettings
from commission_kernel.domain.types import OperationType, PersonType


class ConfigValidationError(Exception):
    """Settings failed validation and must not be used."""

    code: str = "CONFIG_VALIDATION_FAILED"

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(
            f"Configuration validation failed with {len(self.errors)} error(s): "
            + "; ".join(self.errors)
        )


@dataclass
class ConfigValidationResult:
    """
    Result of configuration validation.

    ``is_valid`` is ``True`` only when ``errors`` is empty.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)


def validate_settings(settings: CommissionSettings) -> ConfigValidationResult:
    """
    Validate a settings object.

    Postconditions:
        - Returns a ``ConfigValidationResult`` with all detected errors and
          warnings. Never raises for invalid content.
    """
    result = ConfigValidationResult()
    _check_currencies(settings, result)
    _check_types(settings, result)
    _check_rules(settings, result)
    return result


def _check_currencies(settings: CommissionSettings, result: ConfigValidationResult) -> None:
    currencies = settings.currencies
    supported = set(currencies.supported)

    if not supported:
        result.add_error("currencies.supported is empty")
    if currencies.main not in supported:
        result.add_error(f"Main currency {currencies.main} is not in the supported set")

    for code in sorted(supported - {currencies.main}):
        rate = currencies.exchange_rates.get(code)
        if rate is None:
            result.add_error(f"No exchange rate configured for supported currency {code}")
        elif rate <= 0:
            result.add_error(f"Exchange rate for {code} must be positive, got {rate}")

    for code in sorted(set(currencies.exchange_rates) - supported):
        result.add_warning(f"Exchange rate for unsupported currency {code} is ignored")
    if currencies.main in currencies.exchange_rates:
        result.add_warning(f"Exchange rate for main currency {currencies.main} is ignored")

    for code in currencies.zero_decimal:
        if code not in supported:
            result.add_error(f"Zero-decimal currency {code} is not supported")

    if currencies.conversion_scale < 0:
        result.add_error("currencies.conversion_scale must be non-negative")
    if currencies.display_scale < 0:
        result.add_error("currencies.display_scale must be non-negative")


def _check_types(settings: CommissionSettings, result: ConfigValidationResult) -> None:
    known_persons = {p.value for p in PersonType}
    for value in settings.person_types:
        if value not in known_persons:
            result.add_error(f"Unknown person type {value!r}; known: {sorted(known_persons)}")

    known_operations = {o.value for o in OperationType}
    for value in settings.operation_types:
        if value not in known_operations:
            result.add_error(
                f"Unknown operation type {value!r}; known: {sorted(known_operations)}"
            )


def _check_limit(
    limit: AmountLimit,
    name: str,
    settings: CommissionSettings,
    result: ConfigValidationResult,
) -> None:
    if limit.currency not in settings.currencies.supported:
        result.add_error(f"{name} currency {limit.currency} is not supported")
    if limit.amount < 0:
        result.add_error(f"{name} must be non-negative, got {limit.amount}")


def _check_rules(settings: CommissionSettings, result: ConfigValidationResult) -> None:
    if settings.deposit.percent < 0:
        result.add_error("commissions.cash_in.percent must be non-negative")
    if settings.withdrawal.percent < 0:
        result.add_error("commissions.cash_out.percent must be non-negative")
    if settings.withdrawal.natural_free_count < 0:
        result.add_error("commissions.cash_out.natural.free_count must be non-negative")

    _check_limit(settings.deposit.max_commission, "commissions.cash_in.max_amount", settings, result)
    _check_limit(
        settings.withdrawal.legal_min_commission,
        "commissions.cash_out.legal.min_amount",
        settings,
        result,
    )
    _check_limit(
        settings.withdrawal.natural_free_amount,
        "commissions.cash_out.natural.free_amount",
        settings,
        result,
    )
