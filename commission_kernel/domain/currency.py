"""
Currency -- supported-set validation and hub conversion.

Responsibility:
    Answers "is this currency supported?" and converts amounts between
    supported currencies through a rate graph whose hub is the main
    currency.

Architecture position:
    Kernel > Domain -- pure, zero I/O. Built once per run from
    ``CurrencySettings`` and shared by operations and history.

Conversion rules:
    - same currency: the amount is returned unchanged, never rounded.
    - main -> X: multiply by rate(X), rescale to the conversion scale.
    - X -> main: divide by rate(X), rescale to the conversion scale.
    - X -> Y: X -> main -> Y with one rounding per leg, or a single
      rounding of the composed rate when ``cross_rounding`` is ``once``.
    Every lossy step uses ROUND_UP.

Failure modes:
    - UnsupportedCurrencyError when either side is not configured.
"""

from __future__ import annotations

from decimal import Decimal

from commission_kernel.domain.settings import CurrencySettings
from commission_kernel.domain.types import CrossRounding
from commission_kernel.domain.values import (
    DEFAULT_ROUNDING,
    Currency,
    ExchangeRate,
    Money,
    to_decimal,
)
from commission_kernel.exceptions import UnsupportedCurrencyError
from commission_kernel.logging_config import get_logger

logger = get_logger("domain.currency")


class CurrencyConverter:
    """Validates currency codes and converts amounts through the main currency."""

    def __init__(self, settings: CurrencySettings):
        self._settings = settings
        self._main = Currency(settings.main)
        self._supported = frozenset(Currency(code).code for code in settings.supported)
        self._rates: dict[str, ExchangeRate] = {
            Currency(code).code: ExchangeRate.of(self._main, code, rate)
            for code, rate in settings.exchange_rates.items()
            if Currency(code) != self._main
        }
        self._rounding = DEFAULT_ROUNDING

    @property
    def main(self) -> Currency:
        return self._main

    @property
    def scale(self) -> int:
        return self._settings.conversion_scale

    @property
    def supported(self) -> frozenset[str]:
        return self._supported

    def is_supported(self, code: str) -> bool:
        return isinstance(code, str) and code.upper().strip() in self._supported

    def validate(self, code: str | Currency) -> Currency:
        """Return the Currency for ``code`` or raise UnsupportedCurrencyError."""
        if isinstance(code, Currency):
            code = code.code
        if not self.is_supported(code):
            raise UnsupportedCurrencyError(str(code), sorted(self._supported))
        return Currency(code)

    def convert(
        self,
        amount: Decimal | str | int,
        from_code: str | Currency,
        to_code: str | Currency,
    ) -> Decimal:
        """Convert ``amount`` from one supported currency to another."""
        amount = to_decimal(amount)
        source = self.validate(from_code)
        target = self.validate(to_code)

        if source == target:
            return amount

        if source == self._main:
            result = self._rate(target).to_quote(amount, self.scale, self._rounding)
        elif target == self._main:
            result = self._rate(source).to_base(amount, self.scale, self._rounding)
        elif self._settings.cross_rounding is CrossRounding.ONCE:
            result = (
                Money(amount, source)
                .multiplied_by(self._rate(target).rate)
                .divided_by(self._rate(source).rate, self.scale, self._rounding)
                .amount
            )
        else:
            in_main = self._rate(source).to_base(amount, self.scale, self._rounding)
            result = self._rate(target).to_quote(in_main, self.scale, self._rounding)

        logger.debug("currency_converted", extra={
            "amount": str(amount),
            "from_currency": source.code,
            "to_currency": target.code,
            "result": str(result),
        })
        return result

    def convert_money(self, money: Money, to_code: str | Currency) -> Money:
        """Convert a Money value into another supported currency."""
        target = self.validate(to_code)
        return Money(self.convert(money.amount, money.currency, target), target)

    def _rate(self, currency: Currency) -> ExchangeRate:
        try:
            return self._rates[currency.code]
        except KeyError:
            raise UnsupportedCurrencyError(currency.code, sorted(self._rates)) from None
