"""Rounding of final commissions to a currency's display scale."""

from __future__ import annotations

from decimal import Decimal

from commission_kernel.domain.settings import CurrencySettings
from commission_kernel.domain.values import DEFAULT_ROUNDING, Currency, rescale


def display_scale(currency: Currency | str, settings: CurrencySettings) -> int:
    """0 for zero-decimal currencies, the configured display scale otherwise."""
    code = currency.code if isinstance(currency, Currency) else Currency(currency).code
    if code in settings.zero_decimal:
        return 0
    return settings.display_scale


def round_amount(
    amount: Decimal,
    currency: Currency | str,
    settings: CurrencySettings,
) -> str:
    """
    Render ``amount`` at the currency's display scale.

    Any remainder is rounded away from zero: 5.1 JPY -> "6",
    0.023 EUR -> "0.03". A signed zero renders without its sign.
    """
    scale = display_scale(currency, settings)
    rounded = rescale(amount, scale, DEFAULT_ROUNDING)
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    return f"{rounded:f}"
