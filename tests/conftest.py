"""
Pytest fixtures for the commission calculator test suite.

Provides:
- Default settings built in code (no YAML) and from the bundled YAML set
- Converter, history and calculator wired from those settings
- Structured log capture
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from commission_kernel.domain.currency import CurrencyConverter
from commission_kernel.domain.history import WeeklyHistory
from commission_kernel.domain.settings import (
    AmountLimit,
    CommissionSettings,
    CurrencySettings,
    DepositRules,
    WithdrawalRules,
)
from commission_kernel.domain.types import CrossRounding
from commission_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


def build_settings(
    *,
    cross_rounding: CrossRounding = CrossRounding.PER_LEG,
    natural_free_count: int = 3,
    natural_free_amount: str = "1000.00",
) -> CommissionSettings:
    """Settings matching the bundled default set, with a few knobs for tests."""
    return CommissionSettings(
        currencies=CurrencySettings(
            main="EUR",
            supported=("EUR", "USD", "JPY"),
            exchange_rates={"USD": Decimal("1.1497"), "JPY": Decimal("129.53")},
            zero_decimal=("JPY",),
            conversion_scale=5,
            display_scale=2,
            cross_rounding=cross_rounding,
        ),
        person_types=("legal", "natural"),
        operation_types=("cash_in", "cash_out"),
        deposit=DepositRules(
            percent=Decimal("0.03"),
            max_commission=AmountLimit(Decimal("5.00"), "EUR"),
        ),
        withdrawal=WithdrawalRules(
            percent=Decimal("0.3"),
            legal_min_commission=AmountLimit(Decimal("0.50"), "EUR"),
            natural_free_amount=AmountLimit(Decimal(natural_free_amount), "EUR"),
            natural_free_count=natural_free_count,
        ),
    )


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture commission_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, calculator):
            calculator.calculate(record)
            logs = captured_logs()
            assert any(r["message"] == "commission_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("commission_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


@pytest.fixture
def settings() -> CommissionSettings:
    return build_settings()


@pytest.fixture
def converter(settings) -> CurrencyConverter:
    return CurrencyConverter(settings.currencies)


@pytest.fixture
def history(converter) -> WeeklyHistory:
    return WeeklyHistory(converter)


@pytest.fixture
def make_settings():
    """Factory for settings with non-default knobs."""
    return build_settings
