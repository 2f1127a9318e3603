"""
Tests for Deposit and Withdrawal commission rules.

Verifies:
- Deposit cap, converted into the operation's currency
- Legal withdrawal floor
- Natural withdrawal weekly allowance (count and volume, strict boundary)
- Type and currency validation in the factory
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from commission_kernel.domain.operations import (
    OPERATION_CLASSES,
    Deposit,
    Withdrawal,
    create_operation,
)
from commission_kernel.domain.person import Person
from commission_kernel.domain.types import OperationType, PersonType
from commission_kernel.domain.values import Currency, Money
from commission_kernel.exceptions import (
    UnexpectedOperationTypeError,
    UnsupportedCurrencyError,
    UnsupportedOperationTypeError,
)

NATURAL = Person(id=1, type=PersonType.NATURAL)
LEGAL = Person(id=2, type=PersonType.LEGAL)


@pytest.fixture
def make_operation(settings, converter):
    def _make(
        operation_type,
        person,
        amount,
        currency="EUR",
        sequence_number=1,
        already_used="0",
        settings_override=None,
    ):
        return create_operation(
            operation_type=operation_type,
            date=date(2016, 1, 5),
            person=person,
            amount=amount,
            currency=currency,
            sequence_number=sequence_number,
            already_used_this_week=Money.of(already_used, "EUR"),
            settings=settings_override or settings,
            converter=converter,
        )

    return _make


class TestFactory:
    """Tests for create_operation and Operation.create."""

    def test_variant_per_type(self, make_operation):
        assert isinstance(make_operation("cash_in", NATURAL, "1"), Deposit)
        assert isinstance(make_operation("cash_out", NATURAL, "1"), Withdrawal)

    def test_every_type_has_a_variant(self):
        assert set(OPERATION_CLASSES) == set(OperationType)

    def test_enum_accepted(self, make_operation):
        op = make_operation(OperationType.DEPOSIT, NATURAL, "1")
        assert op.type is OperationType.DEPOSIT

    def test_unsupported_type(self, make_operation):
        with pytest.raises(UnsupportedOperationTypeError) as exc:
            make_operation("transfer", NATURAL, "1")
        assert exc.value.code == "UNSUPPORTED_OPERATION_TYPE"
        assert exc.value.operation_type == "transfer"

    def test_type_not_configured(self, make_operation, settings):
        restricted = replace(settings, operation_types=("cash_in",))
        with pytest.raises(UnsupportedOperationTypeError):
            make_operation("cash_out", NATURAL, "1", settings_override=restricted)

    def test_wrong_variant(self, settings, converter):
        with pytest.raises(UnexpectedOperationTypeError) as exc:
            Deposit.create(
                operation_type="cash_out",
                date=date(2016, 1, 5),
                person=NATURAL,
                amount="1",
                currency="EUR",
                sequence_number=1,
                already_used_this_week=Money.zero("EUR"),
                settings=settings,
                converter=converter,
            )
        assert exc.value.code == "UNEXPECTED_OPERATION_TYPE"
        assert str(exc.value) == (
            "Unexpected operation type was provided, passed - cash_out, allowed - cash_in"
        )

    def test_unsupported_currency(self, make_operation):
        with pytest.raises(UnsupportedCurrencyError):
            make_operation("cash_in", NATURAL, "100", currency="GBP")

    def test_currency_normalized(self, make_operation):
        op = make_operation("cash_in", NATURAL, "100", currency="usd")
        assert op.currency == Currency("USD")


class TestDeposit:
    """Deposit: percentage of the full amount, capped."""

    def test_percentage(self, make_operation):
        op = make_operation("cash_in", NATURAL, "200.00")
        assert op.commission() == Decimal("0.06")
        assert op.rounded_commission() == "0.06"

    def test_cap_applies(self, make_operation):
        """25000 * 0.03% = 7.5, capped at 5."""
        op = make_operation("cash_in", LEGAL, "25000")
        assert op.commission() == Decimal("5.00")
        assert op.rounded_commission() == "5.00"

    def test_cap_converted_to_zero_decimal_currency(self, make_operation):
        op = make_operation("cash_in", NATURAL, "100000000", currency="JPY")
        assert op.commission() == Decimal("647.65")
        assert op.rounded_commission() == "648"

    def test_cap_converted_to_usd(self, make_operation):
        op = make_operation("cash_in", NATURAL, "1000000", currency="USD")
        assert op.rounded_commission() == "5.75"

    def test_history_ignored(self, make_operation):
        op = make_operation("cash_in", NATURAL, "200.00", sequence_number=9, already_used="5000")
        assert op.rounded_commission() == "0.06"


class TestLegalWithdrawal:
    """Legal withdrawal: full amount, floored."""

    def test_floor_applies(self, make_operation):
        """50 * 0.3% = 0.15, floored at 0.50."""
        op = make_operation("cash_out", LEGAL, "50.00")
        assert op.commission() == Decimal("0.50")
        assert op.rounded_commission() == "0.50"

    def test_above_floor(self, make_operation):
        assert make_operation("cash_out", LEGAL, "300.00").rounded_commission() == "0.90"

    def test_floor_converted(self, make_operation):
        op = make_operation("cash_out", LEGAL, "1000", currency="JPY")
        assert op.rounded_commission() == "65"

    def test_no_free_allowance(self, make_operation):
        op = make_operation("cash_out", LEGAL, "1000.00")
        assert op.amount_for_commission() == Money.of("1000.00", "EUR")


class TestNaturalWithdrawal:
    """Natural withdrawal: weekly free allowance by count and volume."""

    def test_within_allowance(self, make_operation):
        op = make_operation("cash_out", NATURAL, "400.00")
        assert op.rounded_commission() == "0.00"

    def test_landing_exactly_on_allowance_is_free(self, make_operation):
        op = make_operation("cash_out", NATURAL, "200.00", sequence_number=3, already_used="800")
        assert op.rounded_commission() == "0.00"

    def test_crossing_charges_excess_only(self, make_operation):
        op = make_operation("cash_out", NATURAL, "1200.00")
        assert op.amount_for_commission().amount == Decimal("200.00000")
        assert op.rounded_commission() == "0.60"

    def test_crossing_in_other_currency(self, make_operation):
        """Excess is computed in EUR and converted back to USD."""
        op = make_operation("cash_out", NATURAL, "200.00", currency="USD",
                            sequence_number=2, already_used="900")
        assert op.amount_for_commission() == Money.of("85.03001", "USD")
        assert op.rounded_commission() == "0.26"

    def test_allowance_exhausted(self, make_operation):
        op = make_operation("cash_out", NATURAL, "1000.00", sequence_number=2, already_used="1200")
        assert op.rounded_commission() == "3.00"

    def test_fourth_withdrawal_charged_in_full(self, make_operation):
        op = make_operation("cash_out", NATURAL, "100.00", sequence_number=4, already_used="300")
        assert op.amount_for_commission() == Money.of("100.00", "EUR")
        assert op.rounded_commission() == "0.30"

    def test_free_count_configurable(self, make_operation, make_settings):
        op = make_operation("cash_out", NATURAL, "100.00", sequence_number=2,
                            settings_override=make_settings(natural_free_count=1))
        assert op.rounded_commission() == "0.30"

    def test_logs_branch(self, make_operation, captured_logs):
        make_operation("cash_out", NATURAL, "1200.00").commission()
        [record] = [
            r for r in captured_logs() if r["message"] == "withdrawal_allowance_evaluated"
        ]
        assert record["branch"] == "free_amount_crossed"
        assert record["chargeable"] == "200.00000"
