"""
Tests for WeeklyHistory.

Verifies:
- Monday-Sunday week bucketing, including across a year boundary
- Per-person isolation
- Volume queries convert every amount to the main currency
- Type filters
- Arrival order is preserved
"""

from datetime import date, datetime
from decimal import Decimal

import pytest

from commission_kernel.domain.history import WeekKey
from commission_kernel.domain.operations import create_operation
from commission_kernel.domain.person import Person
from commission_kernel.domain.types import OperationType, PersonType
from commission_kernel.domain.values import Money
from commission_kernel.exceptions import UnsupportedOperationTypeError

ALICE = Person(id=1, type=PersonType.NATURAL)
BOB = Person(id=2, type=PersonType.LEGAL)


@pytest.fixture
def push(history, settings, converter):
    def _push(person, when, operation_type, amount, currency="EUR"):
        operation = create_operation(
            operation_type=operation_type,
            date=when,
            person=person,
            amount=amount,
            currency=currency,
            sequence_number=1,
            already_used_this_week=Money.zero("EUR"),
            settings=settings,
            converter=converter,
        )
        history.push(operation)
        return operation

    return _push


class TestWeekKey:
    """Tests for week bucketing."""

    def test_midweek(self):
        key = WeekKey.for_date(1, date(2016, 1, 5))
        assert key.monday == date(2016, 1, 4)
        assert key.sunday == date(2016, 1, 10)

    def test_sunday_belongs_to_same_week(self):
        assert WeekKey.for_date(1, date(2016, 1, 10)) == WeekKey.for_date(1, date(2016, 1, 4))

    def test_monday_starts_new_week(self):
        assert WeekKey.for_date(1, date(2016, 1, 11)) != WeekKey.for_date(1, date(2016, 1, 10))

    def test_year_boundary(self):
        assert WeekKey.for_date(4, date(2014, 12, 31)) == WeekKey.for_date(4, date(2015, 1, 1))

    def test_datetime_accepted(self):
        assert WeekKey.for_date(1, datetime(2016, 1, 5, 23, 59)) == WeekKey.for_date(1, date(2016, 1, 5))

    def test_person_is_part_of_key(self):
        assert WeekKey.for_date(1, date(2016, 1, 5)) != WeekKey.for_date(2, date(2016, 1, 5))

    def test_str(self):
        assert str(WeekKey.for_date(3, date(2016, 1, 5))) == "2016-01-04/2016-01-10#3"


class TestQueries:
    """Tests for count and volume queries."""

    def test_empty_history(self, history):
        assert history.operations_count_in_week(ALICE, date(2016, 1, 5)) == 0
        assert history.amount_used_in_week(ALICE, date(2016, 1, 5)) == Money.zero("EUR")
        assert len(history) == 0

    def test_count_and_volume_in_main_currency(self, history, push):
        push(ALICE, date(2016, 1, 6), "cash_out", "30000", "JPY")
        push(ALICE, date(2016, 1, 7), "cash_out", "1000.00")

        when = date(2016, 1, 10)
        assert history.operations_count_in_week(ALICE, when) == 2
        assert history.amount_used_in_week(ALICE, when).amount == Decimal("1231.60658")

    def test_type_filter(self, history, push):
        push(ALICE, date(2016, 1, 5), "cash_in", "200.00")
        push(ALICE, date(2016, 1, 6), "cash_out", "300.00")

        when = date(2016, 1, 6)
        assert history.operations_count_in_week(ALICE, when, OperationType.WITHDRAWAL) == 1
        assert history.operations_count_in_week(ALICE, when, "cash_in") == 1
        assert history.amount_used_in_week(ALICE, when, "cash_out").amount == Decimal("300.00000")
        assert history.amount_used_in_week(ALICE, when).amount == Decimal("500.00000")

    def test_unknown_filter_rejected(self, history):
        with pytest.raises(UnsupportedOperationTypeError):
            history.operations_count_in_week(ALICE, date(2016, 1, 5), "transfer")
        with pytest.raises(UnsupportedOperationTypeError):
            history.amount_used_in_week(ALICE, date(2016, 1, 5), "transfer")

    def test_persons_isolated(self, history, push):
        push(ALICE, date(2016, 1, 5), "cash_out", "100.00")
        push(BOB, date(2016, 1, 5), "cash_out", "300.00")

        assert history.amount_used_in_week(ALICE, date(2016, 1, 5)).amount == Decimal("100.00000")
        assert history.amount_used_in_week(BOB, date(2016, 1, 5)).amount == Decimal("300.00000")

    def test_weeks_isolated(self, history, push):
        push(ALICE, date(2016, 1, 10), "cash_out", "100.00")
        assert history.operations_count_in_week(ALICE, date(2016, 1, 11)) == 0


class TestPush:
    """Tests for appending operations."""

    def test_arrival_order_preserved(self, history, push):
        first = push(ALICE, date(2016, 1, 7), "cash_out", "1.00")
        second = push(ALICE, date(2016, 1, 5), "cash_out", "2.00")

        assert history.operations_in_week(ALICE, date(2016, 1, 5)) == (first, second)

    def test_len_counts_all_operations(self, history, push):
        push(ALICE, date(2016, 1, 5), "cash_out", "1.00")
        push(BOB, date(2016, 2, 5), "cash_in", "1.00")
        assert len(history) == 2
        assert len(history.buckets) == 2

    def test_buckets_read_only(self, history, push):
        push(ALICE, date(2016, 1, 5), "cash_out", "1.00")
        with pytest.raises(TypeError):
            history.buckets[history.week_key(1, date(2016, 1, 5))] = ()

    def test_push_returns_history(self, history, settings, converter):
        operation = create_operation(
            operation_type="cash_in",
            date=date(2016, 1, 5),
            person=ALICE,
            amount="1",
            currency="EUR",
            sequence_number=1,
            already_used_this_week=Money.zero("EUR"),
            settings=settings,
            converter=converter,
        )
        assert history.push(operation) is history

    def test_logs_push(self, history, push, captured_logs):
        push(ALICE, date(2016, 1, 5), "cash_out", "1.00")
        [record] = [r for r in captured_logs() if r["message"] == "operation_pushed"]
        assert record["week"] == "2016-01-04/2016-01-10#1"
