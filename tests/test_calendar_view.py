"""Calendar bucketing tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from alphawealth.errors import ValidationError
from alphawealth.models import Transaction
from alphawealth.services.calendar_view import build_calendar_month, spending_intensity, transactions_on


def _txn(amount, day, txn_type="expense") -> Transaction:
    return Transaction(account_id=1, amount=Decimal(str(amount)), txn_type=txn_type, occurred_on=day)


@pytest.mark.parametrize(
    ("expense", "level"),
    [("0", 0), ("49.99", 1), ("50", 2), ("99.99", 2), ("100", 3), ("249.99", 3), ("250", 4), ("500", 5)],
)
def test_spending_intensity_thresholds(expense, level):
    assert spending_intensity(Decimal(expense)) == level


def test_grid_is_sunday_first_and_complete():
    # February 2024 starts on a Thursday and ends on a Thursday.
    view = build_calendar_month([], 2024, 2, today=date(2024, 2, 14))

    first_week = view.weeks[0]
    assert first_week[0].day == date(2024, 1, 28)
    assert first_week[0].in_month is False
    assert all(len(week) == 7 for week in view.weeks)
    assert all(week[0].day.weekday() == 6 for week in view.weeks)
    assert view.weeks[-1][-1].day == date(2024, 3, 2)
    assert sum(cell.in_month for week in view.weeks for cell in week) == 29
    assert view.title == "February 2024"


def test_day_totals_and_flags():
    rows = [
        _txn("30", date(2024, 2, 14)),
        _txn("300", date(2024, 2, 14)),
        _txn("1000", date(2024, 2, 1), "income"),
        _txn("75", date(2024, 1, 30)),  # leading day from January
        _txn("10", date(2024, 2, 20), "transfer"),
    ]

    view = build_calendar_month(rows, 2024, 2, today=date(2024, 2, 14))
    cells = {cell.day: cell for week in view.weeks for cell in week}

    valentine = cells[date(2024, 2, 14)]
    assert valentine.expense == Decimal("330")
    assert valentine.transaction_count == 2
    assert valentine.intensity == 4
    assert valentine.selectable is True
    assert valentine.is_today is True

    payday = cells[date(2024, 2, 1)]
    assert payday.income == Decimal("1000")
    assert payday.intensity == 0

    transfer_day = cells[date(2024, 2, 20)]
    assert transfer_day.selectable is True
    assert transfer_day.intensity == 0

    assert cells[date(2024, 1, 30)].expense == Decimal("75")
    assert cells[date(2024, 2, 2)].selectable is False

    # Month totals cover the visible month only.
    assert view.income == Decimal("1000")
    assert view.expense == Decimal("330")


def test_invalid_month_rejected():
    with pytest.raises(ValidationError):
        build_calendar_month([], 2024, 13, today=date(2024, 1, 1))


@pytest.mark.parametrize("year", [1, 9999, 10000])
def test_year_outside_grid_range_rejected(year):
    with pytest.raises(ValidationError) as excinfo:
        build_calendar_month([], year, 1, today=date(2024, 1, 1))
    assert "year" in excinfo.value.errors


def test_transactions_on_returns_that_day_only():
    rows = [_txn("1", date(2024, 2, 14)), _txn("2", date(2024, 2, 15)), _txn("3", date(2024, 2, 14))]

    selected = transactions_on(rows, date(2024, 2, 14))

    assert [t.amount for t in selected] == [Decimal("1"), Decimal("3")]
