"""Budget progress, rollover and list partition tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from alphawealth.models import Budget, BudgetItem, Category, Transaction
from alphawealth.services.budgeting import (
    budget_progress,
    days_left,
    effective_target,
    fetch_window,
    partition_budgets,
    previous_period,
    progress_ratio,
)

TODAY = date(2024, 3, 15)


def _txn(amount, category_id=None, day=date(2024, 3, 10), txn_type="expense", account_id=1) -> Transaction:
    return Transaction(
        account_id=account_id,
        amount=Decimal(str(amount)),
        txn_type=txn_type,
        occurred_on=day,
        category_id=category_id,
    )


def _budget(**overrides) -> Budget:
    fields = dict(
        id=1,
        name="March",
        amount=Decimal("300"),
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 31),
        budget_type="expense",
        period="monthly",
        rollover=False,
    )
    fields.update(overrides)
    return Budget(**fields)


CATEGORIES = [Category(id=1, name="Food"), Category(id=2, name="Fun")]


def test_item_progress_clamped_and_flagged():
    items = [
        BudgetItem(id=10, category_id=1, planned_amount=Decimal("100")),
        BudgetItem(id=11, category_id=2, planned_amount=Decimal("50")),
    ]
    rows = [_txn("150", 1), _txn("20", 2), _txn("999", 1, day=date(2024, 4, 1))]

    progress = budget_progress(_budget(), items, rows, CATEGORIES, TODAY)

    food, fun = progress.items
    assert food.spent == Decimal("150")
    assert food.percentage == 100.0
    assert food.over_budget is True
    assert fun.percentage == 40.0
    assert fun.over_budget is False
    assert progress.target == Decimal("150")
    assert progress.spent == Decimal("170")
    assert progress.over_budget is True


def test_zero_planned_policy():
    assert progress_ratio(Decimal("0"), Decimal("0")) == (0.0, False)
    assert progress_ratio(Decimal("5"), Decimal("0")) == (100.0, True)

    items = [BudgetItem(id=1, category_id=1, planned_amount=Decimal("0"))]
    progress = budget_progress(_budget(), items, [_txn("5", 1)], CATEGORIES, TODAY)
    assert progress.items[0].percentage == 100.0
    assert progress.items[0].over_budget is True


def test_progress_without_items_uses_type_and_category():
    rows = [_txn("40", 1), _txn("60", 2), _txn("500", 1, txn_type="income")]

    overall = budget_progress(_budget(), [], rows, CATEGORIES, TODAY)
    food_only = budget_progress(_budget(category_id=1), [], rows, CATEGORIES, TODAY)

    assert overall.spent == Decimal("100")
    assert overall.percentage == pytest.approx(100 / 3)
    assert food_only.spent == Decimal("40")


def test_progress_restricted_to_linked_account():
    rows = [_txn("40", 1, account_id=1), _txn("60", 1, account_id=2)]

    progress = budget_progress(_budget(account_id=2), [], rows, CATEGORIES, TODAY)

    assert progress.spent == Decimal("60")


def test_rollover_monthly_carries_unspent_once():
    budget = _budget(rollover=True)
    rows = [_txn("120", day=date(2024, 2, 10)), _txn("30", day=date(2024, 3, 5))]

    target, carried = effective_target(budget, rows)
    progress = budget_progress(budget, [], rows, CATEGORIES, TODAY)

    assert previous_period(budget) == (date(2024, 2, 1), date(2024, 2, 29))
    assert carried == Decimal("180")
    assert target == Decimal("480")
    assert progress.target == Decimal("480")
    assert progress.spent == Decimal("30")
    assert fetch_window(budget) == (date(2024, 2, 1), date(2024, 3, 31))


def test_rollover_never_negative_and_custom_window():
    budget = _budget(
        period="custom",
        rollover=True,
        start_date=date(2024, 3, 11),
        end_date=date(2024, 3, 20),
    )
    rows = [_txn("900", day=date(2024, 3, 5))]

    assert previous_period(budget) == (date(2024, 3, 1), date(2024, 3, 10))
    assert effective_target(budget, rows) == (Decimal("300"), Decimal("0"))


def test_partition_budgets():
    active = _budget(id=1)
    past = _budget(id=2, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))
    upcoming = _budget(id=3, start_date=date(2024, 4, 1), end_date=date(2024, 4, 30))

    lists = partition_budgets([upcoming, past, active], TODAY)

    assert lists.active == [active]
    assert lists.past == [past]
    assert lists.upcoming == [upcoming]


def test_days_left_counts_from_today():
    progress = budget_progress(_budget(), [], [], CATEGORIES, TODAY)

    assert progress.days_left == 17
    assert days_left(_budget(), date(2024, 4, 2)) == 0
    assert days_left(_budget(), date(2024, 2, 20)) == 31
