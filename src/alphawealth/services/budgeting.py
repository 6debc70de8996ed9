"""Budgeting domain services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..models.budget import Budget, BudgetItem
from ..models.category import Category
from ..models.enums import BudgetPeriod, TransactionType
from ..models.transaction import Transaction
from .analytics import ZERO, month_bounds, shift_month

_EXPENSE = TransactionType.EXPENSE.value


@dataclass(slots=True)
class ItemProgress:
    """Planned vs spent for a single budget line."""

    item_id: Optional[int]
    category_id: Optional[int]
    category_name: str
    planned: Decimal
    spent: Decimal
    percentage: float
    over_budget: bool

    @property
    def remaining(self) -> Decimal:
        return self.planned - self.spent


@dataclass(slots=True)
class BudgetProgress:
    budget_id: Optional[int]
    name: str
    start_date: date
    end_date: date
    target: Decimal
    spent: Decimal
    percentage: float
    over_budget: bool
    days_left: int = 0
    carried_over: Decimal = ZERO
    items: list[ItemProgress] = field(default_factory=list)

    @property
    def remaining(self) -> Decimal:
        return self.target - self.spent


@dataclass(slots=True)
class BudgetLists:
    active: list[Budget]
    past: list[Budget]
    upcoming: list[Budget]


def _amount(value) -> Decimal:
    return abs(value if isinstance(value, Decimal) else Decimal(str(value or 0)))


def _day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def progress_ratio(spent: Decimal, planned: Decimal) -> tuple[float, bool]:
    """Return (percentage clamped to 0..100, over_budget).

    A zero plan reads as fully used (and over) once anything is spent.
    """

    if planned <= 0:
        return (100.0, True) if spent > 0 else (0.0, False)
    pct = float(spent / planned * 100)
    return max(0.0, min(pct, 100.0)), spent > planned


def previous_period(budget: Budget) -> tuple[date, date]:
    """Window the rollover carry is measured over."""

    if budget.period == BudgetPeriod.MONTHLY.value:
        year, month = shift_month(budget.start_date.year, budget.start_date.month, -1)
        return month_bounds(year, month)
    length = (budget.end_date - budget.start_date).days + 1
    end = budget.start_date - timedelta(days=1)
    return end - timedelta(days=length - 1), end


def fetch_window(budget: Budget) -> tuple[date, date]:
    """Date range a caller must load to compute progress, rollover included."""

    if budget.rollover:
        return previous_period(budget)[0], budget.end_date
    return budget.start_date, budget.end_date


def _in_scope(
    transactions: Iterable[Transaction], budget: Budget, start: date, end: date
) -> list[Transaction]:
    rows = []
    for txn in transactions:
        if not start <= _day(txn.occurred_on) <= end:
            continue
        if budget.account_id is not None and txn.account_id != budget.account_id:
            continue
        rows.append(txn)
    return rows


def _matching_spend(transactions: Iterable[Transaction], budget: Budget) -> Decimal:
    total = ZERO
    for txn in transactions:
        if txn.txn_type != budget.budget_type:
            continue
        if budget.category_id is not None and txn.category_id != budget.category_id:
            continue
        total += _amount(txn.amount)
    return total


def effective_target(budget: Budget, transactions: Iterable[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (target, carried_over) for ``budget``.

    With rollover on, whatever was left unspent in the previous period is
    added to the target. Only one period is carried.
    """

    amount = _amount(budget.amount)
    if not budget.rollover:
        return amount, ZERO
    start, end = previous_period(budget)
    spent_before = _matching_spend(_in_scope(transactions, budget, start, end), budget)
    carry = max(amount - spent_before, ZERO)
    return amount + carry, carry


def budget_progress(
    budget: Budget,
    items: Sequence[BudgetItem],
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    today: date,
) -> BudgetProgress:
    """Spent vs planned for a budget and each of its items."""

    all_rows = list(transactions)
    scoped = _in_scope(all_rows, budget, budget.start_date, budget.end_date)
    names = {cat.id: cat.name for cat in categories if cat.id is not None}

    item_rows: list[ItemProgress] = []
    for item in items:
        planned = _amount(item.planned_amount)
        spent = sum(
            (
                _amount(txn.amount)
                for txn in scoped
                if txn.txn_type == _EXPENSE and txn.category_id == item.category_id
            ),
            ZERO,
        )
        pct, over = progress_ratio(spent, planned)
        item_rows.append(
            ItemProgress(
                item_id=item.id,
                category_id=item.category_id,
                category_name=names.get(item.category_id, "Uncategorized"),
                planned=planned,
                spent=spent,
                percentage=pct,
                over_budget=over,
            )
        )

    carried = ZERO
    if item_rows:
        target = sum((row.planned for row in item_rows), ZERO)
        spent_total = sum((row.spent for row in item_rows), ZERO)
    else:
        target, carried = effective_target(budget, all_rows)
        spent_total = _matching_spend(scoped, budget)

    pct, over = progress_ratio(spent_total, target)
    return BudgetProgress(
        budget_id=budget.id,
        name=budget.name,
        start_date=budget.start_date,
        end_date=budget.end_date,
        target=target,
        spent=spent_total,
        percentage=pct,
        over_budget=over,
        carried_over=carried,
        days_left=days_left(budget, today),
        items=item_rows,
    )


def days_left(budget: Budget, today: date) -> int:
    """Days of the period still ahead of ``today``, today included."""

    first = max(today, budget.start_date)
    return max((budget.end_date - first).days + 1, 0)


def partition_budgets(budgets: Iterable[Budget], today: date) -> BudgetLists:
    """Split budgets into active, past and upcoming relative to ``today``."""

    lists = BudgetLists(active=[], past=[], upcoming=[])
    for budget in budgets:
        if budget.is_past(today):
            lists.past.append(budget)
        elif budget.is_active(today):
            lists.active.append(budget)
        else:
            lists.upcoming.append(budget)
    lists.active.sort(key=lambda b: (b.end_date, b.id or 0))
    lists.past.sort(key=lambda b: b.end_date, reverse=True)
    lists.upcoming.sort(key=lambda b: b.start_date)
    return lists
