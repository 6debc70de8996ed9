"""Pure aggregation over transaction lists.

Every function here takes already-fetched records and returns new values;
nothing touches the database, so results are deterministic for the same input.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Sequence

from ..errors import ValidationError
from ..models.account import Account
from ..models.category import DEFAULT_CATEGORY_COLOR, Category
from ..models.enums import TransactionType
from ..models.transaction import Transaction

UNCATEGORIZED = "Uncategorized"
ZERO = Decimal("0")

_INCOME = TransactionType.INCOME.value
_EXPENSE = TransactionType.EXPENSE.value


def _magnitude(value) -> Decimal:
    amount = value if isinstance(value, Decimal) else Decimal(str(value or 0))
    return abs(amount)


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


@dataclass(slots=True)
class TypeTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(slots=True)
class CategorySpend:
    """Expense total for one category bucket."""

    name: str
    amount: Decimal
    color: str = DEFAULT_CATEGORY_COLOR
    category_id: int | None = None
    percentage: float = 0.0


@dataclass(slots=True)
class MonthPoint:
    label: str
    year: int
    month: int
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(slots=True)
class PeriodComparison:
    """Current vs previous calendar month."""

    current_month: str
    previous_month: str
    current_income: Decimal
    previous_income: Decimal
    current_expense: Decimal
    previous_expense: Decimal
    income_change_pct: float
    expense_change_pct: float

    @property
    def net_savings(self) -> Decimal:
        return self.current_income - self.current_expense


@dataclass(slots=True)
class AnalyticsReport:
    months: int
    start_date: date
    end_date: date
    totals: TypeTotals
    spending: list[CategorySpend]
    top: list[CategorySpend]
    series: list[MonthPoint]
    comparison: PeriodComparison
    transaction_count: int = 0
    account_count: int = 0


def totals_by_type(transactions: Iterable[Transaction]) -> TypeTotals:
    """Sum income and expense magnitudes; transfers and unknown types are ignored."""

    income = ZERO
    expense = ZERO
    for txn in transactions:
        if txn.txn_type == _INCOME:
            income += _magnitude(txn.amount)
        elif txn.txn_type == _EXPENSE:
            expense += _magnitude(txn.amount)
    return TypeTotals(income=income, expense=expense)


def _group_expenses(
    transactions: Iterable[Transaction], categories: Iterable[Category]
) -> list[CategorySpend]:
    lookup = {cat.id: cat for cat in categories if cat.id is not None}
    groups: dict[str, CategorySpend] = {}
    for txn in transactions:
        if txn.txn_type != _EXPENSE:
            continue
        category = lookup.get(txn.category_id) if txn.category_id is not None else None
        name = category.name if category else UNCATEGORIZED
        bucket = groups.get(name)
        if bucket is None:
            bucket = CategorySpend(
                name=name,
                amount=ZERO,
                color=category.color if category and category.color else DEFAULT_CATEGORY_COLOR,
                category_id=category.id if category else None,
            )
            groups[name] = bucket
        bucket.amount += _magnitude(txn.amount)
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(groups.values(), key=lambda item: item.amount, reverse=True)


def spending_by_category(
    transactions: Iterable[Transaction], categories: Iterable[Category], limit: int = 8
) -> list[CategorySpend]:
    """Expense totals per category, largest first, truncated to ``limit``."""

    return _group_expenses(transactions, categories)[:limit]


def top_categories(
    transactions: Iterable[Transaction], categories: Iterable[Category], limit: int = 5
) -> list[CategorySpend]:
    """Largest expense categories with ``percentage`` relative to the biggest one."""

    ranked = _group_expenses(transactions, categories)[:limit]
    if not ranked:
        return []
    peak = ranked[0].amount
    for item in ranked:
        item.percentage = float(item.amount / peak * 100) if peak > 0 else 0.0
    return ranked


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` calendar months from (year, month)."""

    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def window_start(now: date | datetime, months: int) -> date:
    """First day of the oldest month in a ``months``-long window ending at ``now``."""

    today = _as_date(now)
    year, month = shift_month(today.year, today.month, -(months - 1))
    return date(year, month, 1)


def monthly_series(
    transactions: Iterable[Transaction], now: date | datetime, months: int
) -> list[MonthPoint]:
    """One point per calendar month, oldest first, ending at the month of ``now``."""

    if months < 1:
        raise ValidationError("Window must cover at least one month.", field="months")

    today = _as_date(now)
    points: list[MonthPoint] = []
    index: dict[tuple[int, int], MonthPoint] = {}
    for offset in range(months - 1, -1, -1):
        year, month = shift_month(today.year, today.month, -offset)
        point = MonthPoint(label=calendar.month_abbr[month], year=year, month=month)
        points.append(point)
        index[(year, month)] = point

    for txn in transactions:
        day = _as_date(txn.occurred_on)
        point = index.get((day.year, day.month))
        if point is None:
            continue
        if txn.txn_type == _INCOME:
            point.income += _magnitude(txn.amount)
        elif txn.txn_type == _EXPENSE:
            point.expense += _magnitude(txn.amount)
    return points


def percent_change(current: Decimal, previous: Decimal) -> float:
    """Relative change in percent; 0 when there is nothing to compare against."""

    if previous == 0:
        return 0.0
    return float((current - previous) / previous * 100)


def compare_periods(transactions: Iterable[Transaction], now: date | datetime) -> PeriodComparison:
    """Compare the current calendar month with the one before it."""

    today = _as_date(now)
    prev_year, prev_month = shift_month(today.year, today.month, -1)
    current_start, current_end = month_bounds(today.year, today.month)
    previous_start, previous_end = month_bounds(prev_year, prev_month)

    current: list[Transaction] = []
    previous: list[Transaction] = []
    for txn in transactions:
        day = _as_date(txn.occurred_on)
        if current_start <= day <= current_end:
            current.append(txn)
        elif previous_start <= day <= previous_end:
            previous.append(txn)

    cur = totals_by_type(current)
    prev = totals_by_type(previous)
    return PeriodComparison(
        current_month=calendar.month_name[today.month],
        previous_month=calendar.month_name[prev_month],
        current_income=cur.income,
        previous_income=prev.income,
        current_expense=cur.expense,
        previous_expense=prev.expense,
        income_change_pct=percent_change(cur.income, prev.income),
        expense_change_pct=percent_change(cur.expense, prev.expense),
    )


def build_analytics_report(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    accounts: Sequence[Account],
    now: date | datetime,
    months: int,
) -> AnalyticsReport:
    """Everything the analytics view shows for one window."""

    if months < 1:
        raise ValidationError("Window must cover at least one month.", field="months")

    today = _as_date(now)
    start = window_start(today, months)
    end = month_bounds(today.year, today.month)[1]
    in_window = [txn for txn in transactions if start <= _as_date(txn.occurred_on) <= end]

    return AnalyticsReport(
        months=months,
        start_date=start,
        end_date=end,
        totals=totals_by_type(in_window),
        spending=spending_by_category(in_window, categories),
        top=top_categories(in_window, categories),
        series=monthly_series(in_window, today, months),
        # the comparison always looks at the two latest months, not the window
        comparison=compare_periods(transactions, today),
        transaction_count=len(in_window),
        account_count=len(accounts),
    )
