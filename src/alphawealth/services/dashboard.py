"""Loaders assembling the data each view shows.

Each loader reads through the repositories for one owner and hands the rows to
the pure aggregators. Store read failures are logged and yield empty data so a
view degrades to its empty state instead of erroring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from ..context import AppContext
from ..logging_config import get_logger
from ..models import Account, Budget, Category, Transaction
from . import analytics, budgeting
from .analytics import ZERO, month_bounds
from .calendar_view import CalendarMonth, build_calendar_month
from .ledger_service import LedgerFilters, Page, Pagination, filtered_transactions, paginate_transactions

logger = get_logger("dashboard")

T = TypeVar("T")

# Tables whose changes invalidate each live view.
VIEW_TABLES: dict[str, tuple[str, ...]] = {
    "dashboard": ("account", "transaction", "budget", "budget_item", "category"),
    "budgets": ("budget", "budget_item", "transaction", "category"),
    "transactions": ("transaction", "account", "category"),
}


def read_or_empty(reader: Callable[[], T], default: T, *, what: str, user_id: int) -> T:
    """Run a store read, logging and returning ``default`` on failure."""

    try:
        return reader()
    except SQLAlchemyError:
        logger.exception("Read failed; showing empty state", extra={"view": what, "user_id": user_id})
        return default


@dataclass
class DashboardSummary:
    total_balance: Decimal
    month_income: Decimal
    month_expense: Decimal
    accounts: list[Account]
    recent_transactions: list[Transaction]
    budgets: list[budgeting.BudgetProgress] = field(default_factory=list)

    @property
    def month_net(self) -> Decimal:
        return self.month_income - self.month_expense


@dataclass
class BudgetsOverview:
    active: list[budgeting.BudgetProgress]
    past: list[budgeting.BudgetProgress]
    upcoming: list[budgeting.BudgetProgress]


def budget_progress_for(
    ctx: AppContext,
    budget: Budget,
    categories: list[Category],
    *,
    user_id: int,
    today: date,
) -> budgeting.BudgetProgress:
    """Progress for one budget, loading exactly the rows it needs."""

    start, end = budgeting.fetch_window(budget)
    rows = ctx.transaction_repo.filter_by_date_range(start, end, user_id=user_id)
    return budgeting.budget_progress(budget, budget.items, rows, categories, today)


def load_dashboard(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> DashboardSummary:
    today = today or date.today()
    month_start, month_end = month_bounds(today.year, today.month)
    cfg = ctx.config

    accounts = read_or_empty(lambda: ctx.account_repo.list_all(user_id=user_id), [], what="dashboard", user_id=user_id)
    month_rows = read_or_empty(
        lambda: ctx.transaction_repo.filter_by_date_range(month_start, month_end, user_id=user_id),
        [],
        what="dashboard",
        user_id=user_id,
    )
    recent = read_or_empty(
        lambda: ctx.transaction_repo.list_all(user_id=user_id, limit=cfg.RECENT_TRANSACTIONS),
        [],
        what="dashboard",
        user_id=user_id,
    )
    categories = read_or_empty(lambda: ctx.category_repo.list_all(user_id=user_id), [], what="dashboard", user_id=user_id)
    active = read_or_empty(
        lambda: ctx.budget_repo.list_active(today, user_id=user_id), [], what="dashboard", user_id=user_id
    )

    progress = read_or_empty(
        lambda: [
            budget_progress_for(ctx, budget, categories, user_id=user_id, today=today)
            for budget in active[: cfg.DASHBOARD_BUDGETS]
        ],
        [],
        what="dashboard",
        user_id=user_id,
    )

    totals = analytics.totals_by_type(month_rows)
    return DashboardSummary(
        total_balance=sum((acc.balance for acc in accounts), ZERO),
        month_income=totals.income,
        month_expense=totals.expense,
        accounts=accounts,
        recent_transactions=recent,
        budgets=progress,
    )


def load_budgets(ctx: AppContext, *, user_id: int, today: Optional[date] = None) -> BudgetsOverview:
    today = today or date.today()

    def _read() -> BudgetsOverview:
        categories = ctx.category_repo.list_all(user_id=user_id)
        lists = budgeting.partition_budgets(ctx.budget_repo.list_all(user_id=user_id), today)

        def _progress(budgets: list[Budget]) -> list[budgeting.BudgetProgress]:
            return [budget_progress_for(ctx, b, categories, user_id=user_id, today=today) for b in budgets]

        return BudgetsOverview(
            active=_progress(lists.active),
            past=_progress(lists.past),
            upcoming=_progress(lists.upcoming),
        )

    return read_or_empty(_read, BudgetsOverview([], [], []), what="budgets", user_id=user_id)


def load_transactions(
    ctx: AppContext, filters: LedgerFilters, pagination: Optional[Pagination] = None
) -> Page:
    pagination = pagination or Pagination()
    rows = read_or_empty(
        lambda: filtered_transactions(ctx.transaction_repo, filters),
        [],
        what="transactions",
        user_id=filters.user_id,
    )
    return paginate_transactions(rows, pagination)


def load_analytics(
    ctx: AppContext, *, user_id: int, months: int, today: Optional[date] = None
) -> analytics.AnalyticsReport:
    today = today or date.today()
    # The comparison needs the previous month even for a one-month window.
    start = analytics.window_start(today, max(months, 2))
    end = month_bounds(today.year, today.month)[1]
    rows = read_or_empty(
        lambda: ctx.transaction_repo.filter_by_date_range(start, end, user_id=user_id),
        [],
        what="analytics",
        user_id=user_id,
    )
    categories = read_or_empty(lambda: ctx.category_repo.list_all(user_id=user_id), [], what="analytics", user_id=user_id)
    accounts = read_or_empty(lambda: ctx.account_repo.list_all(user_id=user_id), [], what="analytics", user_id=user_id)
    return analytics.build_analytics_report(rows, categories, accounts, today, months)


def load_calendar(
    ctx: AppContext, *, user_id: int, year: int, month: int, today: Optional[date] = None
) -> CalendarMonth:
    today = today or date.today()
    view = build_calendar_month([], year, month, today)
    first = view.weeks[0][0].day
    last = view.weeks[-1][-1].day
    rows = read_or_empty(
        lambda: ctx.transaction_repo.filter_by_date_range(first, last, user_id=user_id),
        [],
        what="calendar",
        user_id=user_id,
    )
    return build_calendar_month(rows, year, month, today)


def load_day(ctx: AppContext, *, user_id: int, day: date) -> list[Transaction]:
    return read_or_empty(
        lambda: ctx.transaction_repo.filter_by_date_range(day, day, user_id=user_id),
        [],
        what="calendar",
        user_id=user_id,
    )
