"""JSON shapes for records and aggregates returned by the API."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from .models import Account, Budget, BudgetItem, Category, Transaction, User
from .services.analytics import AnalyticsReport, CategorySpend, MonthPoint, PeriodComparison, TypeTotals
from .services.budgeting import BudgetProgress, ItemProgress
from .services.calendar_view import CalendarMonth, DayCell
from .services.dashboard import BudgetsOverview, DashboardSummary
from .services.ledger_service import Page


def money(value: Decimal | None) -> str:
    if value is None:
        return "0.00"
    return str(Decimal(value).quantize(Decimal("0.01")))


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "currency": user.currency,
        "created_at": _iso(user.created_at),
        "last_login": _iso(user.last_login),
    }


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.account_type,
        "balance": money(account.balance),
        "color": account.color,
        "icon": account.icon,
        "created_at": _iso(account.created_at),
        "updated_at": _iso(account.updated_at),
    }


def category_to_dict(category: Category) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "type": category.category_type,
        "color": category.color,
        "icon": category.icon,
        "is_default": category.is_default,
    }


def transaction_to_dict(txn: Transaction) -> dict[str, Any]:
    return {
        "id": txn.id,
        "account_id": txn.account_id,
        "category_id": txn.category_id,
        "amount": money(txn.amount),
        "type": txn.txn_type,
        "description": txn.description,
        "date": _iso(txn.occurred_on),
        "account": {"name": txn.account.name} if txn.account else None,
        "category": (
            {"name": txn.category.name, "color": txn.category.color} if txn.category else None
        ),
        "created_at": _iso(txn.created_at),
        "updated_at": _iso(txn.updated_at),
    }


def budget_item_to_dict(item: BudgetItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "budget_id": item.budget_id,
        "category_id": item.category_id,
        "planned_amount": money(item.planned_amount),
    }


def budget_to_dict(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "name": budget.name,
        "type": budget.budget_type,
        "amount": money(budget.amount),
        "start_date": _iso(budget.start_date),
        "end_date": _iso(budget.end_date),
        "account_id": budget.account_id,
        "category_id": budget.category_id,
        "period": budget.period,
        "rollover": budget.rollover,
        "items": [budget_item_to_dict(item) for item in budget.items],
    }


def item_progress_to_dict(row: ItemProgress) -> dict[str, Any]:
    return {
        "item_id": row.item_id,
        "category_id": row.category_id,
        "category": row.category_name,
        "planned": money(row.planned),
        "spent": money(row.spent),
        "remaining": money(row.remaining),
        "percentage": round(row.percentage, 2),
        "over_budget": row.over_budget,
    }


def progress_to_dict(progress: BudgetProgress) -> dict[str, Any]:
    return {
        "budget_id": progress.budget_id,
        "name": progress.name,
        "start_date": _iso(progress.start_date),
        "end_date": _iso(progress.end_date),
        "target": money(progress.target),
        "carried_over": money(progress.carried_over),
        "spent": money(progress.spent),
        "remaining": money(progress.remaining),
        "percentage": round(progress.percentage, 2),
        "over_budget": progress.over_budget,
        "days_left": progress.days_left,
        "items": [item_progress_to_dict(row) for row in progress.items],
    }


def totals_to_dict(totals: TypeTotals) -> dict[str, Any]:
    return {"income": money(totals.income), "expense": money(totals.expense), "net": money(totals.net)}


def spend_to_dict(item: CategorySpend) -> dict[str, Any]:
    return {
        "category_id": item.category_id,
        "name": item.name,
        "amount": money(item.amount),
        "color": item.color,
        "percentage": round(item.percentage, 2),
    }


def point_to_dict(point: MonthPoint) -> dict[str, Any]:
    return {
        "label": point.label,
        "year": point.year,
        "month": point.month,
        "income": money(point.income),
        "expense": money(point.expense),
        "net": money(point.net),
    }


def comparison_to_dict(cmp: PeriodComparison) -> dict[str, Any]:
    return {
        "current_month": cmp.current_month,
        "previous_month": cmp.previous_month,
        "current_income": money(cmp.current_income),
        "previous_income": money(cmp.previous_income),
        "current_expense": money(cmp.current_expense),
        "previous_expense": money(cmp.previous_expense),
        "income_change_pct": round(cmp.income_change_pct, 2),
        "expense_change_pct": round(cmp.expense_change_pct, 2),
        "net_savings": money(cmp.net_savings),
    }


def report_to_dict(report: AnalyticsReport) -> dict[str, Any]:
    return {
        "months": report.months,
        "start_date": _iso(report.start_date),
        "end_date": _iso(report.end_date),
        "totals": totals_to_dict(report.totals),
        "spending_by_category": [spend_to_dict(item) for item in report.spending],
        "top_categories": [spend_to_dict(item) for item in report.top],
        "monthly_series": [point_to_dict(point) for point in report.series],
        "comparison": comparison_to_dict(report.comparison),
        "transaction_count": report.transaction_count,
        "account_count": report.account_count,
    }


def day_to_dict(cell: DayCell) -> dict[str, Any]:
    return {
        "date": _iso(cell.day),
        "in_month": cell.in_month,
        "income": money(cell.income),
        "expense": money(cell.expense),
        "transaction_count": cell.transaction_count,
        "intensity": cell.intensity,
        "selectable": cell.selectable,
        "is_today": cell.is_today,
    }


def calendar_to_dict(view: CalendarMonth) -> dict[str, Any]:
    return {
        "year": view.year,
        "month": view.month,
        "title": view.title,
        "income": money(view.income),
        "expense": money(view.expense),
        "weeks": [[day_to_dict(cell) for cell in week] for week in view.weeks],
    }


def dashboard_to_dict(summary: DashboardSummary) -> dict[str, Any]:
    return {
        "total_balance": money(summary.total_balance),
        "month_income": money(summary.month_income),
        "month_expense": money(summary.month_expense),
        "month_net": money(summary.month_net),
        "accounts": [account_to_dict(acc) for acc in summary.accounts],
        "recent_transactions": [transaction_to_dict(txn) for txn in summary.recent_transactions],
        "budgets": [progress_to_dict(row) for row in summary.budgets],
    }


def budgets_overview_to_dict(overview: BudgetsOverview) -> dict[str, Any]:
    return {
        "active": [progress_to_dict(row) for row in overview.active],
        "past": [progress_to_dict(row) for row in overview.past],
        "upcoming": [progress_to_dict(row) for row in overview.upcoming],
    }


def page_to_dict(page: Page) -> dict[str, Any]:
    return {
        "items": [transaction_to_dict(txn) for txn in page.items],
        "total": page.total,
        "page": page.page,
        "per_page": page.per_page,
        "pages": page.pages,
    }
