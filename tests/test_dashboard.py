"""View loader tests: dashboard summary, budgets overview and read failures."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from alphawealth.context import create_app_context
from alphawealth.models import Account, Budget, Transaction
from alphawealth.services.auth import create_user
from alphawealth.services.dashboard import (
    load_analytics,
    load_budgets,
    load_calendar,
    load_dashboard,
    read_or_empty,
)


@pytest.fixture
def ctx(config):
    context = create_app_context(config)
    yield context
    context.engine.dispose()


def _user_id(ctx) -> int:
    return create_user(username="viewer", password="password-1", session_factory=ctx.session_factory).id


def test_read_failure_yields_empty_state(caplog):
    def failing():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    with caplog.at_level(logging.ERROR, logger="alphawealth.dashboard"):
        assert read_or_empty(failing, [], what="dashboard", user_id=1) == []
    assert "Read failed" in caplog.text


def test_dashboard_limits_budgets_and_recent(ctx):
    owner = _user_id(ctx)
    today = date(2024, 5, 15)
    account = ctx.account_repo.create(Account(name="Main", balance=Decimal("10")), user_id=owner)


    for index in range(10):
        ctx.transaction_repo.create(
            Transaction(
                account_id=account.id,
                amount=Decimal("1"),
                txn_type="expense",
                occurred_on=today - timedelta(days=index),
            ),
            user_id=owner,
        )
    for index in range(4):
        ctx.budget_repo.create(
            Budget(name=f"B{index}", amount=Decimal("50"), start_date=date(2024, 5, 1), end_date=date(2024, 5, 31)),
            user_id=owner,
        )

    summary = load_dashboard(ctx, user_id=owner, today=today)

    assert len(summary.recent_transactions) == 8
    assert len(summary.budgets) == 3
    assert summary.total_balance == Decimal("0")
    assert summary.month_expense == Decimal("10")
    assert summary.month_net == Decimal("-10")


def test_budgets_overview_partitions(ctx):
    owner = _user_id(ctx)

    ctx.budget_repo.create(
        Budget(name="Old", amount=Decimal("5"), start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)),
        user_id=owner,
    )
    ctx.budget_repo.create(
        Budget(name="Now", amount=Decimal("5"), start_date=date(2024, 5, 1), end_date=date(2024, 5, 31)),
        user_id=owner,
    )

    overview = load_budgets(ctx, user_id=owner, today=date(2024, 5, 2))

    assert [row.name for row in overview.active] == ["Now"]
    assert [row.name for row in overview.past] == ["Old"]
    assert overview.upcoming == []


def test_calendar_includes_adjacent_days(ctx):
    owner = _user_id(ctx)

    account = ctx.account_repo.create(Account(name="Main"), user_id=owner)
    ctx.transaction_repo.create(
        Transaction(account_id=account.id, amount=Decimal("9"), txn_type="expense", occurred_on=date(2024, 1, 30)),
        user_id=owner,
    )

    view = load_calendar(ctx, user_id=owner, year=2024, month=2, today=date(2024, 2, 1))

    assert view.weeks[0][2].day == date(2024, 1, 30)
    assert view.weeks[0][2].expense == Decimal("9")
    assert view.expense == Decimal("0")


def test_analytics_loads_the_whole_current_month(ctx):
    owner = _user_id(ctx)
    account = ctx.account_repo.create(Account(name="Main"), user_id=owner)
    ctx.transaction_repo.create(
        Transaction(account_id=account.id, amount=Decimal("40"), txn_type="expense", occurred_on=date(2024, 5, 28)),
        user_id=owner,
    )

    report = load_analytics(ctx, user_id=owner, months=3, today=date(2024, 5, 15))

    assert report.end_date == date(2024, 5, 31)
    assert report.totals.expense == Decimal("40")
    assert report.series[-1].expense == Decimal("40")
