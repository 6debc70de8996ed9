"""Default categories, demo seed and owner purge."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from alphawealth.services.data_admin import purge_owner_data
from alphawealth.services.seed import DEFAULT_CATEGORIES, ensure_default_categories, run_demo_seed
from alphawealth.services.auth import get_user_by_username


def test_default_categories_are_idempotent(session_factory, category_repo, user):
    ensure_default_categories(session_factory, user_id=user.id)
    ensure_default_categories(session_factory, user_id=user.id)

    categories = category_repo.list_all(user_id=user.id)
    assert len(categories) == len(DEFAULT_CATEGORIES)
    assert all(cat.is_default for cat in categories)


def test_demo_seed_keeps_balances_consistent(session_factory, account_repo, transaction_repo, user):
    summary = run_demo_seed(session_factory, user_id=user.id, today=date(2024, 3, 31))

    assert summary.accounts == 2
    assert summary.budgets == 1
    assert summary.transactions > 0

    opening = {"Everyday Checking": Decimal("1200.00"), "Rainy Day Savings": Decimal("5000.00")}
    transactions = transaction_repo.list_all(user_id=user.id)
    for account in account_repo.list_all(user_id=user.id):
        signed = sum((t.balance_effect() for t in transactions if t.account_id == account.id), Decimal("0"))
        assert account.balance == opening[account.name] + signed

    again = run_demo_seed(session_factory, user_id=user.id, today=date(2024, 3, 31))
    assert again == summary


def test_purge_removes_everything(session_factory, account_repo, budget_repo, category_repo, transaction_repo, user, other_user):
    run_demo_seed(session_factory, user_id=user.id, today=date(2024, 3, 31))
    ensure_default_categories(session_factory, user_id=other_user.id)

    summary = purge_owner_data(session_factory, user_id=user.id)

    assert summary.transactions > 0
    assert summary.user_deleted is True
    assert transaction_repo.list_all(user_id=user.id) == []
    assert account_repo.list_all(user_id=user.id) == []
    assert budget_repo.list_all(user_id=user.id) == []
    assert category_repo.list_all(user_id=user.id) == []
    assert get_user_by_username("tester", session_factory) is None
    assert len(category_repo.list_all(user_id=other_user.id)) == len(DEFAULT_CATEGORIES)
