"""View state sequencing and live view refresh tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from alphawealth.models import Transaction
from alphawealth.services.view_state import LiveView, ViewState


def test_stale_fetch_is_discarded():
    state: ViewState[str] = ViewState()
    slow = state.begin_fetch()
    fast = state.begin_fetch()

    assert state.complete(fast, "fresh") is True
    assert state.complete(slow, "stale") is False
    assert state.snapshot == "fresh"
    assert state.applied_ticket == fast


def test_in_order_fetches_apply():
    state: ViewState[int] = ViewState(initial=0)
    first = state.begin_fetch()
    assert state.complete(first, 1)
    second = state.begin_fetch()
    assert state.complete(second, 2)
    assert state.snapshot == 2


def test_failed_refresh_keeps_snapshot():
    state: ViewState[str] = ViewState(initial="kept")

    def broken():
        raise RuntimeError("store offline")

    assert state.refresh(broken) is False
    assert state.snapshot == "kept"


def test_live_view_refreshes_on_commit(notifier, account_factory, transaction_repo, user):
    account = account_factory()
    updates: list[int] = []

    def count_transactions() -> int:
        return len(transaction_repo.list_all(user_id=user.id))

    live = LiveView(
        notifier,
        owner_id=user.id,
        tables=("transaction",),
        loader=count_transactions,
        on_update=updates.append,
    )
    with live:
        transaction_repo.create(
            Transaction(
                account_id=account.id,
                amount=Decimal("5"),
                txn_type="expense",
                occurred_on=date(2024, 1, 1),
            ),
            user_id=user.id,
        )
        assert live.state.snapshot == 1

    assert updates == [0, 1]
    assert live.active is False
    assert notifier.subscriber_count("transaction", user.id) == 0

    # Closed views are no longer refreshed.
    transaction_repo.create(
        Transaction(
            account_id=account.id,
            amount=Decimal("5"),
            txn_type="expense",
            occurred_on=date(2024, 1, 2),
        ),
        user_id=user.id,
    )
    assert updates == [0, 1]
