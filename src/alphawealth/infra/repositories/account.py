"""SQLModel implementation of Account repository."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Optional

from sqlmodel import Session, select

from ...errors import RecordNotFoundError
from ...models.account import Account
from ...models.budget import Budget
from ...models.transaction import Transaction
from .base import fetch_owned


class SQLModelAccountRepository:
    """SQLModel-based account repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account by ID."""
        with self.session_factory() as session:
            obj = fetch_owned(session, Account, account_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Account]:
        """List the owner's accounts, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.created_at, Account.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account."""
        with self.session_factory() as session:
            account.user_id = user_id
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def update(self, account: Account, *, user_id: int) -> Account:
        """Update name, type, colour, icon or a corrected balance."""
        with self.session_factory() as session:
            existing = fetch_owned(session, Account, account.id, user_id)
            if existing is None:
                raise RecordNotFoundError("Account", account.id)
            existing.name = account.name
            existing.account_type = account.account_type
            existing.color = account.color
            existing.icon = account.icon
            existing.balance = account.balance
            existing.updated_at = datetime.now(timezone.utc)
            session.add(existing)
            session.commit()
            session.refresh(existing)
            session.expunge(existing)
            return existing

    def delete(self, account_id: int, *, user_id: int) -> int:
        """Delete an account together with its transactions.

        Budgets linked to the account lose the link. Returns the number of
        transactions removed.
        """
        with self.session_factory() as session:
            account = fetch_owned(session, Account, account_id, user_id)
            if account is None:
                raise RecordNotFoundError("Account", account_id)

            transactions = session.exec(
                select(Transaction)
                .where(Transaction.user_id == user_id)
                .where(Transaction.account_id == account_id)
            ).all()
            for txn in transactions:
                session.delete(txn)

            budgets = session.exec(
                select(Budget).where(Budget.user_id == user_id).where(Budget.account_id == account_id)
            ).all()
            for budget in budgets:
                budget.account_id = None
                session.add(budget)

            session.flush()
            session.delete(account)
            session.commit()
            return len(transactions)

    def total_balance(self, *, user_id: int) -> Decimal:
        """Sum of balances across the owner's accounts."""
        return sum((acc.balance for acc in self.list_all(user_id=user_id)), Decimal("0"))
