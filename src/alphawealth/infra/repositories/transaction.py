"""SQLModel implementation of Transaction repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...errors import RecordNotFoundError, ValidationError
from ...models.account import Account
from ...models.category import Category
from ...models.enums import TransactionType
from ...models.transaction import Transaction
from .base import fetch_owned, require_owned

_MUTABLE_FIELDS = ("account_id", "category_id", "amount", "txn_type", "description", "occurred_on")


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation.

    Every write that changes amount, type or account adjusts the affected
    account balances inside the same session, so the row and the balance are
    committed (or rolled back) together.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _base_query(self, user_id: int):
        return (
            select(Transaction)
            .options(selectinload(Transaction.account), selectinload(Transaction.category))
            .where(Transaction.user_id == user_id)
        )

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                self._base_query(user_id).where(Transaction.id == transaction_id)
            ).first()
            if obj:
                session.expunge_all()
            return obj

    def list_all(
        self, *, user_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> list[Transaction]:
        """List transactions newest first with optional pagination."""
        with self.session_factory() as session:
            statement = (
                self._base_query(user_id)
                .order_by(Transaction.occurred_on.desc(), Transaction.id.desc())  # type: ignore
                .offset(offset)
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def filter_by_date_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within an inclusive date range, oldest first."""
        with self.session_factory() as session:
            statement = (
                self._base_query(user_id)
                .where(Transaction.occurred_on >= start_date)
                .where(Transaction.occurred_on <= end_date)
                .order_by(Transaction.occurred_on, Transaction.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def search(
        self,
        *,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        txn_type: Optional[str] = None,
        text: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """Advanced search with multiple filters.

        ``text`` matches the description or the category name, case-insensitively.
        """
        with self.session_factory() as session:
            statement = self._base_query(user_id)

            if start_date:
                statement = statement.where(Transaction.occurred_on >= start_date)
            if end_date:
                statement = statement.where(Transaction.occurred_on <= end_date)
            if account_id:
                statement = statement.where(Transaction.account_id == account_id)
            if category_id:
                statement = statement.where(Transaction.category_id == category_id)
            if txn_type:
                statement = statement.where(Transaction.txn_type == txn_type)
            if text:
                needle = f"%{text.strip().lower()}%"
                statement = statement.outerjoin(
                    Category, Category.id == Transaction.category_id  # type: ignore[arg-type]
                ).where(
                    or_(
                        func.lower(Transaction.description).like(needle),
                        func.lower(Category.name).like(needle),
                    )
                )

            statement = statement.order_by(
                Transaction.occurred_on.desc(), Transaction.id.desc()  # type: ignore
            )
            if limit is not None:
                statement = statement.limit(limit)
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Insert a transaction and apply it to its account balance."""
        with self.session_factory() as session:
            account = require_owned(session, Account, transaction.account_id, user_id, kind="Account")
            self._check_category(session, transaction, user_id)

            transaction.user_id = user_id
            session.add(transaction)
            self._adjust(account, transaction.balance_effect())
            session.add(account)
            session.commit()
            return self._reload(session, transaction.id, user_id)

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update a transaction, moving its balance effect as needed."""
        with self.session_factory() as session:
            existing = fetch_owned(session, Transaction, transaction.id, user_id)
            if existing is None:
                raise RecordNotFoundError("Transaction", transaction.id)

            # Resolve the new links before touching ``existing``; a lookup query
            # autoflushes, and a dangling foreign key must not reach the database.
            new_account = require_owned(session, Account, transaction.account_id, user_id, kind="Account")
            self._check_category(session, transaction, user_id)
            old_account = require_owned(session, Account, existing.account_id, user_id, kind="Account")

            self._adjust(old_account, -existing.balance_effect())
            session.add(old_account)

            for field_name in _MUTABLE_FIELDS:
                setattr(existing, field_name, getattr(transaction, field_name))
            existing.updated_at = datetime.now(timezone.utc)

            self._adjust(new_account, existing.balance_effect())
            session.add(new_account)
            session.add(existing)
            session.commit()
            return self._reload(session, existing.id, user_id)

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Delete a transaction and revert its balance effect."""
        with self.session_factory() as session:
            transaction = fetch_owned(session, Transaction, transaction_id, user_id)
            if transaction is None:
                raise RecordNotFoundError("Transaction", transaction_id)
            account = fetch_owned(session, Account, transaction.account_id, user_id)
            if account is not None:
                self._adjust(account, -transaction.balance_effect())
                session.add(account)
            session.delete(transaction)
            session.commit()

    @staticmethod
    def _adjust(account: Account, delta) -> None:
        account.balance = account.balance + delta
        account.updated_at = datetime.now(timezone.utc)

    @staticmethod
    def _check_category(session: Session, transaction: Transaction, user_id: int) -> None:
        if transaction.category_id is None:
            return
        category = require_owned(session, Category, transaction.category_id, user_id, kind="Category")
        if transaction.txn_type == TransactionType.TRANSFER.value:
            raise ValidationError("Transfers cannot be categorized.", field="category_id")
        if category.category_type != transaction.txn_type:
            raise ValidationError(
                f"Category '{category.name}' is an {category.category_type} category.",
                field="category_id",
            )

    def _reload(self, session: Session, transaction_id: Optional[int], user_id: int) -> Transaction:
        obj = session.exec(
            self._base_query(user_id)
            .where(Transaction.id == transaction_id)
            .execution_options(populate_existing=True)
        ).one()
        session.expunge_all()
        return obj
