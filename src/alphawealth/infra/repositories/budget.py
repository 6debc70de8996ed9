"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from ...errors import RecordNotFoundError
from ...models.account import Account
from ...models.budget import Budget, BudgetItem
from ...models.category import Category
from .base import fetch_owned, require_owned

_MUTABLE_FIELDS = (
    "name",
    "budget_type",
    "amount",
    "start_date",
    "end_date",
    "account_id",
    "category_id",
    "period",
    "rollover",
)


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _base_query(self, user_id: int):
        return select(Budget).options(selectinload(Budget.items)).where(Budget.user_id == user_id)

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a budget by ID."""
        with self.session_factory() as session:
            obj = session.exec(self._base_query(user_id).where(Budget.id == budget_id)).first()
            if obj:
                session.expunge_all()
            return obj

    def list_all(self, *, user_id: int) -> list[Budget]:
        """List budgets, most recently created first."""
        with self.session_factory() as session:
            statement = self._base_query(user_id).order_by(
                Budget.created_at.desc(), Budget.id.desc()  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_active(self, today: date, *, user_id: int) -> list[Budget]:
        """List budgets whose inclusive range contains ``today``."""
        with self.session_factory() as session:
            statement = (
                self._base_query(user_id)
                .where(Budget.start_date <= today)
                .where(Budget.end_date >= today)
                .order_by(Budget.start_date, Budget.id)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        """Create a new budget together with any items attached to it."""
        with self.session_factory() as session:
            self._check_links(session, budget, user_id)
            budget.user_id = user_id
            for item in budget.items:
                self._check_item(session, item, user_id)
                item.user_id = user_id
            session.add(budget)
            session.commit()
            return self._reload(session, budget.id, user_id)

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        """Update an existing budget's fields (items are managed separately)."""
        with self.session_factory() as session:
            existing = fetch_owned(session, Budget, budget.id, user_id)
            if existing is None:
                raise RecordNotFoundError("Budget", budget.id)
            for field_name in _MUTABLE_FIELDS:
                setattr(existing, field_name, getattr(budget, field_name))
            existing.updated_at = datetime.now(timezone.utc)
            self._check_links(session, existing, user_id)
            session.add(existing)
            session.commit()
            return self._reload(session, existing.id, user_id)

    def delete(self, budget_id: int, *, user_id: int) -> None:
        """Delete a budget by ID; its items go with it."""
        with self.session_factory() as session:
            budget = session.exec(self._base_query(user_id).where(Budget.id == budget_id)).first()
            if budget is None:
                raise RecordNotFoundError("Budget", budget_id)
            session.delete(budget)
            session.commit()

    # Budget item operations
    def add_item(self, item: BudgetItem, *, user_id: int) -> BudgetItem:
        """Attach a category item to an owned budget."""
        with self.session_factory() as session:
            require_owned(session, Budget, item.budget_id, user_id, kind="Budget")
            self._check_item(session, item, user_id)
            item.user_id = user_id
            session.add(item)
            session.commit()
            session.refresh(item)
            session.expunge(item)
            return item

    def delete_item(self, item_id: int, *, user_id: int) -> None:
        """Remove a budget item."""
        with self.session_factory() as session:
            item = fetch_owned(session, BudgetItem, item_id, user_id)
            if item is None:
                raise RecordNotFoundError("Budget item", item_id)
            session.delete(item)
            session.commit()

    @staticmethod
    def _check_links(session: Session, budget: Budget, user_id: int) -> None:
        if budget.account_id is not None:
            require_owned(session, Account, budget.account_id, user_id, kind="Account")
        if budget.category_id is not None:
            require_owned(session, Category, budget.category_id, user_id, kind="Category")

    @staticmethod
    def _check_item(session: Session, item: BudgetItem, user_id: int) -> None:
        if item.category_id is not None:
            require_owned(session, Category, item.category_id, user_id, kind="Category")

    def _reload(self, session: Session, budget_id: Optional[int], user_id: int) -> Budget:
        obj = session.exec(
            self._base_query(user_id)
            .where(Budget.id == budget_id)
            .execution_options(populate_existing=True)
        ).one()
        session.expunge_all()
        return obj
