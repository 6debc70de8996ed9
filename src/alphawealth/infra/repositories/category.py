"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...errors import ProtectedRecordError, RecordNotFoundError
from ...models.budget import Budget, BudgetItem
from ...models.category import Category
from ...models.transaction import Transaction
from .base import fetch_owned


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        with self.session_factory() as session:
            obj = fetch_owned(session, Category, category_id, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def get_by_name(self, name: str, category_type: str, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by its name within one type."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.name == name)
                .where(Category.category_type == category_type)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_type(self, category_type: str, *, user_id: int) -> list[Category]:
        """List categories filtered by type (income/expense)."""
        with self.session_factory() as session:
            statement = (
                select(Category)
                .where(Category.user_id == user_id)
                .where(Category.category_type == category_type)
                .order_by(Category.name)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        with self.session_factory() as session:
            category.user_id = user_id
            session.add(category)
            session.commit()
            session.refresh(category)
            session.expunge(category)
            return category

    def create_many(self, categories: list[Category], *, user_id: int) -> list[Category]:
        """Insert several categories in one unit of work."""
        with self.session_factory() as session:
            for category in categories:
                category.user_id = user_id
                session.add(category)
            session.commit()
            for category in categories:
                session.refresh(category)
            session.expunge_all()
            return categories

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update name, colour and icon. The type of a category is fixed."""
        with self.session_factory() as session:
            existing = fetch_owned(session, Category, category.id, user_id)
            if existing is None:
                raise RecordNotFoundError("Category", category.id)
            existing.name = category.name
            existing.color = category.color
            existing.icon = category.icon
            session.add(existing)
            session.commit()
            session.refresh(existing)
            session.expunge(existing)
            return existing

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category, clearing every reference to it.

        Transactions, budgets and budget items keep existing with no category.
        Default categories are protected.
        """
        with self.session_factory() as session:
            category = fetch_owned(session, Category, category_id, user_id)
            if category is None:
                raise RecordNotFoundError("Category", category_id)
            if category.is_default:
                raise ProtectedRecordError(f"Default category '{category.name}' cannot be deleted")

            for model in (Transaction, Budget, BudgetItem):
                referencing = session.exec(
                    select(model)
                    .where(model.user_id == user_id)  # type: ignore[attr-defined]
                    .where(model.category_id == category_id)  # type: ignore[attr-defined]
                ).all()
                for row in referencing:
                    row.category_id = None
                    session.add(row)

            session.flush()
            session.delete(category)
            session.commit()
