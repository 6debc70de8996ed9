"""Budgeting tables."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .enums import BudgetPeriod, TransactionType


class Budget(SQLModel, table=True):
    """A spending (or income) target over an inclusive date range."""

    __tablename__: ClassVar[str] = "budget"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80)
    budget_type: str = Field(default=TransactionType.EXPENSE.value, nullable=False, max_length=16)
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    start_date: date = Field(index=True, nullable=False)
    end_date: date = Field(index=True, nullable=False)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id")
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    period: str = Field(default=BudgetPeriod.MONTHLY.value, nullable=False, max_length=16)
    rollover: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    items: list["BudgetItem"] = Relationship(
        sa_relationship=relationship(
            "BudgetItem", back_populates="budget", cascade="all, delete-orphan"
        ),
    )

    def is_active(self, today: date) -> bool:
        return self.start_date <= today <= self.end_date

    def is_past(self, today: date) -> bool:
        return self.end_date < today


class BudgetItem(SQLModel, table=True):
    """Planned amount for one category inside a budget."""

    __tablename__: ClassVar[str] = "budget_item"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    budget_id: int = Field(foreign_key="budget.id", nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id")
    planned_amount: Decimal = Field(max_digits=14, decimal_places=2)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    budget: Optional["Budget"] = Relationship(
        sa_relationship=relationship("Budget", back_populates="items"),
    )
