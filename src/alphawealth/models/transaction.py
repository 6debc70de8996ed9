"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .enums import TransactionType

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account
    from .category import Category


class Transaction(SQLModel, table=True):
    """A single dated movement of money against one account.

    ``amount`` is always a positive magnitude; ``txn_type`` carries the sign.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    category_id: Optional[int] = Field(default=None, foreign_key="category.id", index=True)
    amount: Decimal = Field(max_digits=14, decimal_places=2)
    txn_type: str = Field(default=TransactionType.EXPENSE.value, nullable=False, max_length=16)
    description: Optional[str] = Field(default=None, max_length=255)
    occurred_on: date = Field(nullable=False, index=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    account: Optional["Account"] = Relationship(
        sa_relationship=relationship("Account", back_populates="transactions"),
    )
    category: Optional["Category"] = Relationship(
        sa_relationship=relationship("Category", back_populates="transactions"),
    )

    def balance_effect(self) -> Decimal:
        """Signed change this transaction applies to its account balance."""

        amount = self.amount if isinstance(self.amount, Decimal) else Decimal(str(self.amount))
        if self.txn_type == TransactionType.INCOME.value:
            return amount
        if self.txn_type == TransactionType.EXPENSE.value:
            return -amount
        return Decimal("0")
