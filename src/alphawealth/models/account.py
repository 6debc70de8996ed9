"""Account model for transaction linkage."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .enums import AccountType

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class Account(SQLModel, table=True):
    """A money container whose balance tracks the transactions posted to it."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    account_type: str = Field(default=AccountType.CHECKING.value, nullable=False, max_length=32)
    balance: Decimal = Field(default=Decimal("0.00"), max_digits=14, decimal_places=2)
    color: str = Field(default="#3b82f6", max_length=7)
    icon: Optional[str] = Field(default=None, max_length=32)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    transactions: list["Transaction"] = Relationship(
        sa_relationship=relationship("Transaction", back_populates="account"),
    )
