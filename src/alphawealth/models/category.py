"""Ledger category definitions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .enums import CategoryType

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction

DEFAULT_CATEGORY_COLOR = "#6b7280"


class Category(SQLModel, table=True):
    """Income or expense bucket used for reporting and budgeting."""

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(index=True, nullable=False, max_length=64)
    category_type: str = Field(default=CategoryType.EXPENSE.value, nullable=False, max_length=16)
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, max_length=7)
    icon: Optional[str] = Field(default=None, max_length=32)
    is_default: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    transactions: list["Transaction"] = Relationship(
        sa_relationship=relationship("Transaction", back_populates="category"),
    )
