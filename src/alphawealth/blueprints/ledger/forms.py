"""Ledger form validation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import ClassVar, Optional

from ...models.enums import TransactionType, enum_values
from ..forms import BaseForm


@dataclass(slots=True)
class TransactionForm(BaseForm):
    """Represents ledger entry input prior to validation."""

    KEYS: ClassVar[tuple[str, ...]] = (
        "account_id",
        "category_id",
        "amount",
        "type",
        "description",
        "date",
    )

    account_id: Optional[int] = None
    category_id: Optional[int] = None
    amount: Optional[Decimal] = None
    txn_type: Optional[str] = None
    description: Optional[str] = None
    occurred_on: Optional[date] = None

    def validate(self) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()
        self.account_id = self._required_id("account_id", "Account")
        self.category_id = self._optional_id("category_id", "Category")
        self.amount = self._money("amount", "Amount")
        self.txn_type = self._choice(
            "type", "Type", enum_values(TransactionType), default=TransactionType.EXPENSE.value
        )
        self.description = self._text("description", "Description", required=False, max_length=255)
        self.occurred_on = self._date("date", "Date")

        if self.txn_type == TransactionType.TRANSFER.value and self.category_id is not None:
            self._add_error("category_id", "Transfers cannot be categorized.")
        return not self.errors
