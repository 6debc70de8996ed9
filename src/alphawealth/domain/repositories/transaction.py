"""Transaction repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.transaction import Transaction


class TransactionRepository(Protocol):
    """Repository for managing transaction entities.

    Writes keep the linked account's balance consistent in the same unit of work.
    """

    def get_by_id(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        ...

    def list_all(self, *, user_id: int, limit: Optional[int] = None, offset: int = 0) -> list[Transaction]:
        """List transactions newest first."""
        ...

    def filter_by_date_range(
        self, start_date: date, end_date: date, *, user_id: int
    ) -> list[Transaction]:
        """Get transactions within an inclusive date range."""
        ...

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
        """Advanced search with multiple filters."""
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Insert a transaction and apply it to its account balance."""
        ...

    def update(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Update a transaction, moving its balance effect as needed."""
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> None:
        """Delete a transaction and revert its balance effect."""
        ...
