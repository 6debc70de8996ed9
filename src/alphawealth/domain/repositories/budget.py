"""Budget repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.budget import Budget, BudgetItem


class BudgetRepository(Protocol):
    """Repository for budgets and their category items."""

    def get_by_id(self, budget_id: int, *, user_id: int) -> Optional[Budget]:
        """Retrieve a budget (with items) by ID."""
        ...

    def list_all(self, *, user_id: int) -> list[Budget]:
        """List budgets, newest first."""
        ...

    def list_active(self, today: date, *, user_id: int) -> list[Budget]:
        """List budgets whose range contains ``today``."""
        ...

    def create(self, budget: Budget, *, user_id: int) -> Budget:
        """Create a new budget."""
        ...

    def update(self, budget: Budget, *, user_id: int) -> Budget:
        """Update an existing budget."""
        ...

    def delete(self, budget_id: int, *, user_id: int) -> None:
        """Delete a budget and its items."""
        ...

    def add_item(self, item: BudgetItem, *, user_id: int) -> BudgetItem:
        """Attach a category item to a budget."""
        ...

    def delete_item(self, item_id: int, *, user_id: int) -> None:
        """Remove a budget item."""
        ...
