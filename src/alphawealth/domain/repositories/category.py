"""Category repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for managing category entities."""

    def get_by_id(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by ID."""
        ...

    def get_by_name(self, name: str, category_type: str, *, user_id: int) -> Optional[Category]:
        """Retrieve a category by name within one type."""
        ...

    def list_all(self, *, user_id: int) -> list[Category]:
        """List all categories."""
        ...

    def list_by_type(self, category_type: str, *, user_id: int) -> list[Category]:
        """List categories filtered by type (income/expense)."""
        ...

    def create(self, category: Category, *, user_id: int) -> Category:
        """Create a new category."""
        ...

    def create_many(self, categories: list[Category], *, user_id: int) -> list[Category]:
        ...

    def update(self, category: Category, *, user_id: int) -> Category:
        """Update an existing category."""
        ...

    def delete(self, category_id: int, *, user_id: int) -> None:
        """Delete a category, detaching it from transactions and budgets."""
        ...
