"""Account and category form validation."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Optional

from ...models.category import DEFAULT_CATEGORY_COLOR
from ...models.enums import AccountType, CategoryType, enum_values
from ..forms import BaseForm

DEFAULT_ACCOUNT_COLOR = "#3b82f6"


@dataclass(slots=True)
class AccountForm(BaseForm):
    """Represents account input prior to validation."""

    KEYS: ClassVar[tuple[str, ...]] = ("name", "type", "balance", "color", "icon")

    name: Optional[str] = None
    account_type: Optional[str] = None
    balance: Decimal = Decimal("0.00")
    color: str = DEFAULT_ACCOUNT_COLOR
    icon: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.name = self._text("name", "Name", max_length=128)
        self.account_type = self._choice(
            "type", "Type", enum_values(AccountType), default=AccountType.CHECKING.value
        )
        # Opening balances may be negative (credit cards).
        balance = self._money("balance", "Balance", required=False, positive=False)
        self.balance = balance if balance is not None else Decimal("0.00")
        self.color = self._color("color", DEFAULT_ACCOUNT_COLOR)
        self.icon = self._text("icon", "Icon", required=False, max_length=32)
        return not self.errors


@dataclass(slots=True)
class CategoryForm(BaseForm):
    """Represents category input prior to validation."""

    KEYS: ClassVar[tuple[str, ...]] = ("name", "type", "color", "icon")

    name: Optional[str] = None
    category_type: Optional[str] = None
    color: str = DEFAULT_CATEGORY_COLOR
    icon: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.name = self._text("name", "Name", max_length=64)
        self.category_type = self._choice(
            "type", "Type", enum_values(CategoryType), default=CategoryType.EXPENSE.value
        )
        self.color = self._color("color", DEFAULT_CATEGORY_COLOR)
        self.icon = self._text("icon", "Icon", required=False, max_length=32)
        return not self.errors
