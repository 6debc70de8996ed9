"""Budget form validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, ClassVar, Optional

from ...models.enums import BudgetPeriod, TransactionType, enum_values
from ...services.analytics import month_bounds
from ..forms import BaseForm


@dataclass(slots=True)
class BudgetItemForm(BaseForm):
    KEYS: ClassVar[tuple[str, ...]] = ("category_id", "planned_amount")

    category_id: Optional[int] = None
    planned_amount: Optional[Decimal] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.category_id = self._optional_id("category_id", "Category")
        self.planned_amount = self._money("planned_amount", "Planned amount", allow_zero=True)
        return not self.errors


@dataclass(slots=True)
class BudgetForm(BaseForm):
    """Represents budget input prior to validation.

    A monthly budget given only a start date runs to the end of that month.
    """

    KEYS: ClassVar[tuple[str, ...]] = (
        "name",
        "type",
        "amount",
        "start_date",
        "end_date",
        "account_id",
        "category_id",
        "period",
        "rollover",
    )

    name: Optional[str] = None
    budget_type: Optional[str] = None
    amount: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    period: Optional[str] = None
    rollover: bool = False
    items: list[BudgetItemForm] = field(default_factory=list)
    raw_items: list[Any] = field(default_factory=list)

    def load(self, data: Mapping[str, Any]) -> None:
        BaseForm.load(self, data)
        raw_items = data.get("items") if hasattr(data, "get") else None
        self.raw_items = list(raw_items) if isinstance(raw_items, list) else []

    def validate(self) -> bool:
        self.errors.clear()
        self.name = self._text("name", "Name", max_length=80)
        self.budget_type = self._choice(
            "type", "Type", enum_values(TransactionType), default=TransactionType.EXPENSE.value
        )
        self.amount = self._money("amount", "Amount", allow_zero=True)
        self.period = self._choice(
            "period", "Period", enum_values(BudgetPeriod), default=BudgetPeriod.MONTHLY.value
        )
        self.rollover = self._flag("rollover")
        self.account_id = self._optional_id("account_id", "Account")
        self.category_id = self._optional_id("category_id", "Category")

        self.start_date = self._date("start_date", "Start date")
        end_required = self.period != BudgetPeriod.MONTHLY.value
        self.end_date = self._date("end_date", "End date", required=end_required)
        if self.start_date and self.end_date is None and not end_required and "end_date" not in self.errors:
            self.end_date = month_bounds(self.start_date.year, self.start_date.month)[1]
        if self.start_date and self.end_date and self.end_date < self.start_date:
            self._add_error("end_date", "End date must be on or after the start date.")

        self.items = []
        for index, raw in enumerate(self.raw_items):
            if not isinstance(raw, Mapping):
                self._add_error(f"items.{index}", "Each item must be an object.")
                continue
            item_form = BudgetItemForm.from_mapping(raw)
            if not item_form.validate():
                for key, messages in item_form.errors.items():
                    for message in messages:
                        self._add_error(f"items.{index}.{key}", message)
                continue
            self.items.append(item_form)
        return not self.errors
