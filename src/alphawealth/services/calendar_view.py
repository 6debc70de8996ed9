"""Calendar-month bucketing of transactions by day."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime
from decimal import Decimal
from typing import Iterable

from ..errors import ValidationError
from ..models.enums import TransactionType
from ..models.transaction import Transaction
from .analytics import ZERO

# Upper bounds (exclusive) for intensity levels 1..4; anything above is 5.
INTENSITY_THRESHOLDS = (Decimal("50"), Decimal("100"), Decimal("250"), Decimal("500"))

_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)


@dataclass(slots=True)
class DayCell:
    day: date
    in_month: bool
    income: Decimal = ZERO
    expense: Decimal = ZERO
    transaction_count: int = 0
    is_today: bool = False

    @property
    def intensity(self) -> int:
        return spending_intensity(self.expense)

    @property
    def selectable(self) -> bool:
        return self.transaction_count > 0


@dataclass(slots=True)
class CalendarMonth:
    year: int
    month: int
    weeks: list[list[DayCell]] = field(default_factory=list)
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"


def spending_intensity(expense: Decimal) -> int:
    """Map a day's expense total onto a 0..5 heat level."""

    if expense <= 0:
        return 0
    for level, bound in enumerate(INTENSITY_THRESHOLDS, start=1):
        if expense < bound:
            return level
    return len(INTENSITY_THRESHOLDS) + 1


def _day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def build_calendar_month(
    transactions: Iterable[Transaction], year: int, month: int, today: date
) -> CalendarMonth:
    """Sunday-first grid for ``year``/``month`` with per-day totals."""

    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12.", field="month")
    # The grid spills into the neighbouring months, so both edge years are out.
    if not MINYEAR < year < MAXYEAR:
        raise ValidationError(f"Year must be between {MINYEAR + 1} and {MAXYEAR - 1}.", field="year")

    grid = _calendar.monthdatescalendar(year, month)
    view = CalendarMonth(year=year, month=month)
    cells: dict[date, DayCell] = {}
    for week in grid:
        row = []
        for day in week:
            cell = DayCell(day=day, in_month=day.month == month, is_today=day == today)
            cells[day] = cell
            row.append(cell)
        view.weeks.append(row)

    for txn in transactions:
        cell = cells.get(_day(txn.occurred_on))
        if cell is None:
            continue
        amount = abs(txn.amount if isinstance(txn.amount, Decimal) else Decimal(str(txn.amount)))
        cell.transaction_count += 1
        if txn.txn_type == TransactionType.INCOME.value:
            cell.income += amount
        elif txn.txn_type == TransactionType.EXPENSE.value:
            cell.expense += amount

    for cell in cells.values():
        if cell.in_month:
            view.income += cell.income
            view.expense += cell.expense
    return view


def transactions_on(transactions: Iterable[Transaction], day: date) -> list[Transaction]:
    """Transactions recorded on ``day``, in their original order."""

    return [txn for txn in transactions if _day(txn.occurred_on) == day]
