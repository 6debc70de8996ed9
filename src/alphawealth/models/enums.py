"""String enumerations for the typed tags stored on ledger records."""

from __future__ import annotations

from enum import Enum


class AccountType(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    CASH = "cash"
    INVESTMENT = "investment"
    OTHER = "other"


class CategoryType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    CUSTOM = "custom"


def enum_values(enum_cls: type[Enum]) -> tuple[str, ...]:
    """Return the raw string values of an enum, in declaration order."""

    return tuple(member.value for member in enum_cls)
