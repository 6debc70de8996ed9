"""SQLModel table exports."""

from .account import Account
from .budget import Budget, BudgetItem
from .category import DEFAULT_CATEGORY_COLOR, Category
from .enums import AccountType, BudgetPeriod, CategoryType, TransactionType
from .transaction import Transaction
from .user import User

__all__ = [
    "Account",
    "AccountType",
    "Budget",
    "BudgetItem",
    "BudgetPeriod",
    "Category",
    "CategoryType",
    "DEFAULT_CATEGORY_COLOR",
    "Transaction",
    "TransactionType",
    "User",
]
