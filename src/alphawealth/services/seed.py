"""Default categories and demo data for new owners."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func
from sqlmodel import select

from ..infra.database import SessionFactory
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)
from ..logging_config import get_logger
from ..models import Account, Budget, BudgetItem, Category, Transaction
from ..models.enums import AccountType, BudgetPeriod, CategoryType, TransactionType
from .analytics import month_bounds, shift_month

logger = get_logger("seed")

# (name, type, colour, icon)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("Salary", CategoryType.INCOME.value, "#10b981", "briefcase"),
    ("Freelance", CategoryType.INCOME.value, "#14b8a6", "laptop"),
    ("Investments", CategoryType.INCOME.value, "#22c55e", "trending-up"),
    ("Other Income", CategoryType.INCOME.value, "#84cc16", "plus-circle"),
    ("Food & Dining", CategoryType.EXPENSE.value, "#ef4444", "utensils"),
    ("Groceries", CategoryType.EXPENSE.value, "#f97316", "shopping-cart"),
    ("Transportation", CategoryType.EXPENSE.value, "#f59e0b", "car"),
    ("Housing", CategoryType.EXPENSE.value, "#8b5cf6", "home"),
    ("Utilities", CategoryType.EXPENSE.value, "#6366f1", "zap"),
    ("Entertainment", CategoryType.EXPENSE.value, "#ec4899", "film"),
    ("Healthcare", CategoryType.EXPENSE.value, "#06b6d4", "heart"),
    ("Shopping", CategoryType.EXPENSE.value, "#a855f7", "shopping-bag"),
    ("Other Expense", CategoryType.EXPENSE.value, "#6b7280", "more-horizontal"),
)


@dataclass(frozen=True)
class SeedSummary:
    """Aggregate counts returned after demo seeding."""

    accounts: int
    categories: int
    transactions: int
    budgets: int


def ensure_default_categories(session_factory: SessionFactory, *, user_id: int) -> list[Category]:
    """Create the protected default categories the owner is missing."""

    repo = SQLModelCategoryRepository(session_factory)
    existing = {(cat.name, cat.category_type) for cat in repo.list_all(user_id=user_id)}
    missing = [
        Category(name=name, category_type=kind, color=color, icon=icon, is_default=True)
        for name, kind, color, icon in DEFAULT_CATEGORIES
        if (name, kind) not in existing
    ]
    if missing:
        repo.create_many(missing, user_id=user_id)
        logger.info("Default categories created", extra={"user_id": user_id, "count": len(missing)})
    return repo.list_all(user_id=user_id)


def run_demo_seed(
    session_factory: SessionFactory, *, user_id: int, today: date | None = None, force: bool = False
) -> SeedSummary:
    """Seed demo accounts, three months of transactions and a budget.

    Writes go through the repositories so account balances stay consistent
    with the seeded transactions. Re-running is a no-op unless ``force``.
    """

    today = today or date.today()
    if not force and _count(session_factory, Transaction, user_id):
        return build_seed_summary(session_factory, user_id=user_id)

    categories = {cat.name: cat for cat in ensure_default_categories(session_factory, user_id=user_id)}
    accounts_repo = SQLModelAccountRepository(session_factory)
    txn_repo = SQLModelTransactionRepository(session_factory)
    budget_repo = SQLModelBudgetRepository(session_factory)

    checking = accounts_repo.create(
        Account(name="Everyday Checking", account_type=AccountType.CHECKING.value, balance=Decimal("1200.00")),
        user_id=user_id,
    )
    savings = accounts_repo.create(
        Account(
            name="Rainy Day Savings",
            account_type=AccountType.SAVINGS.value,
            balance=Decimal("5000.00"),
            color="#10b981",
        ),
        user_id=user_id,
    )

    # (day of month, description, amount, type, category, account)
    monthly_pattern = (
        (1, "Paycheck", "3200.00", TransactionType.INCOME, "Salary", checking),
        (2, "Rent", "1400.00", TransactionType.EXPENSE, "Housing", checking),
        (5, "Grocery run", "145.60", TransactionType.EXPENSE, "Groceries", checking),
        (9, "Electric bill", "88.20", TransactionType.EXPENSE, "Utilities", checking),
        (12, "Dinner out", "62.75", TransactionType.EXPENSE, "Food & Dining", checking),
        (15, "Transfer to savings", "300.00", TransactionType.TRANSFER, None, savings),
        (18, "Bus pass", "45.00", TransactionType.EXPENSE, "Transportation", checking),
        (22, "Movie night", "31.50", TransactionType.EXPENSE, "Entertainment", checking),
        (26, "Side project", "450.00", TransactionType.INCOME, "Freelance", checking),
    )
    for offset in (2, 1, 0):
        year, month = shift_month(today.year, today.month, -offset)
        _, month_end = month_bounds(year, month)
        for day, description, amount, kind, category_name, account in monthly_pattern:
            occurred_on = date(year, month, min(day, month_end.day))
            if occurred_on > today:
                continue
            category = categories.get(category_name) if category_name else None
            txn_repo.create(
                Transaction(
                    account_id=account.id,
                    category_id=category.id if category else None,
                    amount=Decimal(amount),
                    txn_type=kind.value,
                    description=description,
                    occurred_on=occurred_on,
                ),
                user_id=user_id,
            )

    month_start, month_end = month_bounds(today.year, today.month)
    budget = Budget(
        name=f"{month_start:%B} spending",
        amount=Decimal("2200.00"),
        start_date=month_start,
        end_date=month_end,
        period=BudgetPeriod.MONTHLY.value,
        rollover=False,
    )
    budget.items = [
        BudgetItem(category_id=categories[name].id, planned_amount=Decimal(planned))
        for name, planned in (
            ("Groceries", "400.00"),
            ("Food & Dining", "150.00"),
            ("Transportation", "100.00"),
            ("Entertainment", "80.00"),
        )
        if name in categories
    ]
    budget_repo.create(budget, user_id=user_id)

    logger.info("Demo data seeded", extra={"user_id": user_id, "as_of": today.isoformat()})
    return build_seed_summary(session_factory, user_id=user_id)


def _count(session_factory: SessionFactory, model, user_id: int) -> int:
    with session_factory() as session:
        return session.exec(
            select(func.count()).select_from(model).where(model.user_id == user_id)
        ).one()


def build_seed_summary(session_factory: SessionFactory, *, user_id: int) -> SeedSummary:
    return SeedSummary(
        accounts=_count(session_factory, Account, user_id),
        categories=_count(session_factory, Category, user_id),
        transactions=_count(session_factory, Transaction, user_id),
        budgets=_count(session_factory, Budget, user_id),
    )
