"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .domain.repositories import (
    AccountRepository,
    BudgetRepository,
    CategoryRepository,
    TransactionRepository,
)
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)
from .services.notifier import ChangeNotifier


@dataclass
class AppContext:
    """Centralized application context with the store, repositories and change feed."""

    # Configuration
    config: BaseConfig

    # Store
    engine: Engine
    session_factory: SessionFactory
    notifier: ChangeNotifier

    # Repositories
    transaction_repo: TransactionRepository
    account_repo: AccountRepository
    category_repo: CategoryRepository
    budget_repo: BudgetRepository


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine, session_factory, notifier = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        notifier=notifier,
        transaction_repo=SQLModelTransactionRepository(session_factory),
        account_repo=SQLModelAccountRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        budget_repo=SQLModelBudgetRepository(session_factory),
    )
