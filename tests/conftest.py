"""Pytest configuration and shared fixtures for AlphaWealth tests.

This module provides an isolated store per test (temporary SQLite file, session
factory and change notifier), owner fixtures, entity factories that write
through the repositories, and a Flask client with a signed-in owner.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import select

from alphawealth import create_app
from alphawealth.config import TestConfig
from alphawealth.infra.database import bootstrap_database
from alphawealth.infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
)
from alphawealth.models import Account, Budget, BudgetItem, Category, Transaction, User

# =============================================================================
# Configuration and store fixtures
# =============================================================================


@pytest.fixture(scope="function")
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> TestConfig:
    """Test configuration pointing every file at a per-test temp directory."""

    monkeypatch.setenv("ALPHAWEALTH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ALPHAWEALTH_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("ALPHAWEALTH_DEV_MODE", "true")
    monkeypatch.delenv("ALPHAWEALTH_ANALYTICS_MONTHS", raising=False)
    return TestConfig()


@pytest.fixture(scope="function")
def store(config):
    """Engine, session factory and notifier over a fresh database."""

    engine, session_factory, notifier = bootstrap_database(config)
    yield engine, session_factory, notifier
    engine.dispose()


@pytest.fixture(scope="function")
def db_engine(store):
    return store[0]


@pytest.fixture(scope="function")
def session_factory(store):
    """Factory yielding committed-on-exit sessions, as the repositories expect."""

    return store[1]


@pytest.fixture(scope="function")
def notifier(store):
    return store[2]


# =============================================================================
# Owners and repositories
# =============================================================================


def _make_user(session_factory, username: str) -> User:
    with session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing is None:
            existing = User(username=username, password_hash="dummy-hash")
            session.add(existing)
            session.commit()
            session.refresh(existing)
        session.expunge(existing)
        return existing


@pytest.fixture
def user(session_factory) -> User:
    """Default owner for scoping data."""

    return _make_user(session_factory, "tester")


@pytest.fixture
def other_user(session_factory) -> User:
    """A second owner, used to check isolation."""

    return _make_user(session_factory, "intruder")


@pytest.fixture
def account_repo(session_factory):
    return SQLModelAccountRepository(session_factory)


@pytest.fixture
def category_repo(session_factory):
    return SQLModelCategoryRepository(session_factory)


@pytest.fixture
def transaction_repo(session_factory):
    return SQLModelTransactionRepository(session_factory)


@pytest.fixture
def budget_repo(session_factory):
    return SQLModelBudgetRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def account_factory(account_repo, user):
    """Factory for creating test accounts."""

    def _create_account(
        name: str = "Test Account",
        balance: str | Decimal = "0.00",
        account_type: str = "checking",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        return account_repo.create(
            Account(name=name, balance=Decimal(str(balance)), account_type=account_type),
            user_id=owner.id,
        )

    return _create_account


@pytest.fixture
def category_factory(category_repo, user):
    """Factory for creating test categories."""

    def _create_category(
        name: str = "Test Category",
        category_type: str = "expense",
        color: str = "#ff5733",
        is_default: bool = False,
        owner: User | None = None,
    ) -> Category:
        owner = owner or user
        return category_repo.create(
            Category(name=name, category_type=category_type, color=color, is_default=is_default),
            user_id=owner.id,
        )

    return _create_category


@pytest.fixture
def transaction_factory(transaction_repo, user):
    """Factory for creating test transactions through the repository.

    Going through the repository keeps the account balance in step.
    """

    def _create_transaction(
        amount: str | Decimal,
        account_id: int,
        txn_type: str = "expense",
        category_id: int | None = None,
        occurred_on: date | None = None,
        description: str = "Test transaction",
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        return transaction_repo.create(
            Transaction(
                account_id=account_id,
                category_id=category_id,
                amount=Decimal(str(amount)),
                txn_type=txn_type,
                description=description,
                occurred_on=occurred_on or date.today(),
            ),
            user_id=owner.id,
        )

    return _create_transaction


@pytest.fixture
def budget_factory(budget_repo, user):
    """Factory for creating test budgets with optional items."""

    def _create_budget(
        start_date: date,
        end_date: date,
        amount: str | Decimal = "500.00",
        name: str = "Test Budget",
        items: list[tuple[int | None, str]] | None = None,
        owner: User | None = None,
        **fields,
    ) -> Budget:
        owner = owner or user
        budget = Budget(
            name=name,
            amount=Decimal(str(amount)),
            start_date=start_date,
            end_date=end_date,
            **fields,
        )
        budget.items = [
            BudgetItem(category_id=category_id, planned_amount=Decimal(planned))
            for category_id, planned in (items or [])
        ]
        return budget_repo.create(budget, user_id=owner.id)

    return _create_budget


# =============================================================================
# Flask fixtures
# =============================================================================


@pytest.fixture
def app(config):
    flask_app = create_app(config=config)
    flask_app.config.update(TESTING=True)
    yield flask_app
    flask_app.extensions["alphawealth"].engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def auth_client(client):
    """Client with a freshly registered, signed-in owner."""

    response = client.post(
        "/auth/register",
        json={"username": "owner", "password": "correct-horse", "full_name": "Owner"},
    )
    assert response.status_code == 201, response.get_json()
    return client
