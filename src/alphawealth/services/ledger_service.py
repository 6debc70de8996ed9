"""Ledger-specific helpers for filtering, pagination and persistence."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..domain.repositories.transaction import TransactionRepository
from ..errors import ValidationError
from ..models.enums import TransactionType, enum_values
from ..models.transaction import Transaction

TYPE_FILTERS = ("all", *enum_values(TransactionType))


@dataclass
class LedgerFilters:
    """Filters applied to ledger listings."""

    user_id: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    text: Optional[str] = None
    txn_type: str = "all"  # income | expense | transfer | all

    def __post_init__(self) -> None:
        if self.txn_type not in TYPE_FILTERS:
            raise ValidationError(
                f"Type must be one of {', '.join(TYPE_FILTERS)}.", field="type"
            )
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValidationError("Start date must be on or before end date.", field="start_date")


@dataclass
class Pagination:
    """Simple pagination parameters."""

    page: int = 1
    per_page: int = 25


@dataclass
class Page:
    items: list[Transaction]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.per_page))


def normalize_id_value(raw_value: Optional[str]) -> Optional[int]:
    """Return a nullable id, treating falsy/'all' as None."""

    if not raw_value:
        return None
    lowered = raw_value.strip().lower()
    if lowered in {"all", "none", "any"}:
        return None
    try:
        return int(raw_value)
    except (TypeError, ValueError):
        return None


def filtered_transactions(repo: TransactionRepository, filters: LedgerFilters) -> list[Transaction]:
    """Fetch transactions matching ``filters``, newest first."""

    return repo.search(
        user_id=filters.user_id,
        start_date=filters.start_date,
        end_date=filters.end_date,
        account_id=filters.account_id,
        category_id=filters.category_id,
        txn_type=None if filters.txn_type == "all" else filters.txn_type,
        text=filters.text or None,
    )


def paginate_transactions(txs: list[Transaction], pagination: Pagination) -> Page:
    """Return the requested page of ``txs``."""

    page = max(1, pagination.page)
    per_page = max(1, min(pagination.per_page, 200))
    start = (page - 1) * per_page
    return Page(items=txs[start : start + per_page], total=len(txs), page=page, per_page=per_page)


def save_transaction(
    repo: TransactionRepository,
    *,
    existing: Transaction | None,
    account_id: int,
    category_id: Optional[int],
    amount: Decimal,
    txn_type: str,
    description: Optional[str],
    occurred_on: date,
    user_id: int,
) -> Transaction:
    """Centralize transaction creation/update."""

    txn = Transaction(
        id=existing.id if existing else None,
        user_id=user_id,
        account_id=account_id,
        category_id=category_id,
        amount=amount,
        txn_type=txn_type,
        description=description or None,
        occurred_on=occurred_on,
    )
    return repo.update(txn, user_id=user_id) if existing else repo.create(txn, user_id=user_id)
