"""Destructive owner-level maintenance: wiping every record a user owns."""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel import select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Account, Budget, BudgetItem, Category, Transaction, User

logger = get_logger("data_admin")

# Children before parents so foreign keys hold at every flush.
PURGE_ORDER = (BudgetItem, Budget, Transaction, Category, Account)


@dataclass(frozen=True)
class PurgeSummary:
    budget_items: int
    budgets: int
    transactions: int
    categories: int
    accounts: int
    user_deleted: bool


def purge_owner_data(session_factory: SessionFactory, *, user_id: int, delete_user: bool = True) -> PurgeSummary:
    """Delete all of an owner's data in one unit of work.

    Rows are deleted one by one through the ORM so each table's change event
    fires. When ``delete_user`` is set the user record goes as well.
    """

    counts: dict[type, int] = {}
    with session_factory() as session:
        for model in PURGE_ORDER:
            rows = session.exec(select(model).where(model.user_id == user_id)).all()  # type: ignore[attr-defined]
            for row in rows:
                session.delete(row)
            counts[model] = len(rows)
            session.flush()

        user_deleted = False
        if delete_user:
            user = session.get(User, user_id)
            if user is not None:
                session.delete(user)
                user_deleted = True
        session.commit()

    summary = PurgeSummary(
        budget_items=counts[BudgetItem],
        budgets=counts[Budget],
        transactions=counts[Transaction],
        categories=counts[Category],
        accounts=counts[Account],
        user_deleted=user_deleted,
    )
    logger.warning("Owner data purged", extra={"user_id": user_id, "summary": summary})
    return summary
