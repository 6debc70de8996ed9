"""Ownership helpers shared by the SQLModel repositories."""

from __future__ import annotations

from typing import Optional, TypeVar

from sqlmodel import Session, SQLModel, select

from ...errors import RecordNotFoundError

ModelT = TypeVar("ModelT", bound=SQLModel)


def fetch_owned(session: Session, model: type[ModelT], record_id: int, user_id: int) -> Optional[ModelT]:
    """Return the row when it exists and belongs to ``user_id``."""

    return session.exec(
        select(model).where(model.id == record_id).where(model.user_id == user_id)  # type: ignore[attr-defined]
    ).first()


def require_owned(
    session: Session, model: type[ModelT], record_id: Optional[int], user_id: int, *, kind: str
) -> ModelT:
    """Like :func:`fetch_owned` but raise when the row is missing or foreign."""

    if record_id is None:
        raise RecordNotFoundError(kind, record_id)
    obj = fetch_owned(session, model, record_id, user_id)
    if obj is None:
        raise RecordNotFoundError(kind, record_id)
    return obj
