"""Session-based owner resolution for request handlers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import abort, session

SESSION_KEY = "owner_id"

F = TypeVar("F", bound=Callable)


def login_owner(owner_id: int) -> None:
    session.clear()
    session[SESSION_KEY] = owner_id
    session.permanent = True


def logout_owner() -> None:
    session.clear()


def optional_owner_id() -> Optional[int]:
    value = session.get(SESSION_KEY)
    return int(value) if value is not None else None


def current_owner_id() -> int:
    """Return the signed-in owner's id or abort with 401."""

    owner_id = optional_owner_id()
    if owner_id is None:
        abort(401)
    return owner_id


def login_required(view: F) -> F:
    @wraps(view)
    def wrapped(*args, **kwargs):
        current_owner_id()
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]
