"""Authentication and user management services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlmodel import select

from ..errors import ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger("auth")

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 8


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_username(username: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by username."""
    username = username.strip()
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user:
            session.expunge(user)
        return user


def create_user(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
    full_name: Optional[str] = None,
    currency: str = "USD",
) -> User:
    """Create a new user with hashed password."""

    username = (username or "").strip()
    errors: dict[str, list[str]] = {}
    if not username:
        errors["username"] = ["Username is required."]
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors["password"] = [f"Password must be at least {MIN_PASSWORD_LENGTH} characters."]
    if errors:
        raise ValidationError(errors)

    password_hash = _hasher.hash(password)
    with session_factory() as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            raise ValidationError("Username already exists", field="username")
        user = User(
            username=username,
            password_hash=password_hash,
            full_name=(full_name or "").strip() or None,
            currency=(currency or "USD").upper()[:3],
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
    logger.info("User created", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    username: str,
    password: str,
    session_factory: SessionFactory,
) -> Optional[User]:
    """Validate credentials and return the user when correct."""

    username = (username or "").strip()
    if not username:
        return None
    with session_factory() as session:
        user = session.exec(select(User).where(User.username == username)).first()
        if user is None:
            return None
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Rejected login", extra={"username": username})
            return None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user


def update_profile(
    user_id: int,
    *,
    session_factory: SessionFactory,
    full_name: Optional[str] = None,
    currency: Optional[str] = None,
) -> User:
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValidationError("Unknown user", field="user")
        if full_name is not None:
            user.full_name = full_name.strip() or None
        if currency:
            user.currency = currency.upper()[:3]
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user
