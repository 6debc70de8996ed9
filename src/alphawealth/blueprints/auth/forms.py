"""Registration and login form validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from ...services.auth import MIN_PASSWORD_LENGTH
from ..forms import BaseForm


@dataclass(slots=True)
class RegisterForm(BaseForm):
    KEYS: ClassVar[tuple[str, ...]] = ("username", "password", "full_name", "currency")

    username: Optional[str] = None
    password: str = ""
    full_name: Optional[str] = None
    currency: str = "USD"

    def validate(self) -> bool:
        self.errors.clear()
        self.username = self._text("username", "Username", max_length=64)
        self.password = self.raw_data.get("password", "")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            self._add_error("password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        self.full_name = self._text("full_name", "Full name", required=False, max_length=128)
        currency = self.raw_data.get("currency", "").upper() or "USD"
        if len(currency) != 3 or not currency.isalpha():
            self._add_error("currency", "Currency must be a three-letter code.")
        self.currency = currency
        return not self.errors


@dataclass(slots=True)
class LoginForm(BaseForm):
    KEYS: ClassVar[tuple[str, ...]] = ("username", "password")

    username: str = ""
    password: str = ""

    def validate(self) -> bool:
        self.errors.clear()
        self.username = self._text("username", "Username", max_length=64) or ""
        self.password = self.raw_data.get("password", "")
        if not self.password:
            self._add_error("password", "Password is required.")
        return not self.errors


@dataclass(slots=True)
class ProfileForm(BaseForm):
    KEYS: ClassVar[tuple[str, ...]] = ("full_name", "currency")

    full_name: Optional[str] = None
    currency: Optional[str] = None

    def validate(self) -> bool:
        self.errors.clear()
        self.full_name = self._text("full_name", "Full name", required=False, max_length=128)
        currency = self.raw_data.get("currency", "").upper()
        if currency and (len(currency) != 3 or not currency.isalpha()):
            self._add_error("currency", "Currency must be a three-letter code.")
        self.currency = currency or None
        return not self.errors
