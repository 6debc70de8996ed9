"""Shared parsing for the request forms of every blueprint."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar, Iterable, Optional

from ..errors import ValidationError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("999999999999.99")


@dataclass(slots=True)
class BaseForm:
    """Binds a request mapping and accumulates per-field errors."""

    KEYS: ClassVar[tuple[str, ...]] = ()

    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        self.raw_data = {}
        for key in self.KEYS:
            value = data.get(key)
            if value is None:
                value_str = ""
            elif isinstance(value, bool):
                value_str = "true" if value else "false"
            elif isinstance(value, str):
                value_str = value
            else:
                value_str = str(value)
            self.raw_data[key] = value_str.strip()

    def validate_or_raise(self) -> None:
        if not self.validate():
            raise ValidationError(self.errors)

    def validate(self) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)

    def _text(self, key: str, label: str, *, required: bool = True, max_length: int = 255) -> Optional[str]:
        raw = self.raw_data.get(key, "")
        if not raw:
            if required:
                self._add_error(key, f"{label} is required.")
            return None
        if len(raw) > max_length:
            self._add_error(key, f"{label} must be {max_length} characters or fewer.")
            return None
        return raw

    def _date(self, key: str, label: str, *, required: bool = True) -> Optional[date]:
        raw = self.raw_data.get(key, "")
        if not raw:
            if required:
                self._add_error(key, f"{label} is required.")
            return None
        try:
            if len(raw) == 10:
                return datetime.strptime(raw, "%Y-%m-%d").date()
            return datetime.fromisoformat(raw).date()
        except ValueError:
            self._add_error(key, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _money(
        self, key: str, label: str, *, required: bool = True, positive: bool = True, allow_zero: bool = False
    ) -> Optional[Decimal]:
        raw = self.raw_data.get(key, "")
        if not raw:
            if required:
                self._add_error(key, f"{label} is required.")
            return None
        try:
            value = Decimal(raw)
        except InvalidOperation:
            self._add_error(key, f"Enter a valid number for the {label.lower()}.")
            return None
        if not value.is_finite():
            self._add_error(key, f"Enter a valid number for the {label.lower()}.")
            return None
        if abs(value) > MAX_AMOUNT:
            self._add_error(key, f"{label} is too large.")
            return None
        # Stored with two decimal places; "0.001" is zero once it is stored.
        value = value.quantize(_CENT)
        if positive and (value < 0 or (value == 0 and not allow_zero)):
            self._add_error(key, f"{label} must be greater than zero.")
            return None
        return value

    def _choice(self, key: str, label: str, choices: Iterable[str], *, default: Optional[str] = None) -> Optional[str]:
        options = tuple(choices)
        raw = self.raw_data.get(key, "").lower() or (default or "")
        if not raw:
            self._add_error(key, f"{label} is required.")
            return None
        if raw not in options:
            self._add_error(key, f"{label} must be one of: {', '.join(options)}.")
            return None
        return raw

    def _optional_id(self, key: str, label: str) -> Optional[int]:
        raw = self.raw_data.get(key, "")
        if not raw or raw.lower() in {"none", "null"}:
            return None
        try:
            parsed = int(raw)
        except (TypeError, ValueError):
            self._add_error(key, f"{label} must be a whole number.")
            return None
        if parsed <= 0:
            self._add_error(key, f"{label} must be greater than zero if provided.")
            return None
        return parsed

    def _required_id(self, key: str, label: str) -> Optional[int]:
        if not self.raw_data.get(key):
            self._add_error(key, f"{label} is required.")
            return None
        return self._optional_id(key, label)

    def _color(self, key: str, default: str) -> str:
        raw = self.raw_data.get(key, "")
        if not raw:
            return default
        if not _HEX_COLOR.match(raw):
            self._add_error(key, "Colour must be a hex value like #3b82f6.")
            return default
        return raw.lower()

    def _flag(self, key: str) -> bool:
        return self.raw_data.get(key, "").lower() in {"1", "true", "yes", "on"}


def query_int(args: Mapping[str, Any], key: str, default: int, *, minimum: int = 1) -> int:
    """Parse an integer query argument, raising a field error when malformed."""

    raw = args.get(key)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{key} must be a whole number.", field=key) from exc
    if value < minimum:
        raise ValidationError(f"{key} must be at least {minimum}.", field=key)
    return value


def query_date(args: Mapping[str, Any], key: str) -> Optional[date]:
    raw = (args.get(key) or "").strip()
    if not raw:
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError("Enter a valid date (YYYY-MM-DD).", field=key) from exc


def request_data() -> Mapping[str, Any]:
    """JSON body when present, otherwise submitted form fields."""

    from flask import request

    payload = request.get_json(silent=True)
    if isinstance(payload, Mapping):
        return payload
    return request.form
