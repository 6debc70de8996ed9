"""Exception types shared by services, repositories and routes."""

from __future__ import annotations

from typing import Mapping


class ValidationError(ValueError):
    """Input rejected before any write; carries per-field messages."""

    def __init__(self, errors: Mapping[str, list[str]] | str, *, field: str = "__all__"):
        if isinstance(errors, str):
            errors = {field: [errors]}
        self.errors: dict[str, list[str]] = {key: list(msgs) for key, msgs in errors.items()}
        first = next(iter(self.errors.values()), ["invalid input"])
        super().__init__(first[0] if first else "invalid input")


class RecordNotFoundError(LookupError):
    """A record does not exist or belongs to another owner."""

    def __init__(self, kind: str, record_id: object):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} was not found")


class ProtectedRecordError(RuntimeError):
    """The record exists but may not be modified or removed."""
