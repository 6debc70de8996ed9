"""Analytics blueprint package: reports, calendar and charts."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("analytics", __name__, url_prefix="/analytics")

from . import routes  # noqa: E402,F401 - ensure routes get registered

__all__ = ["bp"]
