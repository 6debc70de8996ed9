"""Dashboard routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import get_context
from ...security import current_owner_id
from ...serializers import dashboard_to_dict
from ...services.dashboard import load_dashboard
from . import bp


@bp.get("/")
def overview():
    owner_id = current_owner_id()
    return jsonify(dashboard_to_dict(load_dashboard(get_context(), user_id=owner_id)))
