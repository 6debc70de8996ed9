"""Live view stream: a recomputed snapshot is pushed after every relevant commit."""

from __future__ import annotations

import json
import queue
from typing import Any, Callable

from flask import Response, request, stream_with_context

from ...context import AppContext
from ...errors import ValidationError
from ...extensions import get_context
from ...logging_config import get_logger
from ...security import current_owner_id
from ...serializers import budgets_overview_to_dict, dashboard_to_dict, page_to_dict
from ...services.dashboard import VIEW_TABLES, load_budgets, load_dashboard, load_transactions
from ...services.ledger_service import LedgerFilters
from ...services.view_state import LiveView
from . import bp

logger = get_logger("blueprints.events")


def snapshot_loader(ctx: AppContext, view: str, owner_id: int) -> Callable[[], dict[str, Any]]:
    """Return a zero-argument loader producing the JSON snapshot for ``view``."""

    if view == "dashboard":
        return lambda: dashboard_to_dict(load_dashboard(ctx, user_id=owner_id))
    if view == "budgets":
        return lambda: budgets_overview_to_dict(load_budgets(ctx, user_id=owner_id))
    if view == "transactions":
        return lambda: page_to_dict(load_transactions(ctx, LedgerFilters(user_id=owner_id)))
    raise ValidationError(f"view must be one of {', '.join(VIEW_TABLES)}.", field="view")


def format_event(view: str, payload: dict[str, Any]) -> str:
    return f"event: {view}\ndata: {json.dumps(payload)}\n\n"


@bp.get("/stream")
def stream():
    owner_id = current_owner_id()
    view = (request.args.get("view") or "dashboard").lower()
    ctx = get_context()
    loader = snapshot_loader(ctx, view, owner_id)
    updates: queue.Queue = queue.Queue()
    live = LiveView(
        ctx.notifier,
        owner_id=owner_id,
        tables=VIEW_TABLES[view],
        loader=loader,
        on_update=updates.put,
    )
    keepalive = ctx.config.SSE_KEEPALIVE_SECONDS

    def generate():
        live.start()
        logger.info("Live view opened", extra={"user_id": owner_id, "view": view})
        try:
            while True:
                try:
                    payload = updates.get(timeout=keepalive)
                except queue.Empty:
                    yield ": keepalive\n\n"
                    continue
                yield format_event(view, payload)
        finally:
            live.close()
            logger.info("Live view closed", extra={"user_id": owner_id, "view": view})

    return Response(
        stream_with_context(generate()),
        mimetype="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
