"""Analytics routes."""

from __future__ import annotations

from datetime import MAXYEAR, MINYEAR, date, datetime

from flask import Response, jsonify, request

from ...errors import ValidationError
from ...extensions import get_context
from ...security import current_owner_id
from ...serializers import calendar_to_dict, report_to_dict, transaction_to_dict
from ...services import reports
from ...services.dashboard import load_analytics, load_calendar, load_day
from ..forms import query_int
from . import bp


def _months_arg() -> int:
    cfg = get_context().config
    months = query_int(request.args, "months", cfg.ANALYTICS_DEFAULT_MONTHS)
    if months not in cfg.ANALYTICS_WINDOWS:
        allowed = ", ".join(str(value) for value in cfg.ANALYTICS_WINDOWS)
        raise ValidationError(f"months must be one of {allowed}.", field="months")
    return months


def _png(fig) -> Response:
    return Response(reports.figure_to_png(fig), mimetype="image/png", headers={"Cache-Control": "no-store"})


@bp.get("/")
def report():
    owner_id = current_owner_id()
    result = load_analytics(get_context(), user_id=owner_id, months=_months_arg())
    return jsonify(report_to_dict(result))


@bp.get("/calendar")
def calendar_month():
    owner_id = current_owner_id()
    today = date.today()
    year = query_int(request.args, "year", today.year, minimum=MINYEAR + 1)
    month = query_int(request.args, "month", today.month)
    if month > 12:
        raise ValidationError("month must be between 1 and 12.", field="month")
    if year >= MAXYEAR:
        raise ValidationError(f"year must be between {MINYEAR + 1} and {MAXYEAR - 1}.", field="year")
    view = load_calendar(get_context(), user_id=owner_id, year=year, month=month, today=today)
    return jsonify(calendar_to_dict(view))


@bp.get("/calendar/<day>")
def calendar_day(day: str):
    owner_id = current_owner_id()
    try:
        selected = datetime.strptime(day, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError("Enter a valid date (YYYY-MM-DD).", field="day") from exc
    rows = load_day(get_context(), user_id=owner_id, day=selected)
    return jsonify(
        {
            "date": selected.isoformat(),
            "transactions": [transaction_to_dict(txn) for txn in rows],
        }
    )


@bp.get("/charts/spending.png")
def spending_chart():
    owner_id = current_owner_id()
    result = load_analytics(get_context(), user_id=owner_id, months=_months_arg())
    return _png(reports.build_spending_chart(result.spending))


@bp.get("/charts/trend.png")
def trend_chart():
    owner_id = current_owner_id()
    result = load_analytics(get_context(), user_id=owner_id, months=_months_arg())
    return _png(reports.build_trend_chart(result.series))
