"""CSV and JSON export of an owner's ledger."""

from __future__ import annotations

import csv
import io
import json
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ..errors import ValidationError
from ..models.transaction import Transaction

CSV_HEADERS = ["Date", "Description", "Amount", "Type", "Category", "Account"]
EXPORT_FORMATS = ("csv", "json")


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _require_rows(transactions: Iterable[Transaction]) -> list[Transaction]:
    rows = list(transactions)
    if not rows:
        raise ValidationError("No data to export")
    return rows


def transaction_record(tx: Transaction) -> dict:
    """Flatten a transaction with its account and category names embedded."""

    return {
        "id": tx.id,
        "date": _serialize_value(tx.occurred_on),
        "description": tx.description or "",
        "amount": _serialize_value(tx.amount),
        "type": tx.txn_type,
        "account_id": tx.account_id,
        "category_id": tx.category_id,
        "account": {"name": tx.account.name} if tx.account else None,
        "category": {"name": tx.category.name} if tx.category else None,
        "created_at": _serialize_value(tx.created_at),
    }


def render_transactions_csv(transactions: Iterable[Transaction]) -> str:
    """Return the ledger as CSV text: Date, Description, Amount, Type, Category, Account."""

    rows = _require_rows(transactions)
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for tx in rows:
        writer.writerow(
            [
                _serialize_value(tx.occurred_on),
                tx.description or "",
                _serialize_value(tx.amount),
                tx.txn_type,
                tx.category.name if tx.category else "",
                tx.account.name if tx.account else "",
            ]
        )
    return buffer.getvalue()


def render_transactions_json(transactions: Iterable[Transaction]) -> str:
    rows = _require_rows(transactions)
    return json.dumps([transaction_record(tx) for tx in rows], indent=2, default=_json_default)


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    return _serialize_value(value)


def render_export(transactions: Iterable[Transaction], fmt: str) -> tuple[str, str, str]:
    """Return (content, mimetype, filename) for the requested format."""

    fmt = (fmt or "csv").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValidationError(f"Format must be one of {', '.join(EXPORT_FORMATS)}.", field="format")
    if fmt == "json":
        return render_transactions_json(transactions), "application/json", "alphawealth-export.json"
    return render_transactions_csv(transactions), "text/csv", "alphawealth-export.csv"


def export_transactions(*, transactions: Iterable[Transaction], output_path: Path, fmt: str = "csv") -> Path:
    """Write the export to ``output_path`` and return the path written."""

    content, _, _ = render_export(transactions, fmt)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        fh.write(content)
    return output_path
