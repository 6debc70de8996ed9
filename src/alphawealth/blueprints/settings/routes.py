"""Settings routes: accounts, categories, export and purge."""

from __future__ import annotations

from flask import Response, jsonify, request

from ...errors import RecordNotFoundError, ValidationError
from ...extensions import get_context
from ...logging_config import get_logger
from ...models import Account, Category
from ...security import current_owner_id, logout_owner
from ...serializers import account_to_dict, category_to_dict
from ...services.data_admin import purge_owner_data
from ...services.export_csv import render_export
from ..forms import request_data
from . import bp
from .forms import AccountForm, CategoryForm

logger = get_logger("blueprints.settings")


@bp.get("/accounts")
def list_accounts():
    owner_id = current_owner_id()
    accounts = get_context().account_repo.list_all(user_id=owner_id)
    return jsonify([account_to_dict(acc) for acc in accounts])


@bp.post("/accounts")
def create_account():
    owner_id = current_owner_id()
    form = AccountForm.from_mapping(request_data())
    form.validate_or_raise()
    account = get_context().account_repo.create(
        Account(
            name=form.name,
            account_type=form.account_type,
            balance=form.balance,
            color=form.color,
            icon=form.icon,
        ),
        user_id=owner_id,
    )
    logger.info("Account created", extra={"user_id": owner_id, "account_id": account.id})
    return jsonify(account_to_dict(account)), 201


@bp.put("/accounts/<int:account_id>")
def update_account(account_id: int):
    owner_id = current_owner_id()
    repo = get_context().account_repo
    existing = repo.get_by_id(account_id, user_id=owner_id)
    if existing is None:
        raise RecordNotFoundError("Account", account_id)
    payload = request_data()
    form = AccountForm.from_mapping(payload)
    form.validate_or_raise()
    existing.name = form.name
    existing.account_type = form.account_type
    existing.color = form.color
    existing.icon = form.icon
    # Balance follows the ledger; only an explicit correction overrides it.
    if "balance" in payload:
        existing.balance = form.balance
    account = repo.update(existing, user_id=owner_id)
    return jsonify(account_to_dict(account))


@bp.delete("/accounts/<int:account_id>")
def delete_account(account_id: int):
    owner_id = current_owner_id()
    removed = get_context().account_repo.delete(account_id, user_id=owner_id)
    logger.info(
        "Account deleted",
        extra={"user_id": owner_id, "account_id": account_id, "transactions_removed": removed},
    )
    return jsonify({"deleted": account_id, "transactions_removed": removed})


@bp.get("/categories")
def list_categories():
    owner_id = current_owner_id()
    repo = get_context().category_repo
    kind = (request.args.get("type") or "").lower()
    if kind and kind != "all":
        if kind not in ("income", "expense"):
            raise ValidationError("Type must be income or expense.", field="type")
        categories = repo.list_by_type(kind, user_id=owner_id)
    else:
        categories = repo.list_all(user_id=owner_id)
    return jsonify([category_to_dict(cat) for cat in categories])


@bp.post("/categories")
def create_category():
    owner_id = current_owner_id()
    form = CategoryForm.from_mapping(request_data())
    form.validate_or_raise()
    repo = get_context().category_repo
    if repo.get_by_name(form.name or "", form.category_type or "", user_id=owner_id):
        raise ValidationError("A category with this name already exists.", field="name")
    category = repo.create(
        Category(name=form.name, category_type=form.category_type, color=form.color, icon=form.icon),
        user_id=owner_id,
    )
    return jsonify(category_to_dict(category)), 201


@bp.put("/categories/<int:category_id>")
def update_category(category_id: int):
    owner_id = current_owner_id()
    repo = get_context().category_repo
    existing = repo.get_by_id(category_id, user_id=owner_id)
    if existing is None:
        raise RecordNotFoundError("Category", category_id)
    # The type is fixed once created; fall back to it so the form validates.
    payload = dict(request_data())
    payload.setdefault("type", existing.category_type)
    form = CategoryForm.from_mapping(payload)
    form.validate_or_raise()
    existing.name = form.name
    existing.color = form.color
    existing.icon = form.icon
    category = repo.update(existing, user_id=owner_id)
    return jsonify(category_to_dict(category))


@bp.delete("/categories/<int:category_id>")
def delete_category(category_id: int):
    owner_id = current_owner_id()
    get_context().category_repo.delete(category_id, user_id=owner_id)
    return jsonify({"deleted": category_id})


@bp.get("/export")
def export_data():
    owner_id = current_owner_id()
    fmt = request.args.get("format", "csv")
    transactions = get_context().transaction_repo.list_all(user_id=owner_id)
    content, mimetype, filename = render_export(transactions, fmt)
    logger.info("Ledger exported", extra={"user_id": owner_id, "format": fmt, "rows": len(transactions)})
    return Response(
        content,
        mimetype=mimetype,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@bp.post("/purge")
def purge():
    owner_id = current_owner_id()
    summary = purge_owner_data(get_context().session_factory, user_id=owner_id)
    logout_owner()
    return jsonify(
        {
            "budget_items": summary.budget_items,
            "budgets": summary.budgets,
            "transactions": summary.transactions,
            "categories": summary.categories,
            "accounts": summary.accounts,
            "user_deleted": summary.user_deleted,
        }
    )
