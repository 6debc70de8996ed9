"""Ledger routes."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import RecordNotFoundError
from ...extensions import get_context
from ...logging_config import get_logger
from ...security import current_owner_id
from ...serializers import page_to_dict, transaction_to_dict
from ...services.dashboard import load_transactions
from ...services.ledger_service import (
    LedgerFilters,
    Pagination,
    normalize_id_value,
    save_transaction,
)
from ..forms import query_date, query_int, request_data
from . import bp
from .forms import TransactionForm

logger = get_logger("blueprints.ledger")


def filters_from_args(owner_id: int, args) -> LedgerFilters:
    """Build listing filters from query-string arguments."""

    return LedgerFilters(
        user_id=owner_id,
        start_date=query_date(args, "start_date"),
        end_date=query_date(args, "end_date"),
        category_id=normalize_id_value(args.get("category_id")),
        account_id=normalize_id_value(args.get("account_id")),
        text=(args.get("q") or "").strip() or None,
        txn_type=(args.get("type") or "all").lower(),
    )


@bp.get("/")
def list_transactions():
    owner_id = current_owner_id()
    filters = filters_from_args(owner_id, request.args)
    pagination = Pagination(
        page=query_int(request.args, "page", 1),
        per_page=query_int(request.args, "per_page", 25),
    )
    page = load_transactions(get_context(), filters, pagination)
    return jsonify(page_to_dict(page))


@bp.post("/")
def create_transaction():
    owner_id = current_owner_id()
    form = TransactionForm.from_mapping(request_data())
    form.validate_or_raise()
    txn = save_transaction(
        get_context().transaction_repo,
        existing=None,
        account_id=form.account_id,
        category_id=form.category_id,
        amount=form.amount,
        txn_type=form.txn_type,
        description=form.description,
        occurred_on=form.occurred_on,
        user_id=owner_id,
    )
    logger.info("Transaction created", extra={"user_id": owner_id, "transaction_id": txn.id})
    return jsonify(transaction_to_dict(txn)), 201


@bp.get("/<int:transaction_id>")
def get_transaction(transaction_id: int):
    owner_id = current_owner_id()
    txn = get_context().transaction_repo.get_by_id(transaction_id, user_id=owner_id)
    if txn is None:
        raise RecordNotFoundError("Transaction", transaction_id)
    return jsonify(transaction_to_dict(txn))


@bp.put("/<int:transaction_id>")
def update_transaction(transaction_id: int):
    owner_id = current_owner_id()
    repo = get_context().transaction_repo
    existing = repo.get_by_id(transaction_id, user_id=owner_id)
    if existing is None:
        raise RecordNotFoundError("Transaction", transaction_id)
    form = TransactionForm.from_mapping(request_data())
    form.validate_or_raise()
    txn = save_transaction(
        repo,
        existing=existing,
        account_id=form.account_id,
        category_id=form.category_id,
        amount=form.amount,
        txn_type=form.txn_type,
        description=form.description,
        occurred_on=form.occurred_on,
        user_id=owner_id,
    )
    logger.info("Transaction updated", extra={"user_id": owner_id, "transaction_id": txn.id})
    return jsonify(transaction_to_dict(txn))


@bp.delete("/<int:transaction_id>")
def delete_transaction(transaction_id: int):
    owner_id = current_owner_id()
    get_context().transaction_repo.delete(transaction_id, user_id=owner_id)
    logger.info("Transaction deleted", extra={"user_id": owner_id, "transaction_id": transaction_id})
    return jsonify({"deleted": transaction_id})
