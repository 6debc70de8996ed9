"""Budget routes."""

from __future__ import annotations

from datetime import date

from flask import jsonify

from ...errors import RecordNotFoundError
from ...extensions import get_context
from ...logging_config import get_logger
from ...models import Budget, BudgetItem
from ...security import current_owner_id
from ...serializers import budget_item_to_dict, budget_to_dict, budgets_overview_to_dict, progress_to_dict
from ...services.dashboard import budget_progress_for, load_budgets
from ..forms import request_data
from . import bp
from .forms import BudgetForm, BudgetItemForm

logger = get_logger("blueprints.budgets")


def _apply(form: BudgetForm, budget: Budget) -> Budget:
    budget.name = form.name
    budget.budget_type = form.budget_type
    budget.amount = form.amount
    budget.start_date = form.start_date
    budget.end_date = form.end_date
    budget.account_id = form.account_id
    budget.category_id = form.category_id
    budget.period = form.period
    budget.rollover = form.rollover
    return budget


def _detail(budget: Budget, owner_id: int) -> dict:
    ctx = get_context()
    categories = ctx.category_repo.list_all(user_id=owner_id)
    payload = budget_to_dict(budget)
    payload["progress"] = progress_to_dict(
        budget_progress_for(ctx, budget, categories, user_id=owner_id, today=date.today())
    )
    return payload


@bp.get("/")
def list_budgets():
    owner_id = current_owner_id()
    overview = load_budgets(get_context(), user_id=owner_id)
    return jsonify(budgets_overview_to_dict(overview))


@bp.post("/")
def create_budget():
    owner_id = current_owner_id()
    form = BudgetForm.from_mapping(request_data())
    form.validate_or_raise()
    budget = _apply(form, Budget())
    budget.items = [
        BudgetItem(category_id=item.category_id, planned_amount=item.planned_amount) for item in form.items
    ]
    created = get_context().budget_repo.create(budget, user_id=owner_id)
    logger.info("Budget created", extra={"user_id": owner_id, "budget_id": created.id})
    return jsonify(_detail(created, owner_id)), 201


@bp.get("/<int:budget_id>")
def get_budget(budget_id: int):
    owner_id = current_owner_id()
    budget = get_context().budget_repo.get_by_id(budget_id, user_id=owner_id)
    if budget is None:
        raise RecordNotFoundError("Budget", budget_id)
    return jsonify(_detail(budget, owner_id))


@bp.put("/<int:budget_id>")
def update_budget(budget_id: int):
    owner_id = current_owner_id()
    repo = get_context().budget_repo
    existing = repo.get_by_id(budget_id, user_id=owner_id)
    if existing is None:
        raise RecordNotFoundError("Budget", budget_id)
    form = BudgetForm.from_mapping(request_data())
    form.validate_or_raise()
    updated = repo.update(_apply(form, existing), user_id=owner_id)
    return jsonify(_detail(updated, owner_id))


@bp.delete("/<int:budget_id>")
def delete_budget(budget_id: int):
    owner_id = current_owner_id()
    get_context().budget_repo.delete(budget_id, user_id=owner_id)
    logger.info("Budget deleted", extra={"user_id": owner_id, "budget_id": budget_id})
    return jsonify({"deleted": budget_id})


@bp.post("/<int:budget_id>/items")
def add_item(budget_id: int):
    owner_id = current_owner_id()
    form = BudgetItemForm.from_mapping(request_data())
    form.validate_or_raise()
    item = get_context().budget_repo.add_item(
        BudgetItem(budget_id=budget_id, category_id=form.category_id, planned_amount=form.planned_amount),
        user_id=owner_id,
    )
    return jsonify(budget_item_to_dict(item)), 201


@bp.delete("/<int:budget_id>/items/<int:item_id>")
def delete_item(budget_id: int, item_id: int):
    owner_id = current_owner_id()
    repo = get_context().budget_repo
    budget = repo.get_by_id(budget_id, user_id=owner_id)
    if budget is None or all(item.id != item_id for item in budget.items):
        raise RecordNotFoundError("Budget item", item_id)
    repo.delete_item(item_id, user_id=owner_id)
    return jsonify({"deleted": item_id})
