"""Auth routes."""

from __future__ import annotations

from flask import jsonify

from ...errors import ValidationError
from ...extensions import get_context
from ...logging_config import get_logger
from ...security import current_owner_id, login_owner, logout_owner
from ...serializers import user_to_dict
from ...services import auth as auth_service
from ...services.seed import ensure_default_categories
from ..forms import request_data
from . import bp
from .forms import LoginForm, ProfileForm, RegisterForm

logger = get_logger("blueprints.auth")


@bp.post("/register")
def register():
    form = RegisterForm.from_mapping(request_data())
    form.validate_or_raise()
    ctx = get_context()
    user = auth_service.create_user(
        username=form.username or "",
        password=form.password,
        full_name=form.full_name,
        currency=form.currency,
        session_factory=ctx.session_factory,
    )
    ensure_default_categories(ctx.session_factory, user_id=user.id)
    login_owner(user.id)
    return jsonify(user_to_dict(user)), 201


@bp.post("/login")
def login():
    form = LoginForm.from_mapping(request_data())
    form.validate_or_raise()
    user = auth_service.authenticate(
        username=form.username, password=form.password, session_factory=get_context().session_factory
    )
    if user is None:
        raise ValidationError("Invalid username or password.")
    login_owner(user.id)
    logger.info("User signed in", extra={"user_id": user.id})
    return jsonify(user_to_dict(user))


@bp.post("/logout")
def logout():
    logout_owner()
    return jsonify({"status": "ok"})


@bp.get("/me")
def me():
    user = auth_service.get_user(current_owner_id(), get_context().session_factory)
    if user is None:
        logout_owner()
        return jsonify({"error": "Not signed in"}), 401
    return jsonify(user_to_dict(user))


@bp.put("/me")
def update_me():
    owner_id = current_owner_id()
    payload = request_data()
    form = ProfileForm.from_mapping(payload)
    form.validate_or_raise()
    user = auth_service.update_profile(
        owner_id,
        full_name=(form.full_name or "") if "full_name" in payload else None,
        currency=form.currency,
        session_factory=get_context().session_factory,
    )
    return jsonify(user_to_dict(user))
