"""AlphaWealth application factory."""

from __future__ import annotations

from datetime import timedelta
from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import ProtectedRecordError, RecordNotFoundError, ValidationError
from .extensions import init_store
from .logging_config import get_logger, setup_logging

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}

logger = get_logger("app")


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths in registration order."""

    yield "alphawealth.blueprints.auth"
    yield "alphawealth.blueprints.settings"
    yield "alphawealth.blueprints.ledger"
    yield "alphawealth.blueprints.budgets"
    yield "alphawealth.blueprints.analytics"
    yield "alphawealth.blueprints.dashboard"
    yield "alphawealth.blueprints.events"


def create_app(config_name: str | None = None, *, config: BaseConfig | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    config_obj = config or _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["ALPHAWEALTH_CONFIG"] = config_obj
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=14)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

    setup_logging(config_obj)
    init_store(app, config_obj)
    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)

    logger.info("Application created", extra={"config": type(config_obj).__name__})
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation(exc: ValidationError):
        return jsonify({"errors": exc.errors}), 400

    @app.errorhandler(RecordNotFoundError)
    def _not_found(exc: RecordNotFoundError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(ProtectedRecordError)
    def _protected(exc: ProtectedRecordError):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(SQLAlchemyError)
    def _store_failure(exc: SQLAlchemyError):
        logger.exception("Store write failed")
        return jsonify({"error": "The change could not be saved. Please try again."}), 500

    @app.errorhandler(HTTPException)
    def _http(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code or 500


__all__ = ["BaseConfig", "DevConfig", "TestConfig", "create_app"]
