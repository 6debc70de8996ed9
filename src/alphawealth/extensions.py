"""Store and change-feed wiring for the Flask app."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .context import AppContext, create_app_context

EXTENSION_KEY = "alphawealth"


def init_store(app: Flask, config: BaseConfig) -> AppContext:
    """Create the engine, repositories and notifier and attach them to ``app``."""

    ctx = create_app_context(config)
    app.extensions[EXTENSION_KEY] = ctx
    return ctx


def get_context() -> AppContext:
    """Return the :class:`AppContext` of the running app."""

    try:
        return current_app.extensions[EXTENSION_KEY]
    except KeyError as exc:  # pragma: no cover - misconfigured app
        raise RuntimeError("Store not initialized; call init_store first") from exc
