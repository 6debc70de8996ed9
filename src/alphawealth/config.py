"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "AlphaWealth"
    DB_FILENAME = "alphawealth.db"
    DEBUG = False
    TESTING = False
    ANALYTICS_WINDOWS = (3, 6, 12)

    def __init__(self) -> None:
        self.SECRET_KEY = os.getenv("ALPHAWEALTH_SECRET_KEY", "replace-me")
        self.DEV_MODE = _env_bool("ALPHAWEALTH_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("ALPHAWEALTH_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_CURRENCY = os.getenv("ALPHAWEALTH_DEFAULT_CURRENCY", "USD")
        self.ANALYTICS_DEFAULT_MONTHS = _env_int("ALPHAWEALTH_ANALYTICS_MONTHS", 6)
        self.RECENT_TRANSACTIONS = _env_int("ALPHAWEALTH_RECENT_TRANSACTIONS", 8)
        self.DASHBOARD_BUDGETS = _env_int("ALPHAWEALTH_DASHBOARD_BUDGETS", 3)
        self.SSE_KEEPALIVE_SECONDS = _env_int("ALPHAWEALTH_SSE_KEEPALIVE", 15)
        if not self.DEV_MODE and self.SECRET_KEY == "replace-me":
            raise ValueError("ALPHAWEALTH_SECRET_KEY must be set in non-dev mode.")
        if self.ANALYTICS_DEFAULT_MONTHS not in self.ANALYTICS_WINDOWS:
            raise ValueError(
                f"ALPHAWEALTH_ANALYTICS_MONTHS must be one of {self.ANALYTICS_WINDOWS}"
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the database and logs live."""

        data_root = os.getenv("ALPHAWEALTH_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True


class TestConfig(BaseConfig):
    """Configuration used by the test-suite; callers point DATA_DIR at a temp dir."""

    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
