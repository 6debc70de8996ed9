"""Configuration loading tests."""

from __future__ import annotations

import pytest

from alphawealth import config as app_config


def test_defaults(config, tmp_path):
    assert config.DATA_DIR == tmp_path.resolve()
    assert config.ANALYTICS_DEFAULT_MONTHS == 6
    assert config.RECENT_TRANSACTIONS == 8
    assert config.DASHBOARD_BUDGETS == 3
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_secret_required_outside_dev_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("ALPHAWEALTH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ALPHAWEALTH_DEV_MODE", "false")
    monkeypatch.delenv("ALPHAWEALTH_SECRET_KEY", raising=False)

    with pytest.raises(ValueError, match="SECRET_KEY"):
        app_config.BaseConfig()

    monkeypatch.setenv("ALPHAWEALTH_SECRET_KEY", "not-the-default")
    assert app_config.BaseConfig().DEV_MODE is False


def test_analytics_window_must_be_allowed(tmp_path, monkeypatch):
    monkeypatch.setenv("ALPHAWEALTH_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("ALPHAWEALTH_ANALYTICS_MONTHS", "5")

    with pytest.raises(ValueError):
        app_config.TestConfig()
