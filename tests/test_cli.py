"""Flask CLI command tests."""

from __future__ import annotations

import json


def test_create_user_seed_and_export(app, tmp_path):
    runner = app.test_cli_runner()

    created = runner.invoke(args=["alphawealth-create-user", "cli-user"], input="cli-password\ncli-password\n")
    assert created.exit_code == 0, created.output
    assert "Created user cli-user" in created.output

    empty = runner.invoke(args=["alphawealth-export", "cli-user", "--output", str(tmp_path / "none.csv")])
    assert empty.exit_code != 0
    assert "No data to export" in empty.output

    seeded = runner.invoke(args=["alphawealth-seed", "cli-user", "--demo"])
    assert seeded.exit_code == 0, seeded.output
    assert "2 accounts" in seeded.output

    target = tmp_path / "export.json"
    exported = runner.invoke(args=["alphawealth-export", "cli-user", "--format", "json", "--output", str(target)])
    assert exported.exit_code == 0, exported.output
    assert json.loads(target.read_text(encoding="utf-8"))


def test_unknown_user(app):
    result = app.test_cli_runner().invoke(args=["alphawealth-seed", "ghost"])

    assert result.exit_code != 0
    assert "No user named" in result.output
