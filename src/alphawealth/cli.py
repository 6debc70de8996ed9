"""Flask CLI commands for AlphaWealth."""

from __future__ import annotations

from pathlib import Path

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    def _resolve_user_id(username: str) -> int:
        from .extensions import get_context
        from .services.auth import get_user_by_username

        user = get_user_by_username(username, get_context().session_factory)
        if user is None:
            raise click.ClickException(f"No user named {username!r}")
        return user.id

    @app.cli.command("alphawealth-create-user")
    @click.argument("username")
    @click.password_option()
    @click.option("--full-name", default=None, help="Display name")
    @click.option("--currency", default=None, help="Display currency code")
    def create_user_command(username: str, password: str, full_name: str | None, currency: str | None) -> None:
        """Create a user and their default categories."""

        from .errors import ValidationError
        from .extensions import get_context
        from .services.auth import create_user
        from .services.seed import ensure_default_categories

        ctx = get_context()
        try:
            user = create_user(
                username=username,
                password=password,
                full_name=full_name,
                currency=currency or ctx.config.DEFAULT_CURRENCY,
                session_factory=ctx.session_factory,
            )
        except ValidationError as exc:
            raise click.ClickException(str(exc)) from exc
        ensure_default_categories(ctx.session_factory, user_id=user.id)
        click.echo(f"Created user {user.username} (id={user.id})")

    @app.cli.command("alphawealth-seed")
    @click.argument("username")
    @click.option("--demo", is_flag=True, default=False, help="Also seed demo accounts and transactions")
    @click.option("--force", is_flag=True, default=False, help="Seed even when transactions exist")
    def seed_command(username: str, demo: bool, force: bool) -> None:
        """Seed default categories (and optionally demo data) for USERNAME."""

        from .extensions import get_context
        from .services.seed import ensure_default_categories, run_demo_seed

        ctx = get_context()
        user_id = _resolve_user_id(username)
        if demo:
            summary = run_demo_seed(ctx.session_factory, user_id=user_id, force=force)
            click.echo(
                f"Seeded: {summary.accounts} accounts, {summary.categories} categories, "
                f"{summary.transactions} transactions, {summary.budgets} budgets"
            )
        else:
            categories = ensure_default_categories(ctx.session_factory, user_id=user_id)
            click.echo(f"{len(categories)} categories available")

    @app.cli.command("alphawealth-export")
    @click.argument("username")
    @click.option("--format", "fmt", type=click.Choice(["csv", "json"]), default="csv")
    @click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
    def export_command(username: str, fmt: str, output: Path | None) -> None:
        """Export USERNAME's ledger as CSV or JSON."""

        from .errors import ValidationError
        from .extensions import get_context
        from .services.export_csv import export_transactions

        ctx = get_context()
        user_id = _resolve_user_id(username)
        target = output or Path(ctx.config.DATA_DIR) / "exports" / f"alphawealth-export.{fmt}"
        try:
            path = export_transactions(
                transactions=ctx.transaction_repo.list_all(user_id=user_id),
                output_path=target,
                fmt=fmt,
            )
        except ValidationError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Export written: {path}")
