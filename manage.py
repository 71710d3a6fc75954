#!/usr/bin/env python3
"""
Management scripts.

Usage:
    python manage.py telegram setup-webhook
    python manage.py telegram webhook-info
    python manage.py telegram delete-webhook
    python manage.py db check
    python manage.py db init
    python manage.py db seed-tax-rates
    python manage.py db upgrade
    python manage.py db current
    python manage.py setup local-dev
"""

from pathlib import Path

import typer
from rich.console import Console

project_root = Path(__file__).resolve().parent

from modules.cli.commands import db_app, setup_app, telegram_app

app = typer.Typer(
    name="manage",
    help="LawerApp management: Telegram webhook, database and local setup.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(telegram_app, name="telegram")
app.add_typer(db_app, name="db")
app.add_typer(setup_app, name="setup")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable INFO level logging"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable DEBUG level logging"),
) -> None:
    """LawerApp management scripts."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)

    from modules.backend.core.logging import setup_logging

    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")


if __name__ == "__main__":
    app()
