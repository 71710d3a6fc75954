"""
Management Commands.

Typer groups registered by manage.py.
"""

from modules.cli.commands.db import app as db_app
from modules.cli.commands.setup import app as setup_app
from modules.cli.commands.telegram import app as telegram_app

__all__ = [
    "db_app",
    "setup_app",
    "telegram_app",
]
