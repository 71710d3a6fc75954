"""
Management CLI Module.

Typer command groups for ``manage.py``: Telegram webhook registration,
database checks and seeding, and local development setup.

Usage:
    python manage.py --help
    python manage.py db check
"""
