"""
LawerApp modules.

- backend/: REST API for the Mini App, database, configuration, tasks
- cli/: Management commands (Typer + Rich)
- telegram/: Telegram bot (aiogram v3)
"""
