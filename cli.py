#!/usr/bin/env python3
"""
LawerApp CLI.

Entry point for long-running services and one-shot operations.
Use --service to select what to run.

Usage:
    python cli.py --help
    python cli.py --service server --reload --verbose
    python cli.py --service worker --workers 2
    python cli.py --service scheduler
    python cli.py --service telegram-poll --verbose
    python cli.py --service migrate --migrate-action upgrade
    python cli.py --service config
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent

from modules.backend.core.logging import get_logger, setup_logging

SERVICES = ["server", "worker", "scheduler", "telegram-poll", "health", "config", "migrate", "info"]


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _run(logger, name: str, cmd: list[str]) -> None:
    """Run a child process until it exits or Ctrl+C."""
    click.echo("Press Ctrl+C to stop\n")
    try:
        subprocess.run(cmd, check=True, cwd=PROJECT_ROOT)
    except KeyboardInterrupt:
        logger.info(f"{name} stopped")
    except subprocess.CalledProcessError as e:
        logger.error(f"{name} exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(SERVICES),
    default="info",
    help="Service or command to run.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="Enable DEBUG level logging.")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option("--workers", default=1, type=int, help="Number of worker processes.")
@click.option(
    "--migrate-action",
    type=click.Choice(["upgrade", "downgrade", "current", "history", "autogenerate"]),
    default="current",
    help="Migration action.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Migration message (for autogenerate).")
def main(
    service: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    workers: int,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """
    LawerApp CLI.

    \b
    Examples:
        python cli.py --service server --reload
        python cli.py --service worker --verbose
        python cli.py --service scheduler
        python cli.py --service telegram-poll
        python cli.py --service health
        python cli.py --service migrate --migrate-action autogenerate -m "add payments"
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "worker":
        run_worker(logger, workers)
    elif service == "scheduler":
        run_scheduler(logger)
    elif service == "telegram-poll":
        run_telegram_poll(logger)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config()
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)
    else:
        show_info()


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start uvicorn with the FastAPI app."""
    from modules.backend.core.config import get_app_config

    server_config = get_app_config().application.server
    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info("Starting server", extra={"host": server_host, "port": server_port, "reload": reload})
    cmd = [
        sys.executable, "-m", "uvicorn",
        "modules.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    _run(logger, "Server", cmd)


def _require_redis(logger) -> None:
    from modules.backend.core.config import get_redis_url

    redis_url = get_redis_url()
    logger.debug("Redis configured", extra={"redis_url": redis_url.split("@")[-1]})


def run_worker(logger, workers: int) -> None:
    """Start the taskiq worker."""
    _require_redis(logger)
    click.echo(f"Starting Taskiq worker with {workers} worker(s)")
    _run(logger, "Worker", [
        sys.executable, "-m", "taskiq", "worker",
        "modules.backend.tasks.broker:broker",
        "--workers", str(workers),
    ])


def run_scheduler(logger) -> None:
    """Start the taskiq scheduler for the cron jobs."""
    from modules.backend.tasks.scheduled import SCHEDULED_TASKS

    _require_redis(logger)
    click.echo("Scheduled tasks:")
    for task_name, config in SCHEDULED_TASKS.items():
        click.echo(f"  - {task_name}: {config['schedule'][0]['cron']}")
    click.echo("\nWARNING: Run only ONE scheduler instance")
    _run(logger, "Scheduler", [
        sys.executable, "-m", "taskiq", "scheduler",
        "modules.backend.tasks.scheduler:scheduler",
    ])


def run_telegram_poll(logger) -> None:
    """Run the bot with long polling for local development."""
    from modules.backend.core.config import get_app_config

    if not get_app_config().features.channel_telegram_enabled:
        click.echo(
            click.style("Error: channel_telegram_enabled is false in features.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)

    from modules.telegram.bot import create_bot, create_dispatcher, register_commands

    try:
        bot = create_bot()
    except RuntimeError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)
    dp = create_dispatcher()

    async def _poll() -> None:
        try:
            await bot.delete_webhook(drop_pending_updates=True)
            await register_commands(bot)
            logger.info("Webhook deleted, starting polling")
            await dp.start_polling(bot, allowed_updates=["message", "callback_query"])
        finally:
            await bot.session.close()

    click.echo("Starting Telegram bot (polling mode). Send /start to your bot.")
    try:
        asyncio.run(_poll())
    except KeyboardInterrupt:
        logger.info("Telegram bot stopped")


def check_health(logger) -> None:
    """Load configuration, build the app and ping the database."""
    checks: list[tuple[str, bool, str | None]] = []

    try:
        from modules.backend.core.config import get_app_config

        app_name = get_app_config().application.name
        checks.append(("YAML configuration", True, app_name))
    except Exception as e:
        checks.append(("YAML configuration", False, str(e)))

    try:
        from modules.backend.main import get_app

        checks.append(("FastAPI application", True, get_app().title))
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))

    try:
        from modules.backend.core.database import check_database, dispose_engine

        async def _ping() -> None:
            try:
                await check_database()
            finally:
                await dispose_engine()

        asyncio.run(_ping())
        checks.append(("Database", True, None))
    except Exception as e:
        checks.append(("Database", False, str(e)))

    click.echo("Health Check Results:")
    click.echo("-" * 50)
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        if not passed:
            logger.warning("Health check failed", extra={"check": name, "error": detail})
    click.echo("-" * 50)

    if not all(passed for _, passed, _ in checks):
        sys.exit(1)


def show_config() -> None:
    """Print the validated YAML configuration. Secrets are not shown."""
    from modules.backend.core.config import get_app_config

    app_config = get_app_config()
    for section in ("application", "database", "logging", "features", "plans", "alerts"):
        click.echo(click.style(f"\n[{section}]", bold=True))
        for key, value in getattr(app_config, section).model_dump().items():
            click.echo(f"  {key}: {value}")


def run_migrations(logger, migrate_action: str, revision: str, message: str | None) -> None:
    """Run Alembic against alembic.ini at the project root."""
    cmd = [sys.executable, "-m", "alembic", "-c", str(PROJECT_ROOT / "alembic.ini")]

    if migrate_action in ("upgrade", "downgrade"):
        cmd.extend([migrate_action, revision])
    elif migrate_action == "current":
        cmd.append("current")
    elif migrate_action == "history":
        cmd.extend(["history", "--verbose"])
    elif migrate_action == "autogenerate":
        if not message:
            click.echo(click.style("Error: --message/-m required for autogenerate.", fg="red"), err=True)
            sys.exit(1)
        cmd.extend(["revision", "--autogenerate", "-m", message])

    logger.info("Running migrations", extra={"action": migrate_action, "revision": revision})
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)


def show_info() -> None:
    from modules.backend.core.config import get_app_config

    app = get_app_config().application
    click.echo(f"{app.name} {app.version}")
    click.echo(app.description)
    click.echo()
    click.echo("Services (--service):")
    click.echo("  server         FastAPI server (API + Telegram webhook)")
    click.echo("  worker         Background task worker")
    click.echo("  scheduler      Cron scheduler (reminders, cleanup)")
    click.echo("  telegram-poll  Telegram bot in polling mode (local dev)")
    click.echo("  health         Configuration, app and database checks")
    click.echo("  config         Show configuration")
    click.echo("  migrate        Alembic migrations")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Webhook, database and local setup scripts: python manage.py --help")


if __name__ == "__main__":
    main()
