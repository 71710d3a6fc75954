"""
Setup Commands.

One-shot local development bootstrap.
"""

import asyncio
import re
import secrets
import shutil
import sys
from pathlib import Path

import typer
from rich.console import Console

app = typer.Typer(help="Environment setup commands")
console = Console()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
ENV_EXAMPLE = PROJECT_ROOT / "config" / ".env.example"
ENV_FILE = PROJECT_ROOT / "config" / ".env"
LOCAL_DATABASE_URL = "sqlite+aiosqlite:///./data/lawerapp.db"

MIN_PYTHON = (3, 11)
# Optional for local work: SQLite replaces PostgreSQL, Redis is only for tasks
OPTIONAL_TOOLS = {
    "psql": "PostgreSQL client (production database)",
    "redis-server": "Redis (background tasks)",
    "git": "Git",
}

SECRET_KEYS = ("JWT_SECRET", "TELEGRAM_WEBHOOK_SECRET")


def render_local_env(example: str) -> str:
    """
    Turn .env.example into a local .env: fresh secrets and a SQLite URL.

    Placeholder secrets are replaced; real-looking values are kept.
    """
    lines = []
    for line in example.splitlines():
        key = line.split("=", 1)[0].strip()
        if key in SECRET_KEYS and "change-me" in line:
            line = f"{key}={secrets.token_urlsafe(48)}"
        elif re.match(r"^#?\s*DATABASE_URL=", line):
            line = f"DATABASE_URL={LOCAL_DATABASE_URL}"
        lines.append(line)

    if not any(line.startswith("DATABASE_URL=") for line in lines):
        lines.append(f"DATABASE_URL={LOCAL_DATABASE_URL}")
    return "\n".join(lines) + "\n"


def check_tools() -> bool:
    """Report Python version and optional tools. False if Python is too old."""
    python_ok = sys.version_info >= MIN_PYTHON
    version = ".".join(str(part) for part in sys.version_info[:3])
    if python_ok:
        console.print(f"[green]✓[/green] Python {version}")
    else:
        console.print(f"[red]✗[/red] Python {version}, need {'.'.join(map(str, MIN_PYTHON))}+")

    for tool, label in OPTIONAL_TOOLS.items():
        if shutil.which(tool):
            console.print(f"[green]✓[/green] {label}")
        else:
            console.print(f"[yellow]-[/yellow] {label} not found (optional)")
    return python_ok


def write_env_file() -> bool:
    """Create config/.env from the example. False when it already exists."""
    if ENV_FILE.exists():
        console.print("[yellow]config/.env already exists, leaving it unchanged[/yellow]")
        return False
    ENV_FILE.write_text(render_local_env(ENV_EXAMPLE.read_text(encoding="utf-8")), encoding="utf-8")
    console.print("[green]✓[/green] Created config/.env with local settings")
    return True


@app.command("local-dev")
def local_dev(
    skip_seed: bool = typer.Option(False, "--skip-seed", help="Do not load tax rates"),
) -> None:
    """
    Prepare a local environment: .env, SQLite database, tax rates.

    Examples:
        manage.py setup local-dev
    """
    console.print("[bold]LawerApp local development setup[/bold]\n")

    if not check_tools():
        raise typer.Exit(1)

    write_env_file()
    (PROJECT_ROOT / "data").mkdir(exist_ok=True)

    from modules.cli.commands.db import init_tables, seed_rates

    asyncio.run(init_tables())
    console.print("[green]✓[/green] Database tables created")

    if not skip_seed:
        written = asyncio.run(seed_rates())
        console.print(f"[green]✓[/green] Seeded {written} transport tax rates")

    console.print("\nNext steps:")
    console.print("  1. Put your bot token and OpenAI key into config/.env")
    console.print("  2. python cli.py --service server --reload")
    console.print("  3. python cli.py --service telegram-poll")
