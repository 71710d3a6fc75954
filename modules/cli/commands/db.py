"""
Database Commands.

Connectivity check, table creation, rate seeding and Alembic migrations.
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import func, select, text

app = typer.Typer(help="Database commands")
console = Console()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
ALEMBIC_INI = PROJECT_ROOT / "alembic.ini"


def _run_alembic(args: list[str]) -> None:
    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI)] + args
    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        raise typer.Exit(result.returncode)


async def collect_stats() -> tuple[str, dict[str, int | None]]:
    """Server version and row count per table; ``None`` for missing tables."""
    from modules.backend.core.database import dispose_engine, get_engine
    from modules.backend.models import Base

    engine = get_engine()
    counts: dict[str, int | None] = {}
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            if engine.dialect.name == "sqlite":
                version = "SQLite " + (await conn.execute(text("SELECT sqlite_version()"))).scalar_one()
            else:
                version = (await conn.execute(text("SELECT version()"))).scalar_one()

            existing = set(await conn.run_sync(lambda sync_conn: sync_conn.dialect.get_table_names(sync_conn)))
            for table in Base.metadata.sorted_tables:
                if table.name not in existing:
                    counts[table.name] = None
                    continue
                counts[table.name] = (
                    await conn.execute(select(func.count()).select_from(table))
                ).scalar_one()
    finally:
        await dispose_engine()
    return version, counts


async def init_tables() -> None:
    from modules.backend.core.database import create_tables, dispose_engine

    try:
        await create_tables()
    finally:
        await dispose_engine()


async def seed_rates(path: Path | None = None) -> int:
    """Replace the rate table for the data file's year. Returns rows written."""
    from modules.backend.core.database import dispose_engine, get_session_factory
    from modules.backend.services.tax import TaxService

    try:
        async with get_session_factory()() as session:
            written = await TaxService(session).seed_transport_rates(path)
            await session.commit()
    finally:
        await dispose_engine()
    return written


@app.command()
def check() -> None:
    """
    Connect, run SELECT 1 and show row counts.

    Examples:
        manage.py db check
    """
    try:
        version, counts = asyncio.run(collect_stats())
    except Exception as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Connected[/green] {version}\n")
    table = Table(title="Tables")
    table.add_column("Table", style="cyan")
    table.add_column("Rows", justify="right")
    for name, count in counts.items():
        table.add_row(name, "[yellow]missing[/yellow]" if count is None else str(count))
    console.print(table)


@app.command()
def init() -> None:
    """Create all tables from the models (local development)."""
    asyncio.run(init_tables())
    console.print("[green]Tables created[/green]")


@app.command("seed-tax-rates")
def seed_tax_rates(
    path: Path | None = typer.Option(None, "--path", "-p", help="Rates YAML file"),
) -> None:
    """
    Load regional transport tax rates.

    Examples:
        manage.py db seed-tax-rates
        manage.py db seed-tax-rates --path config/data/transport_tax_rates.yaml
    """
    written = asyncio.run(seed_rates(path))
    console.print(f"[green]Seeded {written} transport tax rates[/green]")


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Target revision"),
) -> None:
    """Upgrade the database to a revision."""
    console.print(f"[bold]Upgrading database to revision: {revision}[/bold]\n")
    _run_alembic(["upgrade", revision])
    console.print("\n[green]Upgrade completed[/green]")


@app.command()
def current() -> None:
    """Show the current database revision."""
    _run_alembic(["current"])
