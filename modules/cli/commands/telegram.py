"""
Telegram Commands.

Webhook registration for the bot.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(help="Telegram webhook commands")
console = Console()


def _print_info(info) -> None:
    table = Table(title="Webhook")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("URL", info.url or "[yellow]not set[/yellow]")
    table.add_row("Pending updates", str(info.pending_update_count))
    table.add_row("Allowed updates", ", ".join(info.allowed_updates or []) or "all")
    if info.last_error_message:
        table.add_row("Last error", f"[red]{info.last_error_message}[/red] ({info.last_error_date})")
    console.print(table)


async def _with_bot(action):
    from modules.telegram.bot import create_bot

    bot = create_bot()
    try:
        return await action(bot)
    finally:
        await bot.session.close()


@app.command("setup-webhook")
def setup_webhook(
    url: str | None = typer.Option(None, "--url", help="Override the webhook URL"),
) -> None:
    """
    Point Telegram at this server and register bot commands.

    Examples:
        manage.py telegram setup-webhook
        manage.py telegram setup-webhook --url https://abc.ngrok.app/webhook/telegram
    """
    from modules.backend.core.config import get_settings, get_webhook_url
    from modules.telegram.bot import setup_webhook as configure

    webhook_url = url or get_webhook_url()
    if not webhook_url.startswith("https://"):
        console.print("[red]Telegram requires an https webhook URL[/red]")
        raise typer.Exit(1)

    async def action(bot):
        await configure(bot, webhook_url, get_settings().telegram_webhook_secret)
        return await bot.get_webhook_info()

    info = asyncio.run(_with_bot(action))
    console.print(f"[green]Webhook set:[/green] {webhook_url}\n")
    _print_info(info)


@app.command("webhook-info")
def webhook_info() -> None:
    """Show what Telegram has registered for the bot."""
    _print_info(asyncio.run(_with_bot(lambda bot: bot.get_webhook_info())))


@app.command("delete-webhook")
def delete_webhook(
    drop_pending: bool = typer.Option(False, "--drop-pending", help="Discard queued updates"),
) -> None:
    """Remove the webhook (needed before polling)."""
    asyncio.run(_with_bot(lambda bot: bot.delete_webhook(drop_pending_updates=drop_pending)))
    console.print("[green]Webhook deleted[/green]")
