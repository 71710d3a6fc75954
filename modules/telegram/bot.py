"""
Bot and Dispatcher Configuration.

Creates and configures the aiogram Bot and Dispatcher instances.
Uses lazy initialization to prevent import-time failures.
"""

from typing import TYPE_CHECKING

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from aiogram import Bot, Dispatcher

# Module-level state for lazy initialization
_bot: "Bot | None" = None
_dispatcher: "Dispatcher | None" = None

BOT_COMMANDS: list[tuple[str, str]] = [
    ("start", "Главное меню"),
    ("help", "Справка по командам"),
    ("status", "Статус системы"),
    ("info", "О сервисе"),
    ("cancel", "Отменить текущее действие"),
]

ALLOWED_UPDATES = ["message", "callback_query"]


def create_bot() -> "Bot":
    """
    Create and configure the aiogram Bot instance.

    Raises:
        RuntimeError: If TELEGRAM_BOT_TOKEN is not configured
    """
    from aiogram import Bot
    from aiogram.client.default import DefaultBotProperties
    from aiogram.enums import ParseMode

    from modules.backend.core.config import get_settings

    settings = get_settings()

    if not settings.telegram_bot_token:
        raise RuntimeError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Set TELEGRAM_BOT_TOKEN environment variable or configure it in config/.env"
        )

    bot = Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )

    logger.info("Telegram bot created")
    return bot


def create_dispatcher() -> "Dispatcher":
    """Create the Dispatcher with all routers and middlewares."""
    from aiogram import Dispatcher
    from aiogram.fsm.storage.memory import MemoryStorage

    from modules.telegram.handlers import get_all_routers
    from modules.telegram.middlewares import setup_middlewares

    # FSM state only holds the in-progress bot consultation
    dp = Dispatcher(storage=MemoryStorage())

    setup_middlewares(dp)
    for router in get_all_routers():
        dp.include_router(router)

    logger.info("Telegram dispatcher created with routers and middlewares")
    return dp


def get_bot() -> "Bot":
    """Get or create the Bot instance (lazy initialization)."""
    global _bot
    if _bot is None:
        _bot = create_bot()
    return _bot


def get_dispatcher() -> "Dispatcher":
    """Get or create the Dispatcher instance (lazy initialization)."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = create_dispatcher()
    return _dispatcher


async def register_commands(bot: "Bot") -> None:
    """Publish the command list shown in the Telegram client menu."""
    from aiogram.types import BotCommand

    await bot.set_my_commands(
        [BotCommand(command=command, description=description) for command, description in BOT_COMMANDS]
    )
    logger.info("Bot commands registered", extra={"count": len(BOT_COMMANDS)})


async def setup_webhook(bot: "Bot", webhook_url: str, secret_token: str) -> None:
    """
    Point Telegram at the webhook and register bot commands.

    Args:
        bot: Bot instance
        webhook_url: Full webhook URL (e.g., https://example.com/webhook/telegram)
        secret_token: Value Telegram echoes in X-Telegram-Bot-Api-Secret-Token
    """
    await bot.set_webhook(
        url=webhook_url,
        secret_token=secret_token or None,
        drop_pending_updates=True,
        allowed_updates=ALLOWED_UPDATES,
    )
    await register_commands(bot)
    logger.info("Webhook configured", extra={"webhook_url": webhook_url})


async def close_bot() -> None:
    """Close the bot HTTP session on shutdown. The webhook stays registered."""
    global _bot
    if _bot is not None:
        await _bot.session.close()
        logger.info("Bot session closed")
    _bot = None
