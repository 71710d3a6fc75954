"""
Telegram Bot Module.

aiogram v3 bot for LawerApp running in webhook mode inside the FastAPI
application. The bot is a thin presentation layer over backend services:
it registers users, answers quick legal questions, lists disputes and
links into the Mini App.

Structure:
    modules/telegram/
    ├── bot.py               # Bot, dispatcher, commands, webhook setup
    ├── webhook.py           # Webhook endpoint for FastAPI
    ├── handlers/            # common, menu, consultation, fallback
    ├── middlewares/         # Registration, rate limiting, logging
    ├── keyboards/           # Inline menus and Mini App buttons
    ├── states/              # Consultation FSM
    ├── callbacks/           # CallbackData factories
    └── services/            # Outbound notifications and alerts

Usage:
    from modules.telegram import get_bot, get_dispatcher
    from modules.telegram.webhook import get_webhook_router

    app.include_router(get_webhook_router(get_bot(), get_dispatcher()))

Environment Variables:
    TELEGRAM_BOT_TOKEN: Bot token from BotFather
    TELEGRAM_WEBHOOK_SECRET: Secret for webhook validation
"""

from modules.telegram.bot import create_bot, create_dispatcher, get_bot, get_dispatcher

__all__ = [
    "create_bot",
    "create_dispatcher",
    "get_bot",
    "get_dispatcher",
]
