"""
Update Logging Middleware.

One record per update with source="telegram"; the update id, chat and
sender are bound to structlog contextvars so handler logs carry them too.
Question text is never logged, only its length.
"""

import time
from typing import Any, Awaitable, Callable

import structlog
from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update

from modules.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


def update_context(event: TelegramObject) -> dict[str, Any]:
    if not isinstance(event, Update):
        return {}

    context: dict[str, Any] = {
        "update_id": event.update_id,
        "update_type": event.event_type,
    }
    if event.message:
        message = event.message
        context["chat_id"] = message.chat.id
        if message.from_user:
            context["telegram_id"] = message.from_user.id
        if message.text and message.text.startswith("/"):
            context["command"] = message.text.split()[0]
        elif message.text:
            context["text_length"] = len(message.text)
    elif event.callback_query:
        query = event.callback_query
        context["telegram_id"] = query.from_user.id
        context["callback_data"] = query.data
        if query.message:
            context["chat_id"] = query.message.chat.id
    return context


class LoggingMiddleware(BaseMiddleware):
    """Outer update middleware: ``dp.update.outer_middleware(LoggingMiddleware())``."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        context = update_context(event)
        started = time.perf_counter()

        with structlog.contextvars.bound_contextvars(**context):
            log_with_source(logger, "telegram", "info", "Telegram update received")
            try:
                result = await handler(event, data)
            except Exception as exc:
                log_with_source(
                    logger,
                    "telegram",
                    "error",
                    "Telegram update failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                    elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
                )
                raise

            log_with_source(
                logger,
                "telegram",
                "debug",
                "Telegram update handled",
                elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return result
