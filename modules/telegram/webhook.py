"""
Webhook Endpoint for Telegram Bot.

Provides FastAPI router for handling Telegram webhook requests.
"""

import hmac
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.logging import get_logger

if TYPE_CHECKING:
    from aiogram import Bot, Dispatcher

logger = get_logger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"


def get_webhook_router(bot: "Bot", dp: "Dispatcher") -> APIRouter:
    """
    Create a FastAPI router for handling Telegram webhook requests.

    Usage:
        app.include_router(get_webhook_router(get_bot(), get_dispatcher()))
    """
    from aiogram.types import Update

    router = APIRouter(tags=["telegram"])

    webhook_path = get_app_config().application.telegram.webhook_path
    webhook_secret = get_settings().telegram_webhook_secret

    @router.post(webhook_path)
    async def telegram_webhook(request: Request) -> Response:
        """
        Handle incoming Telegram webhook requests.

        Rejects requests without the configured secret token. Processing
        errors are logged and still answered with 200 so Telegram does
        not redeliver the update.
        """
        if webhook_secret:
            secret_header = request.headers.get(SECRET_HEADER, "")
            if not hmac.compare_digest(secret_header, webhook_secret):
                logger.warning(
                    "Invalid webhook secret token",
                    extra={"client_ip": request.client.host if request.client else None},
                )
                return Response(status_code=403)

        try:
            update = Update.model_validate(await request.json(), context={"bot": bot})
            logger.debug(
                "Received Telegram update",
                extra={"update_id": update.update_id, "update_type": update.event_type},
            )
            await dp.feed_update(bot, update)
        except Exception as e:
            logger.error(
                "Error processing Telegram update",
                extra={"error": str(e)},
                exc_info=True,
            )
        return Response(status_code=200)

    @router.get(webhook_path + "/health")
    async def telegram_webhook_health() -> dict:
        """Health check for the Telegram webhook endpoint."""
        return {"status": "healthy", "webhook_path": webhook_path}

    return router
