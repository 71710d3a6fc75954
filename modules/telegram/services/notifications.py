"""
Telegram Delivery.

Pushes messages to users and administrators through the bot. Used by the
backend notification service for user pushes and by the alert service
for admin alerts.

Usage:
    service = get_notification_service()
    await service.send(chat_id, "<b>Документ готов</b>")
    await service.send_alert(chat_id, "База данных недоступна", "...", AlertType.ERROR)
"""

import asyncio
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from aiogram.exceptions import TelegramAPIError
from aiogram.utils.text_decorations import html_decoration

from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.utils import utc_now

logger = get_logger(__name__)

# Telegram allows roughly one message per second to a chat
RATE_LIMIT_PER_CHAT = 20
RATE_LIMIT_WINDOW = 60


class AlertType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    SYSTEM = "system"


ALERT_EMOJI = {
    AlertType.INFO: "ℹ️",
    AlertType.SUCCESS: "✅",
    AlertType.WARNING: "⚠️",
    AlertType.ERROR: "❌",
    AlertType.SYSTEM: "🔧",
}


@dataclass
class NotificationResult:
    """Outcome of one send attempt."""

    success: bool
    chat_id: int
    message_id: int | None = None
    error: str | None = None
    rate_limited: bool = False
    timestamp: datetime = field(default_factory=utc_now)


def format_alert(
    title: str,
    body: str,
    alert_type: AlertType = AlertType.INFO,
    data: dict[str, Any] | None = None,
) -> str:
    """Render an alert as HTML: emoji title, body, then ``key: value`` lines."""
    quote = html_decoration.quote
    lines = [f"{ALERT_EMOJI.get(alert_type, '📢')} <b>{quote(title)}</b>", "", quote(body)]
    if data:
        lines.append("")
        for key, value in data.items():
            label = key.replace("_", " ").capitalize()
            lines.append(f"<b>{label}:</b> <code>{quote(str(value))}</code>")
    return "\n".join(lines)


class NotificationService:
    """
    Sends bot messages with a per-chat rate limit.

    Delivery failures are returned as unsuccessful results rather than
    raised; callers record them on the notification row.
    """

    def __init__(self, bot: Any = None) -> None:
        self._bot = bot
        self._rate_limits: dict[int, list[float]] = defaultdict(list)

    @property
    def bot(self) -> Any:
        if self._bot is None:
            from modules.telegram.bot import get_bot

            self._bot = get_bot()
        return self._bot

    def _check_rate_limit(self, chat_id: int) -> bool:
        """Record an attempt; False when the chat is over its window budget."""
        now = time.time()
        window_start = now - RATE_LIMIT_WINDOW
        self._rate_limits[chat_id] = [ts for ts in self._rate_limits[chat_id] if ts > window_start]
        if len(self._rate_limits[chat_id]) >= RATE_LIMIT_PER_CHAT:
            return False
        self._rate_limits[chat_id].append(now)
        return True

    async def send(
        self,
        chat_id: int,
        text: str,
        parse_mode: str = "HTML",
        disable_notification: bool = False,
        reply_markup: Any = None,
    ) -> NotificationResult:
        if not self._check_rate_limit(chat_id):
            log_with_source(logger, "telegram", "warning", "Notification rate limited", chat_id=chat_id)
            return NotificationResult(
                success=False,
                chat_id=chat_id,
                rate_limited=True,
                error="Rate limit exceeded",
            )

        try:
            message = await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=parse_mode,
                disable_notification=disable_notification,
                reply_markup=reply_markup,
            )
        except TelegramAPIError as e:
            log_with_source(
                logger,
                "telegram",
                "error",
                "Failed to send notification",
                chat_id=chat_id,
                error=str(e),
            )
            return NotificationResult(success=False, chat_id=chat_id, error=str(e))

        log_with_source(
            logger,
            "telegram",
            "info",
            "Notification sent",
            chat_id=chat_id,
            message_id=message.message_id,
        )
        return NotificationResult(success=True, chat_id=chat_id, message_id=message.message_id)

    async def send_alert(
        self,
        chat_id: int,
        title: str,
        body: str,
        alert_type: AlertType = AlertType.INFO,
        data: dict[str, Any] | None = None,
        disable_notification: bool = False,
    ) -> NotificationResult:
        return await self.send(
            chat_id=chat_id,
            text=format_alert(title, body, alert_type, data),
            disable_notification=disable_notification,
        )

    async def broadcast(
        self,
        chat_ids: list[int],
        text: str,
        disable_notification: bool = False,
        delay_between: float = 0.05,
    ) -> list[NotificationResult]:
        """Send the same text to several chats, pausing between sends."""
        results = []
        for chat_id in chat_ids:
            results.append(
                await self.send(chat_id=chat_id, text=text, disable_notification=disable_notification)
            )
            if delay_between > 0:
                await asyncio.sleep(delay_between)

        success_count = sum(1 for r in results if r.success)
        log_with_source(
            logger,
            "telegram",
            "info",
            "Broadcast completed",
            total=len(chat_ids),
            success=success_count,
            failed=len(chat_ids) - success_count,
        )
        return results


_notification_service: NotificationService | None = None


def get_notification_service() -> NotificationService:
    """Get or create the notification service singleton."""
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service
