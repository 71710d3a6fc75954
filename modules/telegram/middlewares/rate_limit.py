"""
Rate Limiting Middleware.

Sliding window per Telegram user, kept in process memory. The limit comes
from security.yaml (rate_limiting.telegram.messages_per_minute).
"""

import time
from collections import defaultdict, deque
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from modules.backend.core.config import get_app_config
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

THROTTLED_TEXT = "⏳ Слишком много запросов. Подождите {seconds} сек."


class RateLimitMiddleware(BaseMiddleware):
    """
    Drops messages and callback queries over the limit and tells the user
    how long to wait. Registered as an inner middleware so only updates
    that reached a handler count.
    """

    def __init__(
        self,
        rate_limit: int | None = None,
        rate_window: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate_limit is None:
            rate_limit = get_app_config().security.rate_limiting.telegram.messages_per_minute
        self.rate_limit = rate_limit
        self.rate_window = rate_window
        self._clock = clock
        self._hits: dict[int, deque[float]] = defaultdict(deque)

    def retry_after(self, telegram_id: int) -> int:
        """Seconds until the user may send again; 0 when under the limit."""
        now = self._clock()
        hits = self._hits[telegram_id]
        while hits and hits[0] <= now - self.rate_window:
            hits.popleft()
        if len(hits) < self.rate_limit:
            return 0
        oldest = hits[0] if hits else now
        return int(self.rate_window - (now - oldest)) + 1

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        if not isinstance(event, (Message, CallbackQuery)) or event.from_user is None:
            return await handler(event, data)

        telegram_id = event.from_user.id
        wait = self.retry_after(telegram_id)
        if wait:
            logger.warning(
                "Telegram rate limit exceeded",
                extra={"telegram_id": telegram_id, "retry_after": wait},
            )
            text = THROTTLED_TEXT.format(seconds=wait)
            if isinstance(event, CallbackQuery):
                await event.answer(text, show_alert=True)
            else:
                await event.answer(text)
            return None

        self._hits[telegram_id].append(self._clock())
        return await handler(event, data)
