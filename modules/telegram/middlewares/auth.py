"""
Authentication Middleware.

Resolves the Telegram sender to an application user. Every bot user is
registered on first contact, the same way the Mini App sign-in does it,
so handlers always receive a persisted ``db_user``.
"""

from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update, User as TelegramUser

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_session_factory
from modules.backend.core.logging import get_logger
from modules.backend.services.auth import AuthService

logger = get_logger(__name__)


def extract_user(event: TelegramObject) -> TelegramUser | None:
    """Sender of a message or callback query update."""
    if not isinstance(event, Update):
        return None
    if event.message:
        return event.message.from_user
    if event.callback_query:
        return event.callback_query.from_user
    return None


class AuthMiddleware(BaseMiddleware):
    """
    Registers or refreshes the sender and opens a database session.

    Injects into handler data:
        db_user: modules.backend.models.user.User
        session: AsyncSession shared with the handler
        telegram_user: aiogram User
        is_admin: True for ids listed in application.telegram.authorized_users

    The session is committed when the handler succeeds and rolled back
    when it raises.

    Usage:
        dp.update.outer_middleware(AuthMiddleware())

        @router.message(Command("status"))
        async def status(message: Message, db_user: User, is_admin: bool): ...
    """

    def __init__(self, session_factory: Callable[[], Any] | None = None) -> None:
        self._session_factory = session_factory

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        user = extract_user(event)
        if user is None or user.is_bot:
            # Channel posts and service updates carry no person
            return await handler(event, data)

        factory = self._session_factory or get_session_factory()
        async with factory() as session:
            try:
                db_user, created = await AuthService(session).upsert_telegram_user(
                    user.model_dump(include={
                        "id", "username", "first_name", "last_name", "language_code", "is_premium",
                    })
                )
                if created:
                    logger.info(
                        "Telegram user registered via bot",
                        extra={"telegram_id": user.id, "user_id": db_user.id},
                    )

                data["db_user"] = db_user
                data["session"] = session
                data["telegram_user"] = user
                data["is_admin"] = user.id in get_app_config().application.telegram.authorized_users

                result = await handler(event, data)
                await session.commit()
                return result
            except Exception:
                await session.rollback()
                raise
