"""
Notification Service.

Persists in-app notifications rendered from templates and, when the
Telegram channel is enabled, pushes a copy through the bot. Bot
delivery is best-effort: failures are logged and never raised.
"""

import string
from datetime import timedelta
from typing import Any

from aiogram.utils.text_decorations import html_decoration
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.utils import utc_now
from modules.backend.models.notification import Notification
from modules.backend.models.user import User
from modules.backend.repositories.notification import NotificationRepository
from modules.backend.schemas.notification import NotificationStats, NotificationTemplateResponse
from modules.backend.services.base import BaseService

NOTIFICATION_TEMPLATES: dict[str, dict[str, str]] = {
    "user_registration": {
        "title": "Добро пожаловать в LawerApp!",
        "message": (
            "Привет, {user_name}! Вы зарегистрировались в LawerApp. "
            "Теперь вам доступны AI-консультации, генерация документов и учёт споров. "
            "Ваш план: {plan_name}"
        ),
    },
    "consultation_complete": {
        "title": "Ваша консультация готова",
        "message": "Юрист-ассистент ответил на ваш вопрос по теме «{topic}».",
    },
    "dispute_status_changed": {
        "title": "Статус спора изменён",
        "message": "Спор «{dispute_title}»: {old_status} → {new_status}.",
    },
    "deadline_reminder": {
        "title": "Приближается срок по спору",
        "message": "По спору «{dispute_title}» срок истекает {deadline}. Осталось дней: {days_left}.",
    },
    "document_ready": {
        "title": "Документ сформирован",
        "message": "Документ «{document_title}» готов. Его можно скачать в разделе «Документы».",
    },
}


def template_variables(template: str) -> list[str]:
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


def render_template(template_id: str, variables: dict[str, Any]) -> tuple[str, str]:
    """
    Render a notification template. Missing variables render as empty text.

    Raises:
        NotFoundError: If the template does not exist
    """
    template = NOTIFICATION_TEMPLATES.get(template_id)
    if template is None:
        raise NotFoundError(f"Notification template '{template_id}' not found")

    values = {name: "" for name in template_variables(template["message"])}
    values.update({key: value for key, value in variables.items() if value is not None})
    return template["title"].format(**values), template["message"].format(**values)


class NotificationService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NotificationRepository(session)

    async def notify(
        self,
        user: User,
        template_id: str,
        variables: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        push: bool = True,
    ) -> Notification:
        """Create an in-app notification and optionally push it to Telegram."""
        title, message = render_template(template_id, variables or {})
        notification = await self._execute_db_operation(
            "create_notification",
            self.repo.create(
                user_id=user.id,
                notification_type=template_id,
                title=title,
                message=message,
                data=data or {},
            ),
        )
        self._log_debug("Notification created", user_id=user.id, type=template_id)

        if push and self._telegram_delivery_enabled():
            delivered = await self._push_to_telegram(user, title, message)
            if delivered:
                notification.channel = "telegram"
                await self.session.flush()

        return notification

    @staticmethod
    def _telegram_delivery_enabled() -> bool:
        features = get_app_config().features
        return features.channel_telegram_enabled and features.notifications_telegram_delivery

    async def _push_to_telegram(self, user: User, title: str, message: str) -> bool:
        from modules.telegram.services.notifications import get_notification_service

        result = await get_notification_service().send(
            user.telegram_id,
            f"<b>{html_decoration.quote(title)}</b>\n\n{html_decoration.quote(message)}",
        )
        if not result.success:
            self._logger.warning(
                "Telegram delivery failed",
                extra={"user_id": user.id, "error": result.error},
            )
        return result.success

    async def list_notifications(
        self,
        user: User,
        unread_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Notification], int]:
        filters = {"is_read": False} if unread_only else None
        items = await self.repo.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        total = await self.repo.count_for_user(user.id, filters=filters)
        return items, total

    async def mark_read(self, user: User, notification_id: str) -> Notification:
        notification = await self.repo.get_owned(notification_id, user.id)
        if notification.is_read:
            return notification
        return await self._execute_db_operation(
            "mark_notification_read",
            self.repo.update_instance(notification, is_read=True, read_at=utc_now()),
        )

    async def mark_all_read(self, user: User) -> int:
        updated = await self._execute_db_operation(
            "mark_all_read", self.repo.mark_all_read(user.id)
        )
        self._log_operation("Notifications marked read", user_id=user.id, count=updated)
        return updated

    async def get_stats(self, user: User) -> NotificationStats:
        return NotificationStats(
            total=await self.repo.count_for_user(user.id),
            unread=await self.repo.count_unread(user.id),
            by_type=await self.repo.count_by_field(user.id, "notification_type"),
        )

    async def cleanup(self, retention_days: int) -> int:
        """Delete read notifications older than ``retention_days``."""
        cutoff = utc_now() - timedelta(days=retention_days)
        deleted = await self._execute_db_operation(
            "cleanup_notifications", self.repo.delete_read_before(cutoff)
        )
        self._log_operation("Old notifications deleted", count=deleted, retention_days=retention_days)
        return deleted

    @staticmethod
    def list_templates() -> list[NotificationTemplateResponse]:
        return [
            NotificationTemplateResponse(
                id=template_id,
                title=template["title"],
                message=template["message"],
                variables=template_variables(template["message"]),
            )
            for template_id, template in NOTIFICATION_TEMPLATES.items()
        ]
