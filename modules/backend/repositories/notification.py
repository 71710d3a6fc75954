"""
Notification Repository.
"""

from datetime import datetime

from sqlalchemy import delete, func, select, update

from modules.backend.core.utils import utc_now
from modules.backend.models.notification import Notification
from modules.backend.repositories.base import UserOwnedRepository


class NotificationRepository(UserOwnedRepository[Notification]):
    model = Notification

    async def count_unread(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
        )
        return result.scalar_one()

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification read. Returns the number changed."""
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)  # noqa: E712
            .values(is_read=True, read_at=utc_now())
        )
        await self.session.flush()
        return result.rowcount or 0

    async def delete_read_before(self, cutoff: datetime) -> int:
        """Delete read notifications created before ``cutoff``."""
        result = await self.session.execute(
            delete(Notification).where(
                Notification.is_read == True,  # noqa: E712
                Notification.created_at < cutoff,
            )
        )
        await self.session.flush()
        return result.rowcount or 0
