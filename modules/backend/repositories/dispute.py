"""
Dispute Repository.

Disputes and their timeline events.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import Select, func, select

from modules.backend.models.dispute import Dispute, DisputeStatus, TimelineEvent
from modules.backend.repositories.base import BaseRepository, UserOwnedRepository


class DisputeRepository(UserOwnedRepository[Dispute]):
    model = Dispute

    def _search(self, query: Select, search: str | None) -> Select:
        if search:
            query = query.where(Dispute.title.ilike(f"%{search}%"))
        return query

    async def search_for_user(
        self,
        user_id: str,
        filters: dict[str, Any],
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Dispute], int]:
        """Filtered page of the user's disputes plus the total match count."""
        base = self._search(self._apply_filters(self._owned(user_id), filters), search)
        result = await self.session.execute(
            base.order_by(Dispute.created_at.desc()).limit(limit).offset(offset)
        )
        total = await self.session.execute(
            select(func.count()).select_from(base.subquery())
        )
        return list(result.scalars().all()), total.scalar_one()

    async def upcoming_deadlines(
        self,
        until: datetime,
        now: datetime,
        user_id: str | None = None,
    ) -> list[Dispute]:
        """Open disputes whose deadline falls between ``now`` and ``until``."""
        query = select(Dispute).where(
            Dispute.deadline.is_not(None),
            Dispute.deadline >= now,
            Dispute.deadline <= until,
            Dispute.status.in_([
                DisputeStatus.ACTIVE.value,
                DisputeStatus.IN_PROGRESS.value,
                DisputeStatus.ESCALATED.value,
            ]),
        )
        if user_id is not None:
            query = query.where(Dispute.user_id == user_id)
        result = await self.session.execute(query.order_by(Dispute.deadline))
        return list(result.scalars().all())


class TimelineRepository(BaseRepository[TimelineEvent]):
    model = TimelineEvent

    async def list_for_dispute(self, dispute_id: str) -> list[TimelineEvent]:
        result = await self.session.execute(
            select(TimelineEvent)
            .where(TimelineEvent.dispute_id == dispute_id)
            .order_by(TimelineEvent.created_at)
        )
        return list(result.scalars().all())
