"""
Dashboard Service.

Aggregates the counters shown on the Mini App home screen.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.utils import month_start, truncate
from modules.backend.models.dispute import DisputeStatus
from modules.backend.models.user import User
from modules.backend.repositories.consultation import ConsultationRepository
from modules.backend.repositories.dispute import DisputeRepository
from modules.backend.repositories.document import DocumentRepository
from modules.backend.schemas.dashboard import (
    ActivityItem,
    ConsultationStats,
    DashboardStats,
    DisputeSummary,
    DocumentStats,
)
from modules.backend.services.base import BaseService
from modules.backend.services.usage_limits import UsageLimitService

RECENT_ACTIVITY_LIMIT = 10


class DashboardService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.consultations = ConsultationRepository(session)
        self.documents = DocumentRepository(session)
        self.disputes = DisputeRepository(session)

    async def get_stats(self, user: User) -> DashboardStats:
        since = month_start()

        consultations = ConsultationStats(
            total=await self.consultations.count_for_user(user.id),
            this_month=await self.consultations.count_for_user(user.id, since=since),
            pending=await self.consultations.count_pending(user.id),
        )

        by_type = await self.documents.count_by_field(user.id, "document_type")
        documents = DocumentStats(
            total=sum(by_type.values()),
            this_month=await self.documents.count_for_user(user.id, since=since),
            by_type=by_type,
        )

        by_status = await self.disputes.count_by_field(user.id, "status")
        disputes = DisputeSummary(
            total=sum(by_status.values()),
            active=by_status.get(DisputeStatus.ACTIVE.value, 0)
            + by_status.get(DisputeStatus.IN_PROGRESS.value, 0),
            resolved=by_status.get(DisputeStatus.RESOLVED.value, 0),
            escalated=by_status.get(DisputeStatus.ESCALATED.value, 0),
        )

        return DashboardStats(
            consultations=consultations,
            documents=documents,
            disputes=disputes,
            subscription=await UsageLimitService(self.session).get_usage(user),
            recent_activity=await self.recent_activity(user),
        )

    async def recent_activity(
        self, user: User, limit: int = RECENT_ACTIVITY_LIMIT
    ) -> list[ActivityItem]:
        items = [
            ActivityItem(
                type="consultation",
                id=c.id,
                title=truncate(c.query),
                status=c.status,
                created_at=c.created_at,
            )
            for c in await self.consultations.recent_for_user(user.id, limit)
        ]
        items += [
            ActivityItem(
                type="document",
                id=d.id,
                title=d.title,
                status=d.status,
                created_at=d.created_at,
            )
            for d in await self.documents.recent_for_user(user.id, limit)
        ]
        items += [
            ActivityItem(
                type="dispute",
                id=d.id,
                title=d.title,
                status=d.status,
                created_at=d.created_at,
            )
            for d in await self.disputes.recent_for_user(user.id, limit)
        ]
        items.sort(key=lambda item: item.created_at, reverse=True)
        return items[:limit]
