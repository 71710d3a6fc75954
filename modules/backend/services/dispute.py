"""
Dispute Service.

Case tracking for a user: creation, edits and status transitions each
leave an event on the dispute's timeline inside the same transaction.
"""

from datetime import timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ValidationError
from modules.backend.core.utils import utc_now
from modules.backend.models.dispute import (
    ALLOWED_TRANSITIONS,
    Dispute,
    DisputeStatus,
    TimelineEvent,
    TimelineEventType,
)
from modules.backend.models.user import User
from modules.backend.repositories.dispute import DisputeRepository, TimelineRepository
from modules.backend.repositories.document import DocumentRepository
from modules.backend.schemas.dispute import (
    DisputeCreate,
    DisputeDetailResponse,
    DisputeStatsResponse,
    DisputeStatusUpdate,
    DisputeUpdate,
    TimelineCommentCreate,
    TimelineEventResponse,
)
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService
from modules.backend.services.usage_limits import UsageLimitService

STATUS_NAMES = {
    DisputeStatus.DRAFT: "Черновик",
    DisputeStatus.ACTIVE: "Активный",
    DisputeStatus.IN_PROGRESS: "В работе",
    DisputeStatus.ESCALATED: "Эскалирован",
    DisputeStatus.RESOLVED: "Решён",
    DisputeStatus.CLOSED: "Закрыт",
    DisputeStatus.CANCELLED: "Отменён",
}


def can_transition(current: DisputeStatus, target: DisputeStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


class DisputeService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = DisputeRepository(session)
        self.timeline = TimelineRepository(session)
        self.documents = DocumentRepository(session)

    async def _add_event(
        self,
        dispute: Dispute,
        event_type: TimelineEventType,
        title: str,
        description: str | None = None,
        event_data: dict[str, Any] | None = None,
    ) -> TimelineEvent:
        return await self._execute_db_operation(
            f"add_{event_type.value}_event",
            self.timeline.create(
                dispute_id=dispute.id,
                user_id=dispute.user_id,
                event_type=event_type.value,
                title=title,
                description=description,
                event_data=event_data or {},
            ),
        )

    async def create_dispute(self, user: User, data: DisputeCreate) -> Dispute:
        """
        Open a dispute together with its ``created`` timeline event.

        Raises:
            UsageLimitError: Monthly dispute quota used up
        """
        await UsageLimitService(self.session).check(user, "disputes")

        status = DisputeStatus.DRAFT if data.draft else DisputeStatus.ACTIVE
        dispute = await self._execute_db_operation(
            "create_dispute",
            self.repo.create(
                user_id=user.id,
                status=status.value,
                **data.model_dump(mode="json", exclude={"draft", "deadline"}),
                deadline=data.deadline,
            ),
        )
        await self._add_event(
            dispute,
            TimelineEventType.CREATED,
            "Спор создан",
            event_data={"status": status.value},
        )
        if dispute.deadline is not None:
            await self._add_event(
                dispute,
                TimelineEventType.DEADLINE_SET,
                "Установлен срок",
                event_data={"deadline": dispute.deadline.isoformat()},
            )

        self._log_operation("Dispute created", user_id=user.id, dispute_id=dispute.id)
        return dispute

    async def list_disputes(
        self,
        user: User,
        status: DisputeStatus | None = None,
        dispute_type: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Dispute], int, dict[str, int]]:
        """Page of disputes, total matches and the user's counts per status."""
        filters = {
            "status": status.value if status else None,
            "dispute_type": dispute_type,
            "priority": priority,
        }
        items, total = await self.repo.search_for_user(
            user.id, filters, search=search, limit=limit, offset=offset
        )
        counts = await self.repo.count_by_field(user.id, "status")
        return items, total, counts

    async def get_dispute(self, user: User, dispute_id: str) -> Dispute:
        return await self.repo.get_owned(dispute_id, user.id)

    async def get_dispute_detail(self, user: User, dispute_id: str) -> DisputeDetailResponse:
        dispute = await self.repo.get_owned(dispute_id, user.id)
        events = await self.timeline.list_for_dispute(dispute.id)
        documents = await self.documents.list_for_dispute(dispute.id, user.id)
        detail = DisputeDetailResponse.model_validate(dispute)
        detail.timeline = [TimelineEventResponse.model_validate(event) for event in events]
        detail.document_ids = [document.id for document in documents]
        return detail

    async def update_dispute(self, user: User, dispute_id: str, data: DisputeUpdate) -> Dispute:
        dispute = await self.repo.get_owned(dispute_id, user.id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        if "deadline" in changes:
            changes["deadline"] = data.deadline
        for key in ("title", "description", "priority", "tags"):
            if key in changes and changes[key] is None:
                del changes[key]
        if not changes:
            return dispute

        deadline_changed = "deadline" in changes and changes["deadline"] != dispute.deadline
        dispute = await self._execute_db_operation(
            "update_dispute",
            self.repo.update_instance(dispute, **changes),
        )
        await self._add_event(
            dispute,
            TimelineEventType.UPDATED,
            "Спор обновлён",
            event_data={"fields": sorted(changes)},
        )
        if deadline_changed and dispute.deadline is not None:
            await self._add_event(
                dispute,
                TimelineEventType.DEADLINE_SET,
                "Установлен срок",
                event_data={"deadline": dispute.deadline.isoformat()},
            )
        return dispute

    async def change_status(
        self,
        user: User,
        dispute_id: str,
        data: DisputeStatusUpdate,
    ) -> Dispute:
        """
        Move a dispute to a new status.

        Every change records a ``status_changed`` event; entering
        ``resolved`` also records a ``resolved`` event.

        Raises:
            NotFoundError: Unknown dispute or not owned by the user
            ValidationError: The transition is not allowed
        """
        dispute = await self.repo.get_owned(dispute_id, user.id)
        current = DisputeStatus(dispute.status)
        target = data.status

        if not can_transition(current, target):
            raise ValidationError(
                f"Cannot change dispute status from '{current.value}' to '{target.value}'",
                details={
                    "current_status": current.value,
                    "requested_status": target.value,
                    "allowed": sorted(status.value for status in ALLOWED_TRANSITIONS[current]),
                },
            )

        changes: dict[str, Any] = {"status": target.value}
        if target == DisputeStatus.RESOLVED:
            changes["resolved_at"] = utc_now()
        elif current == DisputeStatus.RESOLVED:
            changes["resolved_at"] = None

        dispute = await self._execute_db_operation(
            "change_dispute_status",
            self.repo.update_instance(dispute, **changes),
        )
        transition = {"old_status": current.value, "new_status": target.value}
        await self._add_event(
            dispute,
            TimelineEventType.STATUS_CHANGED,
            f"Статус изменён: {STATUS_NAMES[current]} → {STATUS_NAMES[target]}",
            description=data.comment,
            event_data=transition,
        )
        if target == DisputeStatus.RESOLVED:
            await self._add_event(
                dispute, TimelineEventType.RESOLVED, "Спор решён", event_data=transition
            )

        self._log_operation(
            "Dispute status changed",
            dispute_id=dispute.id,
            old_status=current.value,
            new_status=target.value,
        )
        await NotificationService(self.session).notify(
            user,
            "dispute_status_changed",
            {
                "dispute_title": dispute.title,
                "old_status": STATUS_NAMES[current],
                "new_status": STATUS_NAMES[target],
            },
            data={"dispute_id": dispute.id},
        )
        return dispute

    async def add_comment(
        self,
        user: User,
        dispute_id: str,
        data: TimelineCommentCreate,
    ) -> TimelineEvent:
        dispute = await self.repo.get_owned(dispute_id, user.id)
        return await self._add_event(
            dispute,
            TimelineEventType.COMMENT_ADDED,
            data.title,
            description=data.description,
        )

    async def get_timeline(self, user: User, dispute_id: str) -> list[TimelineEvent]:
        dispute = await self.repo.get_owned(dispute_id, user.id)
        return await self.timeline.list_for_dispute(dispute.id)

    async def delete_dispute(self, user: User, dispute_id: str) -> None:
        dispute = await self.repo.get_owned(dispute_id, user.id)
        await self.session.delete(dispute)
        await self._execute_db_operation("delete_dispute", self.session.flush())
        self._log_operation("Dispute deleted", dispute_id=dispute_id)

    async def get_stats(self, user: User) -> DisputeStatsResponse:
        by_status = await self.repo.count_by_field(user.id, "status")
        by_type = await self.repo.count_by_field(user.id, "dispute_type")
        total = sum(by_status.values())
        finished = by_status.get(DisputeStatus.RESOLVED.value, 0) + by_status.get(
            DisputeStatus.CLOSED.value, 0
        )
        rate = round(finished / total * 100, 1) if total else 0.0
        return DisputeStatsResponse(
            total=total,
            by_status=by_status,
            by_type=by_type,
            resolution_rate=rate,
        )

    async def upcoming_deadlines(self, user: User, days: int = 7) -> list[Dispute]:
        now = utc_now()
        return await self.repo.upcoming_deadlines(now + timedelta(days=days), now, user_id=user.id)
