"""
Dispute Models.

A user-tracked legal case and its append-only timeline.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.core.utils import utc_now
from modules.backend.models.base import Base, TimestampMixin, UserOwnedMixin, UUIDMixin

if TYPE_CHECKING:
    from modules.backend.models.user import User


class DisputeType(str, enum.Enum):
    CONSUMER_PROTECTION = "consumer_protection"
    LABOR = "labor"
    CONTRACT = "contract"
    PROPERTY = "property"
    FAMILY = "family"
    CRIMINAL = "criminal"
    ADMINISTRATIVE = "administrative"


class DisputeStatus(str, enum.Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class DisputePriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class TimelineEventType(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    STATUS_CHANGED = "status_changed"
    DOCUMENT_ADDED = "document_added"
    COMMENT_ADDED = "comment_added"
    DEADLINE_SET = "deadline_set"
    RESOLVED = "resolved"


ALLOWED_TRANSITIONS: dict[DisputeStatus, frozenset[DisputeStatus]] = {
    DisputeStatus.DRAFT: frozenset({DisputeStatus.ACTIVE, DisputeStatus.CANCELLED}),
    DisputeStatus.ACTIVE: frozenset({
        DisputeStatus.IN_PROGRESS,
        DisputeStatus.ESCALATED,
        DisputeStatus.RESOLVED,
        DisputeStatus.CLOSED,
        DisputeStatus.CANCELLED,
    }),
    DisputeStatus.IN_PROGRESS: frozenset({
        DisputeStatus.ESCALATED,
        DisputeStatus.RESOLVED,
        DisputeStatus.CLOSED,
        DisputeStatus.ACTIVE,
    }),
    DisputeStatus.ESCALATED: frozenset({
        DisputeStatus.ACTIVE,
        DisputeStatus.IN_PROGRESS,
        DisputeStatus.RESOLVED,
        DisputeStatus.CLOSED,
    }),
    DisputeStatus.RESOLVED: frozenset({DisputeStatus.ACTIVE, DisputeStatus.CLOSED}),
    DisputeStatus.CLOSED: frozenset({DisputeStatus.ACTIVE}),
    DisputeStatus.CANCELLED: frozenset(),
}


class Dispute(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "disputes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    dispute_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=DisputeStatus.ACTIVE.value, nullable=False, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=DisputePriority.MEDIUM.value, nullable=False
    )
    counterparty: Mapped[str | None] = mapped_column(String(255))
    amount: Mapped[float | None] = mapped_column(Numeric(14, 2, asdecimal=False))
    currency: Mapped[str] = mapped_column(String(3), default="RUB", nullable=False)
    deadline: Mapped[datetime | None] = mapped_column(DateTime, index=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime)
    tags: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    user: Mapped["User"] = relationship(back_populates="disputes")
    timeline_events: Mapped[list["TimelineEvent"]] = relationship(
        back_populates="dispute",
        cascade="all",
        passive_deletes=True,
        order_by="TimelineEvent.created_at",
    )

    def __repr__(self) -> str:
        return f"<Dispute(id={self.id}, status={self.status!r})>"


class TimelineEvent(UUIDMixin, UserOwnedMixin, Base):
    __tablename__ = "dispute_timeline_events"

    dispute_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("disputes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    event_data: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=utc_now, nullable=False, index=True
    )

    dispute: Mapped["Dispute"] = relationship(back_populates="timeline_events")
    user: Mapped["User"] = relationship(back_populates="timeline_events")

    def __repr__(self) -> str:
        return f"<TimelineEvent(dispute_id={self.dispute_id}, type={self.event_type!r})>"
