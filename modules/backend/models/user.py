"""
User Model.

A Telegram user of the Mini App. Every other user-owned table references
users.id with ON DELETE CASCADE.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from modules.backend.models.consultation import Consultation
    from modules.backend.models.dispute import Dispute, TimelineEvent
    from modules.backend.models.document import Document


def _owned(target: str) -> Mapped:
    return relationship(
        target,
        back_populates="user",
        cascade="all",
        passive_deletes=True,
    )


class User(UUIDMixin, TimestampMixin, Base):
    """Telegram user with subscription plan."""

    __tablename__ = "users"

    telegram_id: Mapped[int] = mapped_column(BigInteger, unique=True, index=True, nullable=False)
    username: Mapped[str | None] = mapped_column(String(64))
    first_name: Mapped[str | None] = mapped_column(String(128))
    last_name: Mapped[str | None] = mapped_column(String(128))
    language_code: Mapped[str | None] = mapped_column(String(8))
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(255))
    is_premium: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    subscription_plan: Mapped[str] = mapped_column(String(20), default="free", nullable=False)
    subscription_expires_at: Mapped[datetime | None] = mapped_column(DateTime)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime)

    consultations: Mapped[list["Consultation"]] = _owned("Consultation")
    documents: Mapped[list["Document"]] = _owned("Document")
    disputes: Mapped[list["Dispute"]] = _owned("Dispute")
    timeline_events: Mapped[list["TimelineEvent"]] = _owned("TimelineEvent")

    @property
    def display_name(self) -> str:
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.username or f"user{self.telegram_id}"

    def __repr__(self) -> str:
        return f"<User(id={self.id}, telegram_id={self.telegram_id})>"
