"""
Document Model.

A legal document rendered from one of the built-in templates.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, TimestampMixin, UserOwnedMixin, UUIDMixin

if TYPE_CHECKING:
    from modules.backend.models.user import User


class DocumentType(str, enum.Enum):
    PRETENZIYA = "pretenziya"
    ISK = "isk"
    DOGOVOR = "dogovor"
    SOGLASHENIE = "soglashenie"


class Document(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "documents"

    dispute_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("disputes.id", ondelete="SET NULL"), index=True
    )
    document_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    fields: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    # "metadata" is reserved on declarative classes
    extra_data: Mapped[dict] = mapped_column("metadata", JSON, default=dict, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="generated", nullable=False)

    user: Mapped["User"] = relationship(back_populates="documents")

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, type={self.document_type!r})>"
