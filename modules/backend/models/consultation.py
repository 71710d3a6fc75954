"""
Consultation Model.

One AI legal consultation: the user's question and the parsed model reply.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from modules.backend.models.base import Base, TimestampMixin, UserOwnedMixin, UUIDMixin

if TYPE_CHECKING:
    from modules.backend.models.user import User


class LegalCategory(str, enum.Enum):
    LABOR = "labor"
    HOUSING = "housing"
    FAMILY = "family"
    CIVIL = "civil"
    CONSUMER = "consumer"
    ADMINISTRATIVE = "administrative"
    CRIMINAL = "criminal"
    TAX = "tax"
    CORPORATE = "corporate"
    INTELLECTUAL = "intellectual"


CATEGORY_NAMES: dict[LegalCategory, str] = {
    LegalCategory.LABOR: "Трудовое право",
    LegalCategory.HOUSING: "Жилищное право",
    LegalCategory.FAMILY: "Семейное право",
    LegalCategory.CIVIL: "Гражданское право",
    LegalCategory.CONSUMER: "Защита прав потребителей",
    LegalCategory.ADMINISTRATIVE: "Административное право",
    LegalCategory.CRIMINAL: "Уголовное право",
    LegalCategory.TAX: "Налоговое право",
    LegalCategory.CORPORATE: "Корпоративное право",
    LegalCategory.INTELLECTUAL: "Интеллектуальная собственность",
}


class ConsultationStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class Consultation(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "consultations"

    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    query: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str | None] = mapped_column(Text)
    confidence: Mapped[int | None] = mapped_column(Integer)
    sources: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    suggestions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    follow_up_questions: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ConsultationStatus.PENDING.value, nullable=False
    )
    rating: Mapped[int | None] = mapped_column(Integer)
    model: Mapped[str | None] = mapped_column(String(64))
    tokens_used: Mapped[int | None] = mapped_column(Integer)

    user: Mapped["User"] = relationship(back_populates="consultations")

    def __repr__(self) -> str:
        return f"<Consultation(id={self.id}, category={self.category!r})>"
