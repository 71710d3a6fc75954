"""
RAG Models.

Records of retrieval-augmented consultations and uploaded source documents.
Only the tables live here; there is no search engine behind them.
"""

from sqlalchemy import JSON, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, TimestampMixin, UserOwnedMixin, UUIDMixin


class RAGConsultation(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "rag_consultations"

    question: Mapped[str] = mapped_column(Text, nullable=False)
    legal_area: Mapped[str | None] = mapped_column(String(50))
    answer: Mapped[str | None] = mapped_column(Text)
    sources: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    confidence: Mapped[float | None] = mapped_column(Float)
    max_results: Mapped[int] = mapped_column(Integer, default=5, nullable=False)
    threshold: Mapped[float] = mapped_column(Float, default=0.7, nullable=False)


class ProcessedDocument(UUIDMixin, TimestampMixin, UserOwnedMixin, Base):
    __tablename__ = "processed_documents"

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_type: Mapped[str] = mapped_column(String(50), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)
    extracted_text: Mapped[str | None] = mapped_column(Text)
    chunk_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    error_message: Mapped[str | None] = mapped_column(Text)
