"""
RAG Repositories.
"""

from sqlalchemy import func, select

from modules.backend.models.rag import ProcessedDocument, RAGConsultation
from modules.backend.repositories.base import UserOwnedRepository


class RAGConsultationRepository(UserOwnedRepository[RAGConsultation]):
    model = RAGConsultation

    async def average_confidence(self, user_id: str) -> float | None:
        result = await self.session.execute(
            select(func.avg(RAGConsultation.confidence)).where(RAGConsultation.user_id == user_id)
        )
        value = result.scalar_one_or_none()
        return round(float(value), 2) if value is not None else None


class ProcessedDocumentRepository(UserOwnedRepository[ProcessedDocument]):
    model = ProcessedDocument
