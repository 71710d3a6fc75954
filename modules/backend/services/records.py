"""
Record Services.

Read-only access to stored RAG consultations, processed uploads and
payments. Nothing in the backend writes these rows yet.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.payment import Payment
from modules.backend.models.rag import ProcessedDocument, RAGConsultation
from modules.backend.models.user import User
from modules.backend.repositories.payment import PaymentRepository
from modules.backend.repositories.rag import ProcessedDocumentRepository, RAGConsultationRepository
from modules.backend.schemas.rag import RAGStats
from modules.backend.services.base import BaseService


class RAGService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.consultations = RAGConsultationRepository(session)
        self.documents = ProcessedDocumentRepository(session)

    async def list_consultations(
        self, user: User, limit: int = 20, offset: int = 0
    ) -> tuple[list[RAGConsultation], int]:
        items = await self.consultations.list_for_user(user.id, limit=limit, offset=offset)
        return items, await self.consultations.count_for_user(user.id)

    async def list_documents(
        self, user: User, status: str | None = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[ProcessedDocument], int]:
        filters = {"status": status}
        items = await self.documents.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        return items, await self.documents.count_for_user(user.id, filters=filters)

    async def get_stats(self, user: User) -> RAGStats:
        by_status = await self.documents.count_by_field(user.id, "status")
        return RAGStats(
            consultations=await self.consultations.count_for_user(user.id),
            documents=sum(by_status.values()),
            documents_by_status=by_status,
            average_confidence=await self.consultations.average_confidence(user.id),
        )


class PaymentService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = PaymentRepository(session)

    async def list_payments(
        self, user: User, status: str | None = None, limit: int = 20, offset: int = 0
    ) -> tuple[list[Payment], int]:
        filters = {"status": status}
        items = await self.repo.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        return items, await self.repo.count_for_user(user.id, filters=filters)
