"""
Consultation Service.

Order of checks for a new consultation: plan quota (429), then the
LLM call (503 on failure), then the row and a notification are written.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import AIServiceError
from modules.backend.core.utils import truncate
from modules.backend.models.consultation import (
    CATEGORY_NAMES,
    Consultation,
    ConsultationStatus,
    LegalCategory,
)
from modules.backend.models.user import User
from modules.backend.repositories.consultation import ConsultationRepository
from modules.backend.schemas.consultation import CategoryResponse, ConsultationCreate
from modules.backend.services.ai_client import LegalAIClient, get_ai_client
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService
from modules.backend.services.usage_limits import UsageLimitService


class ConsultationService(BaseService):
    def __init__(self, session: AsyncSession, ai_client: LegalAIClient | None = None) -> None:
        super().__init__(session)
        self.repo = ConsultationRepository(session)
        self._ai_client = ai_client

    @property
    def ai(self) -> LegalAIClient:
        if self._ai_client is None:
            self._ai_client = get_ai_client()
        return self._ai_client

    async def create_consultation(self, user: User, data: ConsultationCreate) -> Consultation:
        """
        Ask the AI and store the answer.

        Raises:
            UsageLimitError: Monthly consultation quota used up
            AIServiceError: The AI provider failed
        """
        await UsageLimitService(self.session).check(user, "consultations")

        if not get_app_config().features.ai_consultation_enabled:
            raise AIServiceError("AI consultations are temporarily disabled")

        self._log_operation(
            "Requesting AI consultation",
            user_id=user.id,
            category=data.category.value,
        )
        result = await self.ai.consult(data.query, data.category, data.context)

        consultation = await self._execute_db_operation(
            "create_consultation",
            self.repo.create(
                user_id=user.id,
                category=data.category.value,
                query=data.query,
                response=result.answer,
                confidence=result.confidence,
                sources=result.sources,
                suggestions=result.suggestions,
                follow_up_questions=result.follow_up_questions,
                status=ConsultationStatus.COMPLETED.value,
                model=result.model,
                tokens_used=result.tokens_used,
            ),
        )

        await NotificationService(self.session).notify(
            user,
            "consultation_complete",
            {"topic": truncate(data.query)},
            data={"consultation_id": consultation.id},
        )
        return consultation

    async def get_consultation(self, user: User, consultation_id: str) -> Consultation:
        return await self.repo.get_owned(consultation_id, user.id)

    async def list_consultations(
        self,
        user: User,
        category: LegalCategory | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Consultation], int]:
        filters = {"category": category.value if category else None}
        items = await self.repo.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        total = await self.repo.count_for_user(user.id, filters=filters)
        return items, total

    async def rate_consultation(self, user: User, consultation_id: str, rating: int) -> Consultation:
        consultation = await self.repo.get_owned(consultation_id, user.id)
        return await self._execute_db_operation(
            "rate_consultation",
            self.repo.update_instance(consultation, rating=rating),
        )

    async def delete_consultation(self, user: User, consultation_id: str) -> None:
        consultation = await self.repo.get_owned(consultation_id, user.id)
        await self.session.delete(consultation)
        await self._execute_db_operation("delete_consultation", self.session.flush())
        self._log_operation("Consultation deleted", consultation_id=consultation_id)

    @staticmethod
    def list_categories() -> list[CategoryResponse]:
        return [
            CategoryResponse(id=category.value, name=name)
            for category, name in CATEGORY_NAMES.items()
        ]
