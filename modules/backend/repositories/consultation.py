"""
Consultation Repository.
"""

from sqlalchemy import func, select

from modules.backend.models.consultation import Consultation, ConsultationStatus
from modules.backend.repositories.base import UserOwnedRepository


class ConsultationRepository(UserOwnedRepository[Consultation]):
    model = Consultation

    async def count_pending(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Consultation)
            .where(
                Consultation.user_id == user_id,
                Consultation.status == ConsultationStatus.PENDING.value,
            )
        )
        return result.scalar_one()
