"""
Document Repository.
"""

from modules.backend.models.document import Document
from modules.backend.repositories.base import UserOwnedRepository


class DocumentRepository(UserOwnedRepository[Document]):
    model = Document

    async def list_for_dispute(self, dispute_id: str, user_id: str) -> list[Document]:
        return await self.list_for_user(user_id, limit=100, filters={"dispute_id": dispute_id})
