"""
Integration Tests for RAG and Payment record listings.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.user import User
from modules.backend.repositories.payment import PaymentRepository
from modules.backend.repositories.rag import ProcessedDocumentRepository, RAGConsultationRepository


class TestRagRecords:
    @pytest.mark.asyncio
    async def test_empty(self, client: AsyncClient, auth_headers: dict, api):
        for path in ("/api/v1/rag/consultations", "/api/v1/rag/documents", "/api/v1/payments"):
            data = api.assert_success(await client.get(path, headers=auth_headers))
            assert data["data"] == []
            assert data["pagination"]["total"] == 0

        stats = api.assert_success(
            await client.get("/api/v1/rag/stats", headers=auth_headers)
        )["data"]
        assert stats == {
            "consultations": 0,
            "documents": 0,
            "documents_by_status": {},
            "average_confidence": None,
        }

    @pytest.mark.asyncio
    async def test_stats_and_status_filter(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        api,
    ):
        consultations = RAGConsultationRepository(db_session)
        for confidence in (0.6, 0.8):
            await consultations.create(
                user_id=user.id, question="Как расторгнуть договор аренды?", confidence=confidence
            )
        documents = ProcessedDocumentRepository(db_session)
        for status in ("completed", "failed"):
            await documents.create(
                user_id=user.id,
                file_name=f"{status}.pdf",
                file_type="application/pdf",
                file_size=1024,
                status=status,
            )

        stats = api.assert_success(
            await client.get("/api/v1/rag/stats", headers=auth_headers)
        )["data"]
        assert stats["consultations"] == 2
        assert stats["documents_by_status"] == {"completed": 1, "failed": 1}
        assert stats["average_confidence"] == pytest.approx(0.7)

        failed = api.assert_success(
            await client.get("/api/v1/rag/documents?status=failed", headers=auth_headers)
        )
        assert [item["file_name"] for item in failed["data"]] == ["failed.pdf"]


class TestPayments:
    @pytest.mark.asyncio
    async def test_list_only_own(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        other_user: User,
        auth_headers: dict,
        api,
    ):
        repo = PaymentRepository(db_session)
        await repo.create(user_id=user.id, amount=990, status="succeeded", plan="premium")
        await repo.create(user_id=other_user.id, amount=4990, status="succeeded", plan="business")

        data = api.assert_success(await client.get("/api/v1/payments", headers=auth_headers))

        assert data["pagination"]["total"] == 1
        assert data["data"][0]["amount"] == 990
        assert data["data"][0]["plan"] == "premium"
