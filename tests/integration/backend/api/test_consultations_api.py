"""
Integration Tests for Consultations API.

The AI provider is replaced by pydantic_ai test models.
"""

import pytest
from httpx import AsyncClient
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.models.function import AgentInfo, FunctionModel
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.user import User
from modules.backend.repositories.consultation import ConsultationRepository
from modules.backend.repositories.notification import NotificationRepository
from modules.backend.services.ai_client import LegalAIClient

QUESTION = {
    "query": "Работодатель задерживает зарплату на два месяца. Что делать?",
    "category": "labor",
}


async def _seed_consultations(db_session: AsyncSession, user: User, count: int) -> None:
    repo = ConsultationRepository(db_session)
    for i in range(count):
        await repo.create(
            user_id=user.id,
            category="housing" if i % 2 else "labor",
            query=f"Вопрос номер {i}",
            response="Ответ",
            confidence=80,
            sources=[],
            status="completed",
        )


class TestCreateConsultation:
    """Tests for POST /api/v1/consultations."""

    @pytest.mark.asyncio
    async def test_create_parses_ai_reply(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        fake_ai,
        api,
    ):
        """Should store the answer with confidence, sources and suggestions."""
        response = await client.post("/api/v1/consultations", json=QUESTION, headers=auth_headers)

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["status"] == "completed"
        assert data["category"] == "labor"
        assert data["confidence"] == 90
        assert data["sources"] == ["ТК РФ ст. 136", "ТК РФ ст. 236"]
        assert data["suggestions"] == ["Составьте письменную претензию", "Обратитесь в ГИТ"]
        assert len(data["follow_up_questions"]) == 2
        assert "Источники:" not in data["response"]

        notifications = await NotificationRepository(db_session).list_for_user(user.id)
        assert [n.notification_type for n in notifications] == ["consultation_complete"]

    @pytest.mark.asyncio
    async def test_rejects_unknown_category(
        self, client: AsyncClient, auth_headers: dict, fake_ai, api
    ):
        """Should return 400 for a category outside the list."""
        response = await client.post(
            "/api/v1/consultations",
            json={**QUESTION, "category": "space_law"},
            headers=auth_headers,
        )

        api.assert_validation_error(response, field="category")

    @pytest.mark.asyncio
    async def test_rejects_short_query(self, client: AsyncClient, auth_headers: dict, api):
        """Should return 400 for a query under 5 characters."""
        response = await client.post(
            "/api/v1/consultations",
            json={"query": "Эй", "category": "labor"},
            headers=auth_headers,
        )

        api.assert_validation_error(response, field="query")

    @pytest.mark.asyncio
    async def test_monthly_limit(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        fake_ai,
        api,
    ):
        """Should return 429 once the free plan quota is used up."""
        await _seed_consultations(db_session, user, 5)

        response = await client.post("/api/v1/consultations", json=QUESTION, headers=auth_headers)

        data = api.assert_error(response, 429, "LIMIT_EXCEEDED")
        assert data["error"]["details"]["resource"] == "consultations"
        assert data["error"]["details"]["limit"] == 5

    @pytest.mark.asyncio
    async def test_ai_failure_returns_503_and_stores_nothing(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        monkeypatch: pytest.MonkeyPatch,
        api,
    ):
        """Should map a provider error to 503 without writing a row."""
        def reject(messages, info: AgentInfo):
            raise ModelHTTPError(status_code=400, model_name="test")

        failing = LegalAIClient(model=FunctionModel(reject))
        monkeypatch.setattr(
            "modules.backend.services.consultation.get_ai_client", lambda: failing
        )

        response = await client.post("/api/v1/consultations", json=QUESTION, headers=auth_headers)

        api.assert_error(response, 503, "SYS_AI_UNAVAILABLE")
        assert await ConsultationRepository(db_session).count_for_user(user.id) == 0


class TestListAndManageConsultations:
    """Tests for listing, reading, rating and deleting consultations."""

    @pytest.mark.asyncio
    async def test_list_filters_by_category(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        api,
    ):
        """Should filter the page by category."""
        await _seed_consultations(db_session, user, 4)

        response = await client.get(
            "/api/v1/consultations?category=housing", headers=auth_headers
        )

        data = api.assert_success(response)
        assert data["pagination"]["total"] == 2
        assert {item["category"] for item in data["data"]} == {"housing"}

    @pytest.mark.asyncio
    async def test_rate_and_delete(
        self,
        client: AsyncClient,
        auth_headers: dict,
        fake_ai,
        api,
    ):
        """Should store a rating and then delete the consultation."""
        created = api.assert_success(
            await client.post("/api/v1/consultations", json=QUESTION, headers=auth_headers),
            expected_status=201,
        )["data"]

        rated = await client.post(
            f"/api/v1/consultations/{created['id']}/rating",
            json={"rating": 5},
            headers=auth_headers,
        )
        assert api.assert_success(rated)["data"]["rating"] == 5

        deleted = await client.delete(
            f"/api/v1/consultations/{created['id']}", headers=auth_headers
        )
        assert deleted.status_code == 204

        missing = await client.get(f"/api/v1/consultations/{created['id']}", headers=auth_headers)
        api.assert_error(missing, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_rating_out_of_range(self, client: AsyncClient, auth_headers: dict, api):
        """Should reject ratings outside 1..5."""
        response = await client.post(
            "/api/v1/consultations/any-id/rating", json={"rating": 6}, headers=auth_headers
        )

        api.assert_validation_error(response, field="rating")

    @pytest.mark.asyncio
    async def test_other_users_consultation_is_hidden(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        other_user: User,
        auth_headers: dict,
        api,
    ):
        """Should return 404 for a consultation owned by someone else."""
        await _seed_consultations(db_session, other_user, 1)
        foreign = (await ConsultationRepository(db_session).list_for_user(other_user.id))[0]

        response = await client.get(f"/api/v1/consultations/{foreign.id}", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient, api):
        """Should list all ten areas of law."""
        data = api.assert_success(await client.get("/api/v1/consultations/categories"))["data"]

        assert len(data) == 10
        assert {"id": "labor", "name": "Трудовое право"} in data
