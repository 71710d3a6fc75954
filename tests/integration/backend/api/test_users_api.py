"""
Integration Tests for the current user's profile, limits and account deletion.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models import (
    Consultation,
    Dispute,
    Document,
    Notification,
    TimelineEvent,
    User,
)


class TestProfile:
    """Tests for GET/PATCH /api/v1/users/me."""

    @pytest.mark.asyncio
    async def test_get_me(self, client: AsyncClient, user: User, auth_headers: dict, api):
        """Should return the signed-in user."""
        data = api.assert_success(await client.get("/api/v1/users/me", headers=auth_headers))

        assert data["data"]["id"] == user.id
        assert data["data"]["telegram_id"] == 100200300

    @pytest.mark.asyncio
    async def test_update_profile(self, client: AsyncClient, auth_headers: dict, api):
        """Should update contact fields."""
        response = await client.patch(
            "/api/v1/users/me",
            json={"phone": "+7 999 123-45-67", "email": "ivanov@example.com"},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["phone"] == "+7 999 123-45-67"
        assert data["email"] == "ivanov@example.com"

    @pytest.mark.asyncio
    async def test_update_rejects_bad_email(self, client: AsyncClient, auth_headers: dict, api):
        """Should reject a malformed email."""
        response = await client.patch(
            "/api/v1/users/me", json={"email": "not-an-email"}, headers=auth_headers
        )

        api.assert_validation_error(response, field="email")


class TestLimits:
    """Tests for GET /api/v1/users/me/limits."""

    @pytest.mark.asyncio
    async def test_free_plan_limits(self, client: AsyncClient, auth_headers: dict, api):
        """Should report the free plan quotas with nothing used."""
        data = api.assert_success(
            await client.get("/api/v1/users/me/limits", headers=auth_headers)
        )["data"]

        assert data["plan"] == "free"
        assert data["consultations"] == {"used": 0, "limit": 5, "remaining": 5}
        assert data["documents"] == {"used": 0, "limit": 3, "remaining": 3}
        assert data["disputes"] == {"used": 0, "limit": 1, "remaining": 1}

    @pytest.mark.asyncio
    async def test_unlimited_plan_has_no_remaining(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict,
        api,
    ):
        """Should report remaining=None for -1 limits."""
        user.subscription_plan = "enterprise"
        await db_session.flush()

        data = api.assert_success(
            await client.get("/api/v1/users/me/limits", headers=auth_headers)
        )["data"]

        assert data["consultations"] == {"used": 0, "limit": -1, "remaining": None}


class TestDeleteAccount:
    """Tests for DELETE /api/v1/users/me."""

    @pytest.mark.asyncio
    async def test_delete_cascades_to_owned_rows(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        other_user: User,
        auth_headers: dict,
        fake_ai,
        pretenziya_fields: dict,
        api,
    ):
        """Should remove the user with consultations, documents, disputes and timelines."""
        api.assert_success(
            await client.post(
                "/api/v1/consultations",
                json={"query": "Задерживают зарплату, что делать?", "category": "labor"},
                headers=auth_headers,
            ),
            expected_status=201,
        )
        dispute = api.assert_success(
            await client.post(
                "/api/v1/disputes",
                json={
                    "title": "Возврат телефона",
                    "description": "Магазин отказывается вернуть деньги",
                    "dispute_type": "consumer_protection",
                },
                headers=auth_headers,
            ),
            expected_status=201,
        )["data"]
        api.assert_success(
            await client.post(
                "/api/v1/documents/generate",
                json={
                    "template": "pretenziya",
                    "fields": pretenziya_fields,
                    "dispute_id": dispute["id"],
                },
                headers=auth_headers,
            ),
            expected_status=201,
        )
        db_session.add(
            Notification(
                user_id=other_user.id,
                notification_type="document_ready",
                title="Чужое",
                message="Чужое",
            )
        )
        await db_session.flush()

        response = await client.delete("/api/v1/users/me", headers=auth_headers)
        assert response.status_code == 204

        db_session.expunge_all()
        for model in (Consultation, Dispute, Document, TimelineEvent, Notification):
            count = await db_session.scalar(
                select(func.count()).select_from(model).where(model.user_id == user.id)
            )
            assert count == 0, model.__name__
        assert await db_session.get(User, user.id) is None
        assert await db_session.get(User, other_user.id) is not None

    @pytest.mark.asyncio
    async def test_token_of_deleted_user_is_rejected(
        self,
        client: AsyncClient,
        auth_headers: dict,
        api,
    ):
        """Should answer 404 for a token whose user no longer exists."""
        await client.delete("/api/v1/users/me", headers=auth_headers)

        api.assert_error(
            await client.get("/api/v1/users/me", headers=auth_headers), 404, "RES_NOT_FOUND"
        )
