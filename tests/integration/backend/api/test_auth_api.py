"""
Integration Tests for Telegram sign-in.
"""

import json
import time

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_settings
from modules.backend.core.security import sign_telegram_init_data
from modules.backend.repositories.notification import NotificationRepository
from modules.backend.repositories.user import UserRepository


def init_data_for(user: dict, auth_date: int | None = None, token: str | None = None) -> str:
    fields = {
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps(user, ensure_ascii=False, separators=(",", ":")),
        "auth_date": str(auth_date or int(time.time())),
    }
    return sign_telegram_init_data(fields, token or get_settings().telegram_bot_token)


TG_USER = {
    "id": 555000111,
    "first_name": "Анна",
    "last_name": "Смирнова",
    "username": "anna_s",
    "language_code": "ru",
    "is_premium": True,
}


class TestTelegramAuth:
    """Tests for POST /api/v1/auth/telegram."""

    @pytest.mark.asyncio
    async def test_first_sign_in_registers_user(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        api,
    ):
        """Should create the user on the free plan and return a token."""
        response = await client.post(
            "/api/v1/auth/telegram", json={"init_data": init_data_for(TG_USER)}
        )

        data = api.assert_success(response)["data"]
        assert data["is_new_user"] is True
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["expires_in"] == 1440 * 60
        assert data["user"]["telegram_id"] == TG_USER["id"]
        assert data["user"]["subscription_plan"] == "free"
        assert data["user"]["is_premium"] is True

        user = await UserRepository(db_session).get_by_telegram_id(TG_USER["id"])
        assert user is not None
        notifications = await NotificationRepository(db_session).list_for_user(user.id)
        assert [n.notification_type for n in notifications] == ["user_registration"]

    @pytest.mark.asyncio
    async def test_second_sign_in_updates_profile(self, client: AsyncClient, api):
        """Should reuse the account and refresh the profile fields."""
        await client.post("/api/v1/auth/telegram", json={"init_data": init_data_for(TG_USER)})

        renamed = {**TG_USER, "username": "anna_new"}
        response = await client.post(
            "/api/v1/auth/telegram", json={"init_data": init_data_for(renamed)}
        )

        data = api.assert_success(response)["data"]
        assert data["is_new_user"] is False
        assert data["user"]["username"] == "anna_new"

    @pytest.mark.asyncio
    async def test_token_works_for_protected_endpoints(self, client: AsyncClient, api):
        """Should accept the issued token on /users/me."""
        response = await client.post(
            "/api/v1/auth/telegram", json={"init_data": init_data_for(TG_USER)}
        )
        token = api.assert_success(response)["data"]["access_token"]

        me = await client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

        assert api.assert_success(me)["data"]["username"] == "anna_s"

    @pytest.mark.asyncio
    async def test_rejects_wrong_signature(self, client: AsyncClient, api):
        """Should return 401 for init data signed with another bot token."""
        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_for(TG_USER, token="999:other-token")},
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_rejects_expired_init_data(self, client: AsyncClient, api):
        """Should return 401 when auth_date is older than the allowed age."""
        response = await client.post(
            "/api/v1/auth/telegram",
            json={"init_data": init_data_for(TG_USER, auth_date=int(time.time()) - 2 * 86400)},
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_rejects_empty_init_data(self, client: AsyncClient, api):
        """Should return 400 for an empty init_data string."""
        response = await client.post("/api/v1/auth/telegram", json={"init_data": ""})

        api.assert_validation_error(response, field="init_data")


class TestBearerAuth:
    """Tests for the bearer token dependency."""

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient, api):
        """Should return 401 without Authorization header."""
        api.assert_error(await client.get("/api/v1/users/me"), 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient, api):
        """Should return 401 for a token that does not decode."""
        response = await client.get(
            "/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"}
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")
