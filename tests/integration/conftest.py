"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the full ASGI app.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic_ai.models.test import TestModel
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.security import create_access_token
from modules.backend.models.user import User
from modules.backend.services.ai_client import LegalAIClient

AI_REPLY = """Работодатель обязан выплатить зарплату не реже двух раз в месяц.
Направьте письменное заявление работодателю и обратитесь в трудовую инспекцию.

Источники: ТК РФ ст. 136, ТК РФ ст. 236
Уверенность: 90
Предложения: Составьте письменную претензию; Обратитесь в ГИТ
Вопросы: Есть ли трудовой договор?; Сколько месяцев задержка?"""


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database session override.

    The client uses the test database session, ensuring all API
    operations use the same session that gets rolled back after the test.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    from modules.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# AI Fixtures
# =============================================================================


@pytest.fixture
def ai_model() -> TestModel:
    """Model stub that answers every prompt with AI_REPLY."""
    return TestModel(custom_output_text=AI_REPLY)


@pytest.fixture
def fake_ai(monkeypatch: pytest.MonkeyPatch, ai_model: TestModel) -> LegalAIClient:
    """Route consultations through a LegalAIClient backed by the stub model."""
    ai_client = LegalAIClient(model=ai_model)
    monkeypatch.setattr(
        "modules.backend.services.consultation.get_ai_client",
        lambda: ai_client,
    )
    return ai_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (400).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)
        """
        data = ApiAssertions.assert_error(response, 400, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def bearer_for(user: User) -> dict[str, str]:
    token = create_access_token({"sub": user.id, "tg": user.telegram_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    """
    Authorization headers for the ``user`` fixture.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/v1/users/me", headers=auth_headers)
            assert response.status_code == 200
    """
    return bearer_for(user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict[str, str]:
    return bearer_for(other_user)


@pytest.fixture
def pretenziya_fields() -> dict[str, Any]:
    """Valid field values for the consumer claim template."""
    return {
        "consumer_name": "Иванов Иван Иванович",
        "consumer_address": "г. Москва, ул. Ленина, д. 1, кв. 2",
        "consumer_phone": "+7 (999) 123-45-67",
        "seller_name": "ООО «Ромашка»",
        "seller_address": "г. Москва, ул. Тверская, д. 10",
        "product_name": "Смартфон X100",
        "product_description": "Смартфон, 128 ГБ, черный",
        "purchase_date": "01.02.2024",
        "purchase_price": 45990,
        "defect_type": "качество",
        "defect_description": "Не включается после зарядки",
        "requirements": ["возврат"],
        "response_deadline": "10",
        "date": "15.02.2024",
    }

