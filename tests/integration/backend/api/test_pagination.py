"""
Integration Tests for Pagination.

Exercised through the notifications list, the simplest paginated endpoint.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.user import User
from modules.backend.repositories.notification import NotificationRepository


async def _seed(db_session: AsyncSession, user: User, count: int, is_read: bool = False) -> None:
    repo = NotificationRepository(db_session)
    for i in range(count):
        await repo.create(
            user_id=user.id,
            notification_type="document_ready",
            title=f"Документ {i}",
            message="Документ готов",
            is_read=is_read,
        )


class TestPaginatedListEndpoint:
    """Tests for paginated list endpoint."""

    @pytest.mark.asyncio
    async def test_returns_paginated_response_structure(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict[str, str],
    ):
        """Should return response with pagination info."""
        await _seed(db_session, user, 1)

        response = await client.get("/api/v1/notifications", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert set(data["pagination"]) >= {"total", "limit", "offset", "has_more"}
        assert "metadata" in data

    @pytest.mark.asyncio
    async def test_respects_limit_parameter(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict[str, str],
    ):
        """Should respect limit parameter."""
        await _seed(db_session, user, 10)

        response = await client.get("/api/v1/notifications?limit=3", headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 3
        assert data["pagination"]["limit"] == 3
        assert data["pagination"]["total"] == 10
        assert data["pagination"]["has_more"] is True

    @pytest.mark.asyncio
    async def test_respects_offset_parameter(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict[str, str],
    ):
        """Should respect offset parameter."""
        await _seed(db_session, user, 5)

        response = await client.get(
            "/api/v1/notifications?limit=2&offset=3", headers=auth_headers
        )

        data = response.json()
        assert len(data["data"]) == 2
        assert data["pagination"]["offset"] == 3
        assert data["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_default_limit(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict[str, str],
    ):
        """Should use default limit of 20."""
        await _seed(db_session, user, 25)

        response = await client.get("/api/v1/notifications", headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 20
        assert data["pagination"]["limit"] == 20

    @pytest.mark.asyncio
    async def test_empty_results(self, client: AsyncClient, auth_headers: dict[str, str]):
        """Should handle empty results."""
        response = await client.get("/api/v1/notifications", headers=auth_headers)

        data = response.json()
        assert data["data"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["limit=150", "limit=0", "offset=-1"])
    async def test_rejects_out_of_range_parameters(
        self,
        client: AsyncClient,
        auth_headers: dict[str, str],
        api,
        query: str,
    ):
        """Should reject limit outside 1..100 and negative offset."""
        response = await client.get(f"/api/v1/notifications?{query}", headers=auth_headers)

        api.assert_validation_error(response)


class TestPaginationWithFiltering:
    """Tests for pagination combined with filtering."""

    @pytest.mark.asyncio
    async def test_unread_only_filters_total(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        auth_headers: dict[str, str],
    ):
        """Should count only unread notifications when unread_only=true."""
        await _seed(db_session, user, 3)
        await _seed(db_session, user, 2, is_read=True)

        response = await client.get(
            "/api/v1/notifications?unread_only=true", headers=auth_headers
        )

        data = response.json()
        assert len(data["data"]) == 3
        assert data["pagination"]["total"] == 3

    @pytest.mark.asyncio
    async def test_other_users_rows_not_counted(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        user: User,
        other_user: User,
        auth_headers: dict[str, str],
    ):
        """Should page over the caller's rows only."""
        await _seed(db_session, user, 2)
        await _seed(db_session, other_user, 4)

        response = await client.get("/api/v1/notifications", headers=auth_headers)

        assert response.json()["pagination"]["total"] == 2
