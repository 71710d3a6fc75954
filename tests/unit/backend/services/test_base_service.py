"""
Unit Tests for Base Service.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from modules.backend.core.exceptions import ConflictError, DatabaseError
from modules.backend.services.base import BaseService


async def _returns(value):
    return value


async def _raises(exc: Exception):
    raise exc


@pytest.fixture
def service() -> BaseService:
    return BaseService(AsyncMock())


class TestExecuteDbOperation:
    async def test_returns_result(self, service):
        assert await service._execute_db_operation("create_dispute", _returns("ok")) == "ok"

    @pytest.mark.parametrize(
        "message",
        [
            "UNIQUE constraint failed: users.telegram_id",
            'duplicate key value violates unique constraint "uq_users_telegram_id"',
        ],
    )
    async def test_unique_violation_becomes_conflict(self, service, message):
        error = IntegrityError("INSERT", {}, Exception(message))

        with pytest.raises(ConflictError) as exc_info:
            await service._execute_db_operation("create_user", _raises(error))

        assert exc_info.value.__cause__ is error

    async def test_other_integrity_error_becomes_database_error(self, service):
        error = IntegrityError("INSERT", {}, Exception("FOREIGN KEY constraint failed"))

        with pytest.raises(DatabaseError, match="create_timeline_event"):
            await service._execute_db_operation("create_timeline_event", _raises(error))

    async def test_operational_error_becomes_database_error(self, service):
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        with pytest.raises(DatabaseError, match="list_disputes"):
            await service._execute_db_operation("list_disputes", _raises(error))

    async def test_application_errors_pass_through(self, service):
        with pytest.raises(ValueError):
            await service._execute_db_operation("noop", _raises(ValueError("bad")))


class TestLogging:
    def test_log_operation_tags_service(self, service):
        with patch.object(service._logger, "info") as info:
            service._log_operation("Dispute created", dispute_id="d-1")

        info.assert_called_once_with(
            "Dispute created",
            extra={"service": "BaseService", "dispute_id": "d-1"},
        )

    def test_log_debug_uses_subclass_name(self):
        class TaxService(BaseService):
            pass

        service = TaxService(AsyncMock())
        with patch.object(service._logger, "debug") as debug:
            service._log_debug("Rate found", region="Москва")

        debug.assert_called_once_with(
            "Rate found",
            extra={"service": "TaxService", "region": "Москва"},
        )


def test_session_property():
    session = AsyncMock()
    assert BaseService(session).session is session
