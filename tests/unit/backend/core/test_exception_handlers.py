"""
Unit Tests for Exception Handlers.

Handlers are called directly with a bare Starlette request.
"""

import json

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError

from modules.backend.core.config import get_app_config
from modules.backend.core.exception_handlers import (
    application_error_handler,
    status_for,
    unhandled_exception_handler,
    validation_error_handler,
)
from modules.backend.core.exceptions import (
    AIServiceError,
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    UsageLimitError,
    ValidationError,
)


def make_request(path: str = "/api/v1/disputes", headers: dict[str, str] | None = None) -> Request:
    raw_headers = [
        (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
    ]
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "headers": raw_headers,
            "query_string": b"",
        }
    )


def body(response) -> dict:
    return json.loads(response.body)


class TestStatusFor:
    @pytest.mark.parametrize(
        "exc,status",
        [
            (NotFoundError(), 404),
            (ValidationError(), 400),
            (AuthenticationError(), 401),
            (AuthorizationError(), 403),
            (ConflictError(), 409),
            (RateLimitError(), 429),
            (UsageLimitError(), 429),
            (ExternalServiceError(), 502),
            (AIServiceError(), 503),
            (DatabaseError(), 503),
        ],
    )
    def test_mapped_errors(self, exc, status):
        assert status_for(exc) == status

    def test_unmapped_error_is_500(self):
        assert status_for(ApplicationError("boom")) == 500

    def test_subclass_inherits_parent_status(self):
        class DocumentMissing(NotFoundError):
            pass

        assert status_for(DocumentMissing()) == 404


class TestApplicationErrorHandler:
    async def test_not_found_envelope(self):
        response = await application_error_handler(
            make_request(), NotFoundError("Dispute not found")
        )

        assert response.status_code == 404
        data = body(response)
        assert data["success"] is False
        assert data["data"] is None
        assert data["error"] == {
            "code": "RES_NOT_FOUND",
            "message": "Dispute not found",
            "details": None,
        }
        assert "timestamp" in data["metadata"]

    async def test_usage_limit_details_passed_through(self):
        exc = UsageLimitError(
            "Monthly dispute limit reached",
            details={"resource": "disputes", "limit": 1, "used": 1, "plan": "free"},
        )

        response = await application_error_handler(make_request(), exc)

        assert response.status_code == 429
        error = body(response)["error"]
        assert error["code"] == "LIMIT_EXCEEDED"
        assert error["details"] == {"resource": "disputes", "limit": 1, "used": 1, "plan": "free"}

    async def test_validation_details_passed_through(self):
        exc = ValidationError(
            "Invalid status transition",
            details={"current_status": "cancelled", "requested_status": "active", "allowed": []},
        )

        response = await application_error_handler(make_request(), exc)

        assert response.status_code == 400
        assert body(response)["error"]["details"]["allowed"] == []

    async def test_ai_unavailable(self):
        response = await application_error_handler(make_request(), AIServiceError())

        assert response.status_code == 503
        assert body(response)["error"]["code"] == "SYS_AI_UNAVAILABLE"

    async def test_request_id_from_header(self):
        request = make_request(headers={"X-Request-ID": "req-42"})

        response = await application_error_handler(request, NotFoundError())

        assert body(response)["metadata"]["request_id"] == "req-42"

    async def test_request_id_from_state_wins(self):
        request = make_request(headers={"X-Request-ID": "from-header"})
        request.state.request_id = "from-state"

        response = await application_error_handler(request, NotFoundError())

        assert body(response)["metadata"]["request_id"] == "from-state"


class TestValidationErrorHandler:
    async def test_returns_400_with_field_list(self):
        exc = RequestValidationError(
            [
                {"loc": ("body", "title"), "msg": "Field required", "type": "missing"},
                {"loc": ("query", "limit"), "msg": "Input should be less than 101", "type": "less_than"},
            ]
        )

        response = await validation_error_handler(make_request(), exc)

        assert response.status_code == 400
        error = body(response)["error"]
        assert error["code"] == "VAL_REQUEST_INVALID"
        assert error["details"]["validation_errors"] == [
            {"field": "body.title", "message": "Field required", "type": "missing"},
            {"field": "query.limit", "message": "Input should be less than 101", "type": "less_than"},
        ]

    async def test_missing_keys_get_defaults(self):
        response = await validation_error_handler(make_request(), RequestValidationError([{}]))

        assert body(response)["error"]["details"]["validation_errors"] == [
            {"field": "", "message": "Validation error", "type": "unknown"}
        ]


class TestUnhandledExceptionHandler:
    async def test_hides_internal_message(self):
        response = await unhandled_exception_handler(
            make_request(), RuntimeError("password=hunter2")
        )

        assert response.status_code == 500
        error = body(response)["error"]
        assert error["code"] == "SYS_INTERNAL_ERROR"
        assert "hunter2" not in error["message"]
        assert error["details"] is None

    async def test_detailed_errors_flag_exposes_exception(self, monkeypatch):
        config = get_app_config()
        monkeypatch.setattr(
            config, "_features", config.features.model_copy(update={"api_detailed_errors": True})
        )

        response = await unhandled_exception_handler(make_request(), KeyError("dispute_id"))

        assert body(response)["error"]["details"] == {
            "exception_type": "KeyError",
            "exception": "'dispute_id'",
        }
