"""
Exception Handlers.

Every failure leaves the API in the same envelope:

    {"success": false, "data": null, "error": {"code", "message", "details"},
     "metadata": {"timestamp", "request_id"}}

Domain errors map to a status through ``EXCEPTION_STATUS_MAP``; quota and
validation errors carry their ``details`` through to the client. Unhandled
exceptions only expose their type and message when the
``api_detailed_errors`` feature flag is on.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modules.backend.core.config import get_app_config
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
from modules.backend.core.logging import get_logger
from modules.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    ConflictError: 409,
    RateLimitError: 429,
    UsageLimitError: 429,
    ExternalServiceError: 502,
    AIServiceError: 503,
    DatabaseError: 503,
}


def status_for(exc: ApplicationError) -> int:
    """Resolve the HTTP status, walking the MRO so subclasses inherit a mapping."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return 500


def _request_id(request: Request) -> str | None:
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id")


def _envelope(status_code: int, error: ErrorDetail, request_id: str | None) -> JSONResponse:
    body = ErrorResponse(error=error, metadata=ResponseMetadata(request_id=request_id))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = status_for(exc)
    request_id = _request_id(request)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request failed",
        extra={
            "code": exc.code,
            "error": exc.message,
            "status": status_code,
            "path": request.url.path,
            "method": request.method,
            "request_id": request_id,
        },
    )

    error = ErrorDetail(code=exc.code, message=exc.message)
    details = getattr(exc, "details", None)
    if details:
        error.details = details
    return _envelope(status_code, error, request_id)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query strings become 400 VAL_REQUEST_INVALID."""
    request_id = _request_id(request)
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", "Validation error"),
            "type": err.get("type", "unknown"),
        }
        for err in exc.errors()
    ]

    logger.warning(
        "Request validation failed",
        extra={
            "path": request.url.path,
            "method": request.method,
            "fields": [e["field"] for e in errors],
            "request_id": request_id,
        },
    )

    error = ErrorDetail(
        code="VAL_REQUEST_INVALID",
        message="Request validation failed",
        details={"validation_errors": errors},
    )
    return _envelope(400, error, request_id)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.exception(
        "Unhandled exception",
        extra={
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "request_id": request_id,
        },
    )
    error = ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred")
    if get_app_config().features.api_detailed_errors:
        error.details = {"exception_type": type(exc).__name__, "exception": str(exc)}
    return _envelope(500, error, request_id)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
