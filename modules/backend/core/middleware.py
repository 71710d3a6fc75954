"""
Request Context Middleware.

Request tracking, timing, frontend identification and context propagation.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.config import get_app_config
from modules.backend.core.logging import get_logger
from modules.backend.core.metrics import get_metrics_collector

logger = get_logger(__name__)

# Values accepted in X-Frontend-ID. The Mini App sends "miniapp".
KNOWN_FRONTENDS = {"miniapp", "web", "cli", "telegram", "api", "internal"}

# Paths excluded from request metrics
_UNTRACKED_PREFIXES = ("/health",)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    - Generates or propagates the request ID (X-Request-ID)
    - Reads the frontend identifier (X-Frontend-ID)
    - Returns the duration in X-Response-Time
    - Binds request_id, frontend, method and path to structlog contextvars
    - Feeds the metrics collector used by the alert checker
    - Logs each completed request when ``api_request_logging`` is on

    Handlers can read ``request.state.request_id`` and ``request.state.frontend``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
        if frontend not in KNOWN_FRONTENDS:
            frontend = "unknown"

        started = time.perf_counter()
        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        logger.debug(
            "Request started",
            extra={"client_host": request.client.host if request.client else None},
        )

        tracked = not request.url.path.startswith(_UNTRACKED_PREFIXES)
        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - started) * 1000
            if tracked:
                get_metrics_collector().record(500, duration_ms)
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": int(duration_ms), "error_type": type(exc).__name__},
            )
            raise
        finally:
            structlog.contextvars.clear_contextvars()

        duration_ms = (time.perf_counter() - started) * 1000
        if tracked:
            get_metrics_collector().record(response.status_code, duration_ms)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{int(duration_ms)}ms"

        if get_app_config().features.api_request_logging:
            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "duration_ms": int(duration_ms),
                },
            )
        return response
