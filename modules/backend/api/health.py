"""
Health Check Endpoints.

Provides liveness, readiness, and detailed health checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database and Redis reachable)
- /health/detailed: Component status plus alert-based system health
"""

import asyncio
import time
from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from modules.backend.core.config import get_app_config, get_redis_url
from modules.backend.core.database import check_database
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def database_status() -> dict[str, Any]:
    """Run ``SELECT 1`` and report status with latency."""
    start = time.perf_counter()
    try:
        await check_database()
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "latency_ms": int((time.perf_counter() - start) * 1000)}


async def redis_status() -> dict[str, Any]:
    """PING Redis and report status with latency."""
    import redis.asyncio as redis

    start = time.perf_counter()
    client = redis.from_url(get_redis_url())
    try:
        await client.ping()
    except Exception as e:
        logger.warning("Redis health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}
    finally:
        await client.aclose()
    return {"status": "healthy", "latency_ms": int((time.perf_counter() - start) * 1000)}


async def run_checks(timeout: float | None = None) -> dict[str, dict[str, Any]]:
    """Check dependencies concurrently. A check that times out counts as unhealthy."""
    if timeout is None:
        timeout = get_app_config().observability.health_checks.ready_timeout_seconds

    checks: dict[str, dict[str, Any]] = {
        "database": {"status": "unhealthy", "error": "check did not run"},
        "redis": {"status": "unhealthy", "error": "check did not run"},
    }
    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as tg:
                db_task = tg.create_task(database_status())
                redis_task = tg.create_task(redis_status())
        checks["database"] = db_task.result()
        checks["redis"] = redis_task.result()
    except TimeoutError:
        logger.warning("Health checks timed out", extra={"timeout": timeout})
        for name, task in (("database", db_task), ("redis", redis_task)):
            if task.done() and not task.cancelled():
                checks[name] = task.result()
            else:
                checks[name] = {"status": "unhealthy", "error": "timeout"}
    return checks


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running. No dependency checks.
    """
    return {"status": "healthy"}


@router.get("/health/ready", response_model=None)
async def readiness_check() -> dict[str, Any] | JSONResponse:
    """
    Readiness check.

    Returns 503 if the database or Redis is unreachable.
    """
    checks = await run_checks()
    unhealthy = [name for name, check in checks.items() if check["status"] != "healthy"]
    body = {
        "status": "unhealthy" if unhealthy else "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
    if unhealthy:
        logger.warning("Readiness check failed", extra={"unhealthy": unhealthy})
        return JSONResponse(status_code=503, content=body)
    return body


@router.get("/health/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """Dependency checks, application info and system health from active alerts."""
    from modules.backend.services.alert import get_alert_service

    checks = await run_checks()
    app_settings = get_app_config().application
    system = get_alert_service().system_health()

    if any(check["status"] != "healthy" for check in checks.values()):
        overall = "unhealthy"
    else:
        overall = "healthy" if system.status == "healthy" else "degraded"

    return {
        "status": overall,
        "application": {
            "name": app_settings.name,
            "env": app_settings.environment,
            "debug": app_settings.debug,
            "version": app_settings.version,
        },
        "checks": checks,
        "system": system.model_dump(),
        "timestamp": utc_now().isoformat(),
    }
