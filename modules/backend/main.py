"""
FastAPI Application Entry Point.

This is the main entry point for the LawerApp backend.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from modules.backend.api import health
from modules.backend.api.v1 import router as api_v1_router
from modules.backend.core.config import AppConfig, get_app_config
from modules.backend.core.database import dispose_engine
from modules.backend.core.exception_handlers import register_exception_handlers
from modules.backend.core.logging import get_logger, setup_logging
from modules.backend.core.middleware import RequestContextMiddleware
from modules.backend.core.security import check_secrets
from modules.backend.services.alert import run_alert_checks

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)
    check_secrets()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )

    alert_task: asyncio.Task | None = None
    if app_config.features.alerts_enabled:
        interval = app_config.alerts.check_interval_minutes * 60
        alert_task = asyncio.create_task(run_alert_checks(interval), name="alert-checks")

    yield
    logger.info("Application shutting down")

    if alert_task is not None:
        alert_task.cancel()
        with suppress(asyncio.CancelledError):
            await alert_task
    if app_config.features.channel_telegram_enabled:
        from modules.telegram.bot import close_bot

        await close_bot()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    _mount_telegram(app, app_config)

    return app


def _mount_telegram(app: FastAPI, app_config: AppConfig) -> None:
    """Mount the Telegram webhook route when the channel is enabled."""
    if not app_config.features.channel_telegram_enabled:
        return

    from modules.telegram.bot import get_bot, get_dispatcher
    from modules.telegram.webhook import get_webhook_router

    try:
        app.include_router(get_webhook_router(get_bot(), get_dispatcher()))
    except Exception as e:
        logger.error("Failed to mount Telegram channel", extra={"error": str(e)})
        raise
    logger.info(
        "Telegram webhook mounted",
        extra={"path": app_config.application.telegram.webhook_path},
    )


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn modules.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
