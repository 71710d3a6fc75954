"""
Database Configuration.

SQLAlchemy async engine and session management.
Uses lazy initialization to prevent import-time failures when .env is not configured.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine for PostgreSQL or SQLite."""
    from modules.backend.core.config import get_app_config, get_database_url

    url = get_database_url()
    db_config = get_app_config().database

    kwargs: dict[str, Any] = {"echo": db_config.echo}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_recycle=db_config.pool_recycle,
            pool_pre_ping=True,
            echo_pool=db_config.echo_pool,
        )

    engine = create_async_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(engine)
    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory, creating it on first use."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    The session commits when the request handler returns and rolls back
    if it raises, so multi-row writes in one request are atomic.
    """
    session_factory = get_session_factory()
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def check_database() -> None:
    """Run a trivial query. Raises if the database is unreachable."""
    async with get_engine().connect() as conn:
        await conn.execute(text("SELECT 1"))


async def create_tables() -> None:
    """Create all tables from model metadata (local development and scripts)."""
    from modules.backend.models import Base

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created", extra={"tables": len(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Close pooled connections. Called on application shutdown."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
