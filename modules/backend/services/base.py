"""
Base Service.

Services orchestrate repositories and implement business rules. They
never commit; the request-scoped session commits when the handler
returns and rolls back on any exception.

Usage:
    class DisputeService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = DisputeRepository(session)

        async def create_dispute(self, user: User, data: DisputeCreate) -> Dispute:
            return await self._execute_db_operation(
                "create_dispute",
                self.repo.create(user_id=user.id, **data.model_dump()),
            )
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, DatabaseError
from modules.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """Base class for all services: session, logging and DB error mapping."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, converting SQLAlchemy failures.

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists") from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
