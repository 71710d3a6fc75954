"""
Base Repository.

Base class for all repositories with common CRUD operations.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.logging import get_logger
from modules.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses set the model class:

        class DisputeRepository(UserOwnedRepository[Dispute]):
            model = Dispute
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _label(self) -> str:
        return self.model.__name__

    async def get_by_id(self, id: str | UUID) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self._label} not found")
        return instance

    async def get_by_id_or_none(self, id: str | UUID) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update_instance(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Apply attribute changes to a loaded record and flush."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance


class UserOwnedRepository(BaseRepository[ModelType]):
    """
    Repository for rows carrying a user_id.

    Lookups scoped to a user raise NotFoundError for rows owned by
    someone else, so callers never learn that another user's id exists.
    """

    def _owned(self, user_id: str) -> Select:
        return select(self.model).where(self.model.user_id == user_id)

    async def get_owned(self, id: str, user_id: str) -> ModelType:
        """
        Get a record by ID that belongs to the user.

        Raises:
            NotFoundError: If missing or owned by another user
        """
        result = await self.session.execute(
            self._owned(user_id).where(self.model.id == str(id))
        )
        instance = result.scalar_one_or_none()
        if instance is None:
            raise NotFoundError(f"{self._label} not found")
        return instance

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 50,
        offset: int = 0,
        filters: dict[str, Any] | None = None,
    ) -> list[ModelType]:
        """List the user's records newest first, with equality filters."""
        query = self._apply_filters(self._owned(user_id), filters)
        result = await self.session.execute(
            query.order_by(self.model.created_at.desc()).limit(limit).offset(offset)
        )
        return list(result.scalars().all())

    async def count_for_user(
        self,
        user_id: str,
        since: datetime | None = None,
        filters: dict[str, Any] | None = None,
    ) -> int:
        """Count the user's records, optionally created on or after ``since``."""
        query = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.user_id == user_id)
        )
        if since is not None:
            query = query.where(self.model.created_at >= since)
        query = self._apply_filters(query, filters)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_by_field(self, user_id: str, field: str) -> dict[str, int]:
        """Group the user's records by a column and count each value."""
        column = getattr(self.model, field)
        result = await self.session.execute(
            select(column, func.count())
            .where(self.model.user_id == user_id)
            .group_by(column)
        )
        return {value: count for value, count in result.all()}

    async def recent_for_user(self, user_id: str, limit: int = 10) -> list[ModelType]:
        return await self.list_for_user(user_id, limit=limit)

    def _apply_filters(self, query: Select, filters: dict[str, Any] | None) -> Select:
        for name, value in (filters or {}).items():
            if value is None:
                continue
            query = query.where(getattr(self.model, name) == value)
        return query
