"""
User Service.

Profile management for the signed-in user.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from modules.backend.core.security import decode_token
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.user import UsageLimitsResponse, UserUpdate
from modules.backend.services.base import BaseService
from modules.backend.services.usage_limits import UsageLimitService


class UserService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    async def get_user_from_token(self, token: str) -> User:
        """
        Resolve a bearer token to an active user.

        Raises:
            AuthenticationError: Invalid token
            NotFoundError: The user was deleted
            AuthorizationError: The user is deactivated
        """
        payload = decode_token(token)
        if payload.get("type") != "access" or not payload.get("sub"):
            raise AuthenticationError("Invalid access token")

        user = await self.repo.get_by_id_or_none(payload["sub"])
        if user is None:
            raise NotFoundError("User not found")
        if not user.is_active:
            raise AuthorizationError("Account is deactivated")
        return user

    async def update_profile(self, user: User, data: UserUpdate) -> User:
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return user
        self._log_operation("Updating profile", user_id=user.id, fields=list(changes))
        return await self._execute_db_operation(
            "update_profile", self.repo.update_instance(user, **changes)
        )

    async def get_limits(self, user: User) -> UsageLimitsResponse:
        return await UsageLimitService(self.session).get_usage(user)

    async def delete_account(self, user: User) -> None:
        """Delete the user. Consultations, disputes, documents and timelines go with it."""
        self._log_operation("Deleting account", user_id=user.id)
        await self.session.delete(user)
        await self._execute_db_operation("delete_user", self.session.flush())
