"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import AuthenticationError, AuthorizationError
from modules.backend.core.logging import get_logger
from modules.backend.core.pagination import PaginationParams, get_pagination_params
from modules.backend.models.user import User

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]

Pagination = Annotated[PaginationParams, Depends(get_pagination_params)]

bearer_scheme = HTTPBearer(auto_error=False, description="JWT from POST /auth/telegram")


async def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the bearer token to a user.

    Raises:
        AuthenticationError: Missing or invalid token (401)
        NotFoundError: Token is valid but the user no longer exists (404)
    """
    from modules.backend.services.user import UserService

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Authorization header with a Bearer token is required")
    return await UserService(db).get_user_from_token(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUser) -> User:
    """
    Allow only administrators listed in application.telegram.authorized_users.

    Raises:
        AuthorizationError: The user is signed in but not an administrator (403)
    """
    if user.telegram_id not in get_app_config().application.telegram.authorized_users:
        logger.warning("Admin endpoint refused", extra={"user_id": user.id})
        raise AuthorizationError("Administrator access required")
    return user


AdminUser = Annotated[User, Depends(require_admin)]
