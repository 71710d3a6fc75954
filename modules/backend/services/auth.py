"""
Auth Service.

Exchanges validated Telegram WebApp init data for an API access token,
registering the user on first sign-in.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config, get_settings
from modules.backend.core.exceptions import AuthenticationError, AuthorizationError
from modules.backend.core.security import create_access_token, validate_telegram_init_data
from modules.backend.core.utils import utc_now
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.user import AuthResponse, UserResponse
from modules.backend.services.base import BaseService
from modules.backend.services.notification import NotificationService
from modules.backend.services.usage_limits import get_plan


class AuthService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    async def authenticate_telegram(self, init_data: str) -> AuthResponse:
        """
        Validate init data, upsert the user and issue a JWT.

        Raises:
            AuthenticationError: If the init data is invalid or has no user
            AuthorizationError: If the account is deactivated
        """
        fields = validate_telegram_init_data(init_data, get_settings().telegram_bot_token)
        tg_user = fields.get("user")
        if not isinstance(tg_user, dict) or "id" not in tg_user:
            raise AuthenticationError("Telegram init data has no user")

        user, is_new = await self.upsert_telegram_user(tg_user)
        if not user.is_active:
            raise AuthorizationError("Account is deactivated")

        token = create_access_token({"sub": user.id, "tg": user.telegram_id})
        expires_in = get_app_config().security.jwt.access_token_expire_minutes * 60

        self._log_operation("User signed in", user_id=user.id, is_new=is_new)
        return AuthResponse(
            access_token=token,
            expires_in=expires_in,
            is_new_user=is_new,
            user=UserResponse.model_validate(user),
        )

    async def upsert_telegram_user(self, tg_user: dict[str, Any]) -> tuple[User, bool]:
        """
        Create or refresh a user from a Telegram user object.

        Shared by the Mini App sign-in and the bot's auth middleware.
        """
        profile = {
            "username": tg_user.get("username"),
            "first_name": tg_user.get("first_name"),
            "last_name": tg_user.get("last_name"),
            "language_code": tg_user.get("language_code"),
            "is_premium": bool(tg_user.get("is_premium", False)),
            "last_login_at": utc_now(),
        }

        user = await self.users.get_by_telegram_id(int(tg_user["id"]))
        if user is not None:
            user = await self._execute_db_operation(
                "update_user", self.users.update_instance(user, **profile)
            )
            return user, False

        user = await self._execute_db_operation(
            "create_user",
            self.users.create(
                telegram_id=int(tg_user["id"]),
                subscription_plan=get_app_config().plans.default_plan,
                **profile,
            ),
        )
        await NotificationService(self.session).notify(
            user,
            "user_registration",
            {"user_name": user.display_name, "plan_name": get_plan(user.subscription_plan).name},
            push=False,
        )
        self._log_operation("User registered", user_id=user.id, telegram_id=user.telegram_id)
        return user, True
