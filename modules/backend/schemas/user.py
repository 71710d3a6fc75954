"""
User and Auth Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TelegramAuthRequest(BaseModel):
    """Raw ``Telegram.WebApp.initData`` string sent by the Mini App."""

    init_data: str = Field(
        ...,
        min_length=1,
        description="Signed init data query string",
        examples=["query_id=AAH...&user=%7B%22id%22%3A1%7D&auth_date=1700000000&hash=..."],
    )


class UserResponse(BaseModel):
    id: str
    telegram_id: int
    username: str | None
    first_name: str | None
    last_name: str | None
    language_code: str | None
    phone: str | None
    email: str | None
    is_premium: bool
    subscription_plan: str
    subscription_expires_at: datetime | None
    created_at: datetime
    last_login_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    is_new_user: bool
    user: UserResponse


class UserUpdate(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(
        default=None,
        pattern=r"^[\+]?[0-9\s\-\(\)]{10,}$",
        description="Phone number",
    )
    email: str | None = Field(
        default=None,
        max_length=255,
        pattern=r"^[^\s@]+@[^\s@]+\.[^\s@]+$",
    )


class UsageItem(BaseModel):
    used: int
    limit: int = Field(description="-1 means unlimited")
    remaining: int | None = Field(description="None when unlimited")


class UsageLimitsResponse(BaseModel):
    plan: str
    plan_name: str
    period_start: datetime
    consultations: UsageItem
    documents: UsageItem
    disputes: UsageItem
