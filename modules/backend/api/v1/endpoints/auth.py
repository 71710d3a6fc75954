"""
Auth API Endpoints.

Sign-in for the Telegram Mini App.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import DbSession, RequestId
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.user import AuthResponse, TelegramAuthRequest
from modules.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/telegram",
    response_model=ApiResponse[AuthResponse],
    summary="Sign in with Telegram",
    description=(
        "Validate Telegram WebApp initData, register the user on first "
        "sign-in and return a bearer access token."
    ),
)
async def telegram_auth(
    data: TelegramAuthRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AuthResponse]:
    service = AuthService(db)
    return ApiResponse(data=await service.authenticate_telegram(data.init_data))
