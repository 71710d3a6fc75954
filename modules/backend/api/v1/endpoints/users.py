"""
User API Endpoints.

Profile, plan usage and account deletion for the signed-in user.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.user import UsageLimitsResponse, UserResponse, UserUpdate
from modules.backend.services.user import UserService

router = APIRouter()


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Current user",
)
async def get_me(user: CurrentUser, request_id: RequestId) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(user))


@router.patch(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Update profile",
    description="Update name, phone or email. Only provided fields change.",
)
async def update_me(
    data: UserUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    user = await UserService(db).update_profile(user, data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.get(
    "/me/limits",
    response_model=ApiResponse[UsageLimitsResponse],
    summary="Plan limits and usage",
    description="Monthly quotas of the current plan and how much is used.",
)
async def get_my_limits(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UsageLimitsResponse]:
    return ApiResponse(data=await UserService(db).get_limits(user))


@router.delete(
    "/me",
    status_code=204,
    summary="Delete account",
    description="Delete the user with all consultations, documents and disputes.",
)
async def delete_me(user: CurrentUser, db: DbSession, request_id: RequestId) -> None:
    await UserService(db).delete_account(user)
