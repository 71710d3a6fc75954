"""
Dashboard API Endpoints.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.dashboard import DashboardStats
from modules.backend.services.dashboard import DashboardService

router = APIRouter()


@router.get(
    "/stats",
    response_model=ApiResponse[DashboardStats],
    summary="Dashboard statistics",
    description="Counters, plan usage and the ten most recent items.",
)
async def get_dashboard_stats(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DashboardStats]:
    return ApiResponse(data=await DashboardService(db).get_stats(user))
