"""
Alert API Endpoints.

System alerts raised by the periodic checker. Any signed-in user can read
them; changing rules and resolving alerts is limited to administrators.
"""

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import AdminUser, CurrentUser, RequestId
from modules.backend.schemas.alert import (
    AlertResponse,
    AlertRuleResponse,
    AlertRuleUpdate,
    AlertStats,
    SystemHealth,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.services.alert import get_alert_service

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[AlertResponse]],
    summary="List alerts",
    description="Newest first. With `mine=true` only alerts raised for the current user.",
)
async def list_alerts(
    user: CurrentUser,
    request_id: RequestId,
    mine: bool = Query(default=False),
    limit: int = Query(default=50, ge=1, le=1000),
) -> ApiResponse[list[AlertResponse]]:
    alerts = get_alert_service().list_alerts(user_id=user.id if mine else None, limit=limit)
    return ApiResponse(data=[AlertResponse.model_validate(a) for a in alerts])


@router.get(
    "/active",
    response_model=ApiResponse[list[AlertResponse]],
    summary="Unresolved alerts",
)
async def list_active_alerts(
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[list[AlertResponse]]:
    alerts = get_alert_service().active_alerts()
    return ApiResponse(data=[AlertResponse.model_validate(a) for a in alerts])


@router.get(
    "/stats",
    response_model=ApiResponse[AlertStats],
    summary="Alert counters",
)
async def get_alert_stats(user: CurrentUser, request_id: RequestId) -> ApiResponse[AlertStats]:
    return ApiResponse(data=get_alert_service().get_stats())


@router.get(
    "/health",
    response_model=ApiResponse[SystemHealth],
    summary="System health from alerts",
)
async def get_system_health(user: CurrentUser, request_id: RequestId) -> ApiResponse[SystemHealth]:
    return ApiResponse(data=get_alert_service().system_health())


@router.get(
    "/rules",
    response_model=ApiResponse[list[AlertRuleResponse]],
    summary="Alert rules",
)
async def list_alert_rules(
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[list[AlertRuleResponse]]:
    rules = get_alert_service().list_rules()
    return ApiResponse(data=[AlertRuleResponse.model_validate(r) for r in rules])


@router.patch(
    "/rules/{name}",
    response_model=ApiResponse[AlertRuleResponse],
    summary="Update an alert rule",
)
async def update_alert_rule(
    name: str,
    data: AlertRuleUpdate,
    user: AdminUser,
    request_id: RequestId,
) -> ApiResponse[AlertRuleResponse]:
    rule = get_alert_service().update_rule(name, data)
    return ApiResponse(data=AlertRuleResponse.model_validate(rule))


@router.post(
    "/{alert_id}/resolve",
    response_model=ApiResponse[AlertResponse],
    summary="Resolve an alert",
)
async def resolve_alert(
    alert_id: str,
    user: AdminUser,
    request_id: RequestId,
) -> ApiResponse[AlertResponse]:
    alert = get_alert_service().resolve(alert_id)
    return ApiResponse(data=AlertResponse.model_validate(alert))
