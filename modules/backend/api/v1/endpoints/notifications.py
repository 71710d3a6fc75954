"""
Notification API Endpoints.

In-app notifications of the signed-in user.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    NotificationStats,
    NotificationTemplateResponse,
)
from modules.backend.services.notification import NotificationService

router = APIRouter()


@router.get(
    "",
    summary="List notifications (paginated)",
)
async def list_notifications(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    unread_only: bool = Query(default=False),
) -> dict[str, Any]:
    items, total = await NotificationService(db).list_notifications(
        user, unread_only=unread_only, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=NotificationResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/stats",
    response_model=ApiResponse[NotificationStats],
    summary="Notification counters",
)
async def get_notification_stats(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NotificationStats]:
    return ApiResponse(data=await NotificationService(db).get_stats(user))


@router.get(
    "/templates",
    response_model=ApiResponse[list[NotificationTemplateResponse]],
    summary="Notification templates",
)
async def list_notification_templates(
    request_id: RequestId,
) -> ApiResponse[list[NotificationTemplateResponse]]:
    return ApiResponse(data=NotificationService.list_templates())


@router.post(
    "/read-all",
    response_model=ApiResponse[MarkAllReadResponse],
    summary="Mark all as read",
)
async def mark_all_read(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[MarkAllReadResponse]:
    updated = await NotificationService(db).mark_all_read(user)
    return ApiResponse(data=MarkAllReadResponse(updated=updated))


@router.post(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationResponse],
    summary="Mark as read",
)
async def mark_read(
    notification_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NotificationResponse]:
    notification = await NotificationService(db).mark_read(user, notification_id)
    return ApiResponse(data=NotificationResponse.model_validate(notification))
