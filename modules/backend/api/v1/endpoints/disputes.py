"""
Dispute API Endpoints.

Case tracking with status transitions and a timeline.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.models.dispute import DisputePriority, DisputeStatus, DisputeType
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.dispute import (
    DisputeCreate,
    DisputeDetailResponse,
    DisputeResponse,
    DisputeStatsResponse,
    DisputeStatusUpdate,
    DisputeUpdate,
    TimelineCommentCreate,
    TimelineEventResponse,
)
from modules.backend.services.dispute import DisputeService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[DisputeResponse],
    status_code=201,
    summary="Open a dispute",
    description="Create a dispute and its first timeline event.",
)
async def create_dispute(
    data: DisputeCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DisputeResponse]:
    dispute = await DisputeService(db).create_dispute(user, data)
    return ApiResponse(data=DisputeResponse.model_validate(dispute))


@router.get(
    "",
    summary="List disputes (paginated)",
    description="Filtered disputes; `summary.by_status` holds counts over all of the user's disputes.",
)
async def list_disputes(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    status: DisputeStatus | None = Query(default=None),
    dispute_type: DisputeType | None = Query(default=None, alias="type"),
    priority: DisputePriority | None = Query(default=None),
    q: str | None = Query(default=None, min_length=1, max_length=100, description="Title search"),
) -> dict[str, Any]:
    items, total, counts = await DisputeService(db).list_disputes(
        user,
        status=status,
        dispute_type=dispute_type.value if dispute_type else None,
        priority=priority.value if priority else None,
        search=q,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=items,
        item_schema=DisputeResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
        summary={"by_status": counts},
    )


@router.get(
    "/stats",
    response_model=ApiResponse[DisputeStatsResponse],
    summary="Dispute statistics",
)
async def get_dispute_stats(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DisputeStatsResponse]:
    return ApiResponse(data=await DisputeService(db).get_stats(user))


@router.get(
    "/deadlines",
    response_model=ApiResponse[list[DisputeResponse]],
    summary="Upcoming deadlines",
    description="Open disputes whose deadline falls within the next `days` days.",
)
async def get_upcoming_deadlines(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    days: int = Query(default=7, ge=1, le=365),
) -> ApiResponse[list[DisputeResponse]]:
    disputes = await DisputeService(db).upcoming_deadlines(user, days=days)
    return ApiResponse(data=[DisputeResponse.model_validate(d) for d in disputes])


@router.get(
    "/{dispute_id}",
    response_model=ApiResponse[DisputeDetailResponse],
    summary="Get a dispute",
    description="Dispute with its timeline and linked document ids.",
)
async def get_dispute(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DisputeDetailResponse]:
    return ApiResponse(data=await DisputeService(db).get_dispute_detail(user, dispute_id))


@router.patch(
    "/{dispute_id}",
    response_model=ApiResponse[DisputeResponse],
    summary="Update a dispute",
    description="Only provided fields are updated.",
)
async def update_dispute(
    dispute_id: str,
    data: DisputeUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DisputeResponse]:
    dispute = await DisputeService(db).update_dispute(user, dispute_id, data)
    return ApiResponse(data=DisputeResponse.model_validate(dispute))


@router.post(
    "/{dispute_id}/status",
    response_model=ApiResponse[DisputeResponse],
    summary="Change dispute status",
    description="Illegal transitions return 400 with the allowed targets in error.details.",
)
async def change_dispute_status(
    dispute_id: str,
    data: DisputeStatusUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DisputeResponse]:
    dispute = await DisputeService(db).change_status(user, dispute_id, data)
    return ApiResponse(data=DisputeResponse.model_validate(dispute))


@router.get(
    "/{dispute_id}/timeline",
    response_model=ApiResponse[list[TimelineEventResponse]],
    summary="Dispute timeline",
)
async def get_timeline(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[TimelineEventResponse]]:
    events = await DisputeService(db).get_timeline(user, dispute_id)
    return ApiResponse(data=[TimelineEventResponse.model_validate(e) for e in events])


@router.post(
    "/{dispute_id}/timeline",
    response_model=ApiResponse[TimelineEventResponse],
    status_code=201,
    summary="Add a comment",
)
async def add_timeline_comment(
    dispute_id: str,
    data: TimelineCommentCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TimelineEventResponse]:
    event = await DisputeService(db).add_comment(user, dispute_id, data)
    return ApiResponse(data=TimelineEventResponse.model_validate(event))


@router.delete(
    "/{dispute_id}",
    status_code=204,
    summary="Delete a dispute",
    description="Deletes the dispute and its timeline; linked documents are kept.",
)
async def delete_dispute(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await DisputeService(db).delete_dispute(user, dispute_id)
