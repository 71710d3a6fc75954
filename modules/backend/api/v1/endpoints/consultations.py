"""
Consultation API Endpoints.

AI legal consultations.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.models.consultation import LegalCategory
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.consultation import (
    CategoryResponse,
    ConsultationCreate,
    ConsultationListItem,
    ConsultationRating,
    ConsultationResponse,
)
from modules.backend.services.consultation import ConsultationService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ConsultationResponse],
    status_code=201,
    summary="Ask a legal question",
    description=(
        "Send the question to the AI assistant and store the answer. "
        "Returns 429 when the monthly quota is used up and 503 when the "
        "AI service is unavailable."
    ),
)
async def create_consultation(
    data: ConsultationCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ConsultationResponse]:
    consultation = await ConsultationService(db).create_consultation(user, data)
    return ApiResponse(data=ConsultationResponse.model_validate(consultation))


@router.get(
    "",
    summary="List consultations (paginated)",
    description="The user's consultations, newest first.",
)
async def list_consultations(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    category: LegalCategory | None = Query(default=None, description="Filter by area of law"),
) -> dict[str, Any]:
    items, total = await ConsultationService(db).list_consultations(
        user, category=category, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=ConsultationListItem,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/categories",
    response_model=ApiResponse[list[CategoryResponse]],
    summary="Areas of law",
)
async def list_categories(request_id: RequestId) -> ApiResponse[list[CategoryResponse]]:
    return ApiResponse(data=ConsultationService.list_categories())


@router.get(
    "/{consultation_id}",
    response_model=ApiResponse[ConsultationResponse],
    summary="Get a consultation",
)
async def get_consultation(
    consultation_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ConsultationResponse]:
    consultation = await ConsultationService(db).get_consultation(user, consultation_id)
    return ApiResponse(data=ConsultationResponse.model_validate(consultation))


@router.post(
    "/{consultation_id}/rating",
    response_model=ApiResponse[ConsultationResponse],
    summary="Rate an answer",
    description="Rate the AI answer from 1 to 5.",
)
async def rate_consultation(
    consultation_id: str,
    data: ConsultationRating,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ConsultationResponse]:
    consultation = await ConsultationService(db).rate_consultation(
        user, consultation_id, data.rating
    )
    return ApiResponse(data=ConsultationResponse.model_validate(consultation))


@router.delete(
    "/{consultation_id}",
    status_code=204,
    summary="Delete a consultation",
)
async def delete_consultation(
    consultation_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await ConsultationService(db).delete_consultation(user, consultation_id)
