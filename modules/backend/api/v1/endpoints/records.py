"""
RAG and Payment Record Endpoints.

Read-only listings of stored RAG consultations, processed uploads and
payments.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.models.payment import PaymentStatus
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.rag import (
    PaymentResponse,
    ProcessedDocumentResponse,
    RAGConsultationResponse,
    RAGStats,
)
from modules.backend.services.records import PaymentService, RAGService

rag_router = APIRouter()
payments_router = APIRouter()


@rag_router.get("/consultations", summary="RAG consultations (paginated)")
async def list_rag_consultations(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
) -> dict[str, Any]:
    items, total = await RAGService(db).list_consultations(
        user, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=RAGConsultationResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@rag_router.get("/documents", summary="Processed documents (paginated)")
async def list_processed_documents(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    status: str | None = Query(default=None, max_length=20),
) -> dict[str, Any]:
    items, total = await RAGService(db).list_documents(
        user, status=status, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=ProcessedDocumentResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@rag_router.get("/stats", response_model=ApiResponse[RAGStats], summary="RAG statistics")
async def get_rag_stats(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[RAGStats]:
    return ApiResponse(data=await RAGService(db).get_stats(user))


@payments_router.get("", summary="Payments (paginated)")
async def list_payments(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    status: PaymentStatus | None = Query(default=None),
) -> dict[str, Any]:
    items, total = await PaymentService(db).list_payments(
        user,
        status=status.value if status else None,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=items,
        item_schema=PaymentResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )
