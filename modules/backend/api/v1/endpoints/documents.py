"""
Document API Endpoints.

Template catalogue and generated legal documents.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.models.document import DocumentType
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.document import (
    DocumentGenerateRequest,
    DocumentListItem,
    DocumentResponse,
    TemplateResponse,
)
from modules.backend.services.document import DocumentService

router = APIRouter()


@router.get(
    "/templates",
    response_model=ApiResponse[list[TemplateResponse]],
    summary="Document templates",
    description="Available templates with the fields each one needs.",
)
async def list_templates(request_id: RequestId) -> ApiResponse[list[TemplateResponse]]:
    return ApiResponse(data=DocumentService.list_templates())


@router.post(
    "/generate",
    response_model=ApiResponse[DocumentResponse],
    status_code=201,
    summary="Generate a document",
    description=(
        "Fill a template and store the result. Invalid fields return 400 "
        "with the list of problems in error.details.errors."
    ),
)
async def generate_document(
    data: DocumentGenerateRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DocumentResponse]:
    document = await DocumentService(db).generate_document(user, data)
    return ApiResponse(data=DocumentResponse.model_validate(document))


@router.get(
    "",
    summary="List documents (paginated)",
)
async def list_documents(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    document_type: DocumentType | None = Query(default=None, alias="type"),
) -> dict[str, Any]:
    items, total = await DocumentService(db).list_documents(
        user, document_type=document_type, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=DocumentListItem,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/{document_id}",
    response_model=ApiResponse[DocumentResponse],
    summary="Get a document",
)
async def get_document(
    document_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[DocumentResponse]:
    document = await DocumentService(db).get_document(user, document_id)
    return ApiResponse(data=DocumentResponse.model_validate(document))


@router.delete(
    "/{document_id}",
    status_code=204,
    summary="Delete a document",
)
async def delete_document(
    document_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await DocumentService(db).delete_document(user, document_id)
