"""
Tax API Endpoints.

Transport tax calculator, rate lookup, tax authority disputes with their
AI analysis, and document generation.
"""

from typing import Any

from fastapi import APIRouter, Query

from modules.backend.core.dependencies import CurrentUser, DbSession, Pagination, RequestId
from modules.backend.core.pagination import create_paginated_response
from modules.backend.models.tax import TaxDisputeStatus, TaxType
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.tax import (
    TaxCalculationResponse,
    TaxDisputeAnalysisResponse,
    TaxDisputeCreate,
    TaxDisputeResponse,
    TaxDisputeStatusUpdate,
    TaxDocumentGenerateRequest,
    TaxDocumentResponse,
    TaxRateResponse,
    TransportTaxRequest,
    TransportTaxResult,
)
from modules.backend.services.tax import TaxService

router = APIRouter()


@router.post(
    "/calculator/transport",
    response_model=ApiResponse[TransportTaxResult],
    summary="Calculate transport tax",
    description=(
        "Calculate the tax from the regional rate and compare it with the "
        "amount in the tax notice. Returns 404 when no rate matches."
    ),
)
async def calculate_transport_tax(
    data: TransportTaxRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TransportTaxResult]:
    return ApiResponse(data=await TaxService(db).calculate_transport_tax(user, data))


@router.get(
    "/rates/regions",
    response_model=ApiResponse[list[str]],
    summary="Regions with transport tax rates",
)
async def list_regions(db: DbSession, request_id: RequestId) -> ApiResponse[list[str]]:
    return ApiResponse(data=await TaxService(db).list_regions())


@router.get(
    "/rates",
    response_model=ApiResponse[list[TaxRateResponse]],
    summary="Transport tax rates for a region",
)
async def list_rates(
    db: DbSession,
    request_id: RequestId,
    region: str = Query(..., min_length=2, max_length=100),
) -> ApiResponse[list[TaxRateResponse]]:
    rates = await TaxService(db).list_rates(region)
    return ApiResponse(data=[TaxRateResponse.model_validate(r) for r in rates])


@router.get(
    "/calculations",
    summary="Saved calculations (paginated)",
)
async def list_calculations(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
) -> dict[str, Any]:
    items, total = await TaxService(db).list_calculations(
        user, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=TaxCalculationResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.post(
    "/disputes",
    response_model=ApiResponse[TaxDisputeResponse],
    status_code=201,
    summary="Register a tax dispute",
    description="Total is amount + penalty + fine; the deadline is counted from the requirement date.",
)
async def create_tax_dispute(
    data: TaxDisputeCreate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDisputeResponse]:
    dispute = await TaxService(db).create_dispute(user, data)
    return ApiResponse(data=TaxDisputeResponse.model_validate(dispute))


@router.get(
    "/disputes",
    summary="List tax disputes (paginated)",
)
async def list_tax_disputes(
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
    pagination: Pagination,
    status: TaxDisputeStatus | None = Query(default=None),
    tax_type: TaxType | None = Query(default=None),
) -> dict[str, Any]:
    items, total = await TaxService(db).list_disputes(
        user, status=status, tax_type=tax_type, limit=pagination.limit, offset=pagination.offset
    )
    return create_paginated_response(
        items=items,
        item_schema=TaxDisputeResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get(
    "/disputes/{dispute_id}",
    response_model=ApiResponse[TaxDisputeResponse],
    summary="Get a tax dispute",
)
async def get_tax_dispute(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDisputeResponse]:
    dispute = await TaxService(db).get_dispute(user, dispute_id)
    return ApiResponse(data=TaxDisputeResponse.model_validate(dispute))


@router.patch(
    "/disputes/{dispute_id}/status",
    response_model=ApiResponse[TaxDisputeResponse],
    summary="Update tax dispute status",
)
async def update_tax_dispute_status(
    dispute_id: str,
    data: TaxDisputeStatusUpdate,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDisputeResponse]:
    dispute = await TaxService(db).update_dispute_status(user, dispute_id, data)
    return ApiResponse(data=TaxDisputeResponse.model_validate(dispute))


@router.delete(
    "/disputes/{dispute_id}",
    status_code=204,
    summary="Delete a tax dispute",
)
async def delete_tax_dispute(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> None:
    await TaxService(db).delete_dispute(user, dispute_id)


@router.post(
    "/disputes/{dispute_id}/analyze",
    response_model=ApiResponse[TaxDisputeAnalysisResponse],
    summary="Analyze a tax dispute",
    description=(
        "Assess the requirement with AI and store the result and success rate "
        "on the dispute. Falls back to a rule-based assessment when AI is unavailable."
    ),
)
async def analyze_tax_dispute(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDisputeAnalysisResponse]:
    dispute = await TaxService(db).analyze_dispute(user, dispute_id)
    return ApiResponse(data=TaxDisputeAnalysisResponse.model_validate(dispute))


@router.get(
    "/disputes/{dispute_id}/analyze",
    response_model=ApiResponse[TaxDisputeAnalysisResponse],
    summary="Stored analysis of a tax dispute",
)
async def get_tax_dispute_analysis(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDisputeAnalysisResponse]:
    dispute = await TaxService(db).get_dispute(user, dispute_id)
    return ApiResponse(data=TaxDisputeAnalysisResponse.model_validate(dispute))


@router.get(
    "/disputes/{dispute_id}/documents",
    response_model=ApiResponse[list[TaxDocumentResponse]],
    summary="Documents generated for a tax dispute",
)
async def list_tax_documents(
    dispute_id: str,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[TaxDocumentResponse]]:
    documents = await TaxService(db).list_documents(user, dispute_id)
    return ApiResponse(data=[TaxDocumentResponse.model_validate(d) for d in documents])


@router.post(
    "/documents/generate",
    response_model=ApiResponse[TaxDocumentResponse],
    status_code=201,
    summary="Generate a tax document",
    description="Objection, complaint, disagreement notice or recalculation request for a dispute.",
)
async def generate_tax_document(
    data: TaxDocumentGenerateRequest,
    user: CurrentUser,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TaxDocumentResponse]:
    document = await TaxService(db).generate_document(user, data)
    return ApiResponse(data=TaxDocumentResponse.model_validate(document))
