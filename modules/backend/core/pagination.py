"""
Pagination Utilities.

Offset pagination for list endpoints.
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Query
from pydantic import BaseModel

from modules.backend.schemas.base import PaginatedResponse, PaginationInfo, ResponseMetadata


@dataclass
class PaginationParams:
    """Pagination parameters extracted from the query string."""

    limit: int
    offset: int


def get_pagination_params(
    limit: int = Query(
        default=20,
        ge=1,
        le=100,
        description="Maximum number of items to return",
    ),
    offset: int = Query(
        default=0,
        ge=0,
        description="Number of items to skip",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for pagination parameters.

    Usage:
        @router.get("/disputes")
        async def list_disputes(
            pagination: PaginationParams = Depends(get_pagination_params),
        ):
            ...
    """
    return PaginationParams(limit=limit, offset=offset)


def create_paginated_response(
    items: list[Any],
    item_schema: type[BaseModel],
    total: int,
    limit: int = 20,
    offset: int = 0,
    request_id: str | None = None,
    summary: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Create a standardized paginated response.

    Args:
        items: ORM instances or dicts for the current page
        item_schema: Pydantic schema to serialize items
        total: Total number of matching rows
        limit: Page size
        offset: Current offset
        request_id: Request ID for metadata
        summary: Extra aggregate data (for example counts by status)

    Returns:
        Dict matching PaginatedResponse structure
    """
    validated_items = [
        item_schema.model_validate(item).model_dump(mode="json")
        for item in items
    ]

    response = PaginatedResponse(
        data=validated_items,
        pagination=PaginationInfo(
            total=total,
            limit=limit,
            offset=offset,
            has_more=(offset + len(items)) < total,
        ),
        metadata=ResponseMetadata(request_id=request_id),
        summary=summary,
    )
    return response.model_dump(mode="json")
