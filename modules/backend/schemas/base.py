"""
Base Schemas.

Response envelope shared by every endpoint:

    {"success": true,  "data": {...}, "error": null, "metadata": {...}}
    {"success": false, "data": null,  "error": {...}, "metadata": {...}}
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Standard API response envelope."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(BaseModel):
    """Pagination metadata."""

    total: int
    limit: int
    offset: int
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[DataT]):
    """List response with offset pagination and an optional summary block."""

    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo
    summary: dict[str, Any] | None = None
