"""
Dispute Schemas.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.backend.models.dispute import DisputePriority, DisputeStatus, DisputeType


def _naive_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class DisputeCreate(BaseModel):
    """Schema for opening a new dispute."""

    title: str = Field(
        ...,
        min_length=3,
        max_length=200,
        description="Short case title",
        examples=["Возврат неисправного телефона"],
    )
    description: str = Field(..., min_length=10, max_length=5000)
    dispute_type: DisputeType
    priority: DisputePriority = DisputePriority.MEDIUM
    counterparty: str | None = Field(default=None, max_length=255)
    amount: float | None = Field(default=None, ge=0, le=100_000_000)
    currency: str = Field(default="RUB", pattern=r"^[A-Z]{3}$")
    deadline: datetime | None = None
    tags: list[str] = Field(default_factory=list, max_length=10)
    draft: bool = Field(default=False, description="Create in draft status")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: datetime | None) -> datetime | None:
        return _naive_utc(value)


class DisputeUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = Field(default=None, min_length=10, max_length=5000)
    priority: DisputePriority | None = None
    counterparty: str | None = Field(default=None, max_length=255)
    amount: float | None = Field(default=None, ge=0, le=100_000_000)
    deadline: datetime | None = None
    tags: list[str] | None = Field(default=None, max_length=10)

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: datetime | None) -> datetime | None:
        return _naive_utc(value)


class DisputeStatusUpdate(BaseModel):
    status: DisputeStatus
    comment: str | None = Field(default=None, max_length=1000)


class TimelineCommentCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=5000)


class TimelineEventResponse(BaseModel):
    id: str
    event_type: str
    title: str
    description: str | None
    event_data: dict[str, Any]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DisputeResponse(BaseModel):
    id: str
    title: str
    description: str
    dispute_type: str
    status: str
    priority: str
    counterparty: str | None
    amount: float | None
    currency: str
    deadline: datetime | None
    resolved_at: datetime | None
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DisputeDetailResponse(DisputeResponse):
    timeline: list[TimelineEventResponse] = Field(default_factory=list)
    document_ids: list[str] = Field(default_factory=list)


class DisputeStatsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    by_type: dict[str, int]
    resolution_rate: float = Field(description="Percent of disputes resolved or closed")
