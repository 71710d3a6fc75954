"""
Consultation Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.models.consultation import LegalCategory


class ConsultationCreate(BaseModel):
    """Request for an AI legal consultation."""

    query: str = Field(
        ...,
        min_length=5,
        max_length=4000,
        description="The user's legal question",
        examples=["Работодатель задерживает зарплату на два месяца. Что делать?"],
    )
    category: LegalCategory = Field(..., description="Area of law")
    context: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional background details",
    )


class ConsultationRating(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class ConsultationResponse(BaseModel):
    id: str
    category: str
    query: str
    response: str | None
    confidence: int | None
    sources: list[str]
    suggestions: list[str]
    follow_up_questions: list[str]
    status: str
    rating: int | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConsultationListItem(BaseModel):
    id: str
    category: str
    query: str
    confidence: int | None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CategoryResponse(BaseModel):
    id: str
    name: str
