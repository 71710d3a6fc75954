"""
Document Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from modules.backend.models.document import DocumentType


class DocumentGenerateRequest(BaseModel):
    """Fill a template with user-provided field values."""

    template: DocumentType = Field(..., description="Template identifier")
    fields: dict[str, Any] = Field(
        ...,
        description="Template field values keyed by field name",
        examples=[{"consumer_name": "Иванов Иван Иванович", "seller_name": "ООО Ромашка"}],
    )
    title: str | None = Field(default=None, max_length=255)
    dispute_id: str | None = Field(default=None, description="Attach to a dispute")


class TemplateField(BaseModel):
    name: str
    label: str
    type: str
    required: bool
    options: list[str] | None = None


class TemplateResponse(BaseModel):
    id: str
    name: str
    description: str
    fields: list[TemplateField]


class DocumentResponse(BaseModel):
    id: str
    document_type: str
    title: str
    content: str
    fields: dict[str, Any]
    extra_data: dict[str, Any] = Field(serialization_alias="metadata")
    status: str
    dispute_id: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentListItem(BaseModel):
    id: str
    document_type: str
    title: str
    status: str
    dispute_id: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
