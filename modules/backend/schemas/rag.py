"""
RAG and Payment Record Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RAGConsultationResponse(BaseModel):
    id: str
    question: str
    legal_area: str | None
    answer: str | None
    sources: list
    confidence: float | None
    max_results: int
    threshold: float
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProcessedDocumentResponse(BaseModel):
    id: str
    file_name: str
    file_type: str
    file_size: int
    status: str
    chunk_count: int
    error_message: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RAGStats(BaseModel):
    consultations: int
    documents: int
    documents_by_status: dict[str, int]
    average_confidence: float | None


class PaymentResponse(BaseModel):
    id: str
    amount: float
    currency: str
    status: str
    provider: str | None
    plan: str | None
    description: str | None
    paid_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
