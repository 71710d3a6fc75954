"""
Dashboard Schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from modules.backend.schemas.user import UsageLimitsResponse


class ConsultationStats(BaseModel):
    total: int
    this_month: int
    pending: int


class DocumentStats(BaseModel):
    total: int
    this_month: int
    by_type: dict[str, int]


class DisputeSummary(BaseModel):
    total: int
    active: int
    resolved: int
    escalated: int


class ActivityItem(BaseModel):
    type: str
    id: str
    title: str
    status: str
    created_at: datetime


class DashboardStats(BaseModel):
    consultations: ConsultationStats
    documents: DocumentStats
    disputes: DisputeSummary
    subscription: UsageLimitsResponse
    recent_activity: list[ActivityItem]
