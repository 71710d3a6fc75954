"""
Alert Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AlertResponse(BaseModel):
    id: str
    rule: str
    severity: str
    title: str
    message: str
    user_id: str | None
    created_at: datetime
    resolved: bool
    resolved_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AlertRuleResponse(BaseModel):
    name: str
    metric: str
    threshold: float
    severity: str
    cooldown_minutes: int
    enabled: bool
    last_triggered_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AlertRuleUpdate(BaseModel):
    threshold: float | None = Field(default=None, ge=0)
    cooldown_minutes: int | None = Field(default=None, ge=0, le=1440)
    enabled: bool | None = None


class AlertStats(BaseModel):
    total: int
    active: int
    resolved: int
    critical: int
    by_severity: dict[str, int]


class SystemHealth(BaseModel):
    status: str
    active_alerts: int
    critical_alerts: int
    metrics: dict[str, float]
