"""
Notification Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class NotificationResponse(BaseModel):
    id: str
    notification_type: str
    title: str
    message: str
    data: dict[str, Any]
    channel: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationStats(BaseModel):
    total: int
    unread: int
    by_type: dict[str, int]


class NotificationTemplateResponse(BaseModel):
    id: str
    title: str
    message: str
    variables: list[str]


class MarkAllReadResponse(BaseModel):
    updated: int
