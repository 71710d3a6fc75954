"""
Telegram Bot Services.

Outbound delivery of user notifications and admin alerts.
"""

from modules.telegram.services.notifications import (
    AlertType,
    NotificationResult,
    NotificationService,
    format_alert,
    get_notification_service,
)

__all__ = [
    "AlertType",
    "NotificationResult",
    "NotificationService",
    "format_alert",
    "get_notification_service",
]
