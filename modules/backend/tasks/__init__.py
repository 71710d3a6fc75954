"""
Background Tasks Package.

Taskiq jobs with a Redis broker: notification cleanup and dispute
deadline reminders.

Usage:
    taskiq worker modules.backend.tasks.broker:broker
    taskiq scheduler modules.backend.tasks.scheduler:scheduler

    # Without Redis (tests): call the functions directly
    from modules.backend.tasks.scheduled import cleanup_notifications
    await cleanup_notifications(retention_days=30, session_factory=factory)
"""

from modules.backend.tasks.broker import get_broker
from modules.backend.tasks.scheduled import (
    SCHEDULED_TASKS,
    cleanup_notifications,
    register_scheduled_tasks,
    send_deadline_reminders,
)
from modules.backend.tasks.scheduler import get_scheduler

__all__ = [
    "get_broker",
    "get_scheduler",
    "register_scheduled_tasks",
    "SCHEDULED_TASKS",
    "cleanup_notifications",
    "send_deadline_reminders",
]
