"""
Scheduled Background Tasks.

Plain async functions wrapped with ``broker.task`` and a cron schedule by
register_scheduled_tasks(). Tests call them directly with a session factory.

Cron Format (UTC):
    ┌───────────── minute (0-59)
    │ ┌───────────── hour (0-23)
    │ │ ┌───────────── day of month (1-31)
    │ │ │ ┌───────────── month (1-12)
    │ │ │ │ ┌───────────── day of week (0-6, Sun=0)
    │ │ │ │ │
    * * * * *
"""

from datetime import timedelta
from typing import Any

from modules.backend.core.config import get_app_config
from modules.backend.core.database import get_session_factory
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now
from modules.backend.repositories.dispute import DisputeRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.services.notification import NotificationService

logger = get_logger(__name__)


async def cleanup_notifications(retention_days: int | None = None, session_factory=None) -> dict[str, Any]:
    """Delete read notifications older than the retention period."""
    if retention_days is None:
        retention_days = get_app_config().alerts.notification_retention_days

    factory = session_factory or get_session_factory()
    async with factory() as session:
        deleted = await NotificationService(session).cleanup(retention_days)
        await session.commit()

    result = {"deleted": deleted, "retention_days": retention_days}
    logger.info("Notification cleanup completed", extra=result)
    return result


async def send_deadline_reminders(days: int | None = None, session_factory=None) -> dict[str, Any]:
    """
    Remind owners of open disputes whose deadline is within ``days``.

    One reminder per dispute per run; the task runs once a day.
    """
    if days is None:
        days = get_app_config().alerts.deadline_reminder_days
    now = utc_now()

    sent = 0
    factory = session_factory or get_session_factory()
    async with factory() as session:
        disputes = await DisputeRepository(session).upcoming_deadlines(
            until=now + timedelta(days=days), now=now
        )
        users = UserRepository(session)
        notifications = NotificationService(session)

        for dispute in disputes:
            user = await users.get_by_id(dispute.user_id)
            await notifications.notify(
                user,
                "deadline_reminder",
                {
                    "dispute_title": dispute.title,
                    "deadline": f"{dispute.deadline:%d.%m.%Y}",
                    "days_left": (dispute.deadline.date() - now.date()).days,
                },
                data={"dispute_id": dispute.id},
            )
            sent += 1
        await session.commit()

    result = {"disputes": len(disputes), "reminders_sent": sent, "window_days": days}
    logger.info("Deadline reminders sent", extra=result)
    return result


SCHEDULED_TASKS = {
    "cleanup_notifications": {
        "function": cleanup_notifications,
        "schedule": [{"cron": "0 3 * * *"}],
        "retry_on_error": False,
        "description": "Delete old read notifications daily at 03:00 UTC",
    },
    "send_deadline_reminders": {
        "function": send_deadline_reminders,
        "schedule": [{"cron": "0 9 * * *"}],
        "retry_on_error": True,
        "max_retries": 2,
        "description": "Remind about dispute deadlines daily at 09:00 UTC",
    },
}


_registered: dict[str, Any] | None = None


def register_scheduled_tasks() -> dict[str, Any]:
    """
    Wrap the task functions with broker.task and their schedules. Idempotent.

    Registers nothing while the background_tasks_enabled flag is off.
    """
    global _registered
    if _registered is not None:
        return _registered

    if not get_app_config().features.background_tasks_enabled:
        logger.warning("Background tasks disabled, no schedules registered")
        return {}

    from modules.backend.tasks.broker import get_broker

    broker = get_broker()
    registered = {}

    for task_name, config in SCHEDULED_TASKS.items():
        task_kwargs = {
            "task_name": task_name,
            "schedule": config["schedule"],
            "retry_on_error": config.get("retry_on_error", False),
        }
        if "max_retries" in config:
            task_kwargs["max_retries"] = config["max_retries"]

        registered[task_name] = broker.task(**task_kwargs)(config["function"])

    logger.info(
        "Scheduled tasks registered",
        extra={"task_count": len(registered), "tasks": list(registered.keys())},
    )
    _registered = registered
    return registered
