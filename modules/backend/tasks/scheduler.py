"""
Task Scheduler Configuration.

Uses LabelScheduleSource: schedules come from the ``schedule`` label set
when scheduled tasks are registered.

Usage:
    taskiq scheduler modules.backend.tasks.scheduler:scheduler

Important:
    Run only ONE scheduler instance or reminders are sent twice.
"""

from typing import TYPE_CHECKING

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq import TaskiqScheduler


def create_scheduler() -> "TaskiqScheduler":
    from taskiq import TaskiqScheduler
    from taskiq.schedule_sources import LabelScheduleSource

    from modules.backend.tasks.broker import get_broker
    from modules.backend.tasks.scheduled import register_scheduled_tasks

    broker = get_broker()
    register_scheduled_tasks()

    scheduler = TaskiqScheduler(broker=broker, sources=[LabelScheduleSource(broker)])
    logger.info("Taskiq scheduler configured with LabelScheduleSource")
    return scheduler


_scheduler: "TaskiqScheduler | None" = None


def get_scheduler() -> "TaskiqScheduler":
    """Get the scheduler instance, creating it if necessary."""
    global _scheduler
    if _scheduler is None:
        _scheduler = create_scheduler()
    return _scheduler


def __getattr__(name: str):
    """Lazy attribute access for ``taskiq scheduler ...:scheduler``."""
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
