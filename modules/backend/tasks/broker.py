"""
Taskiq Broker Configuration.

Redis list-queue broker for background jobs.

Usage:
    taskiq worker modules.backend.tasks.broker:broker
"""

from typing import TYPE_CHECKING

from modules.backend.core.config import get_app_config, get_redis_url
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq_redis import ListQueueBroker


def create_broker() -> "ListQueueBroker":
    """Create the broker with a Redis result backend, configured from database.yaml."""
    from taskiq_redis import ListQueueBroker, RedisAsyncResultBackend

    redis_url = get_redis_url()
    broker_config = get_app_config().database.redis.broker

    result_backend = RedisAsyncResultBackend(
        redis_url=redis_url,
        result_ex_time=broker_config.result_expiry_seconds,
    )
    broker = ListQueueBroker(
        url=redis_url,
        queue_name=broker_config.queue_name,
    ).with_result_backend(result_backend)

    logger.debug(
        "Taskiq broker configured",
        extra={
            "queue_name": broker_config.queue_name,
            "result_expiry": broker_config.result_expiry_seconds,
        },
    )
    return broker


_broker: "ListQueueBroker | None" = None


def get_broker() -> "ListQueueBroker":
    """Get the broker instance, creating it if necessary."""
    global _broker
    if _broker is None:
        from taskiq import TaskiqEvents

        from modules.backend.core.database import dispose_engine
        from modules.backend.core.logging import setup_logging

        _broker = create_broker()

        @_broker.on_event(TaskiqEvents.WORKER_STARTUP)
        async def on_startup(state) -> None:
            setup_logging(level=get_app_config().logging.level)
            logger.info("Taskiq worker starting up")

        @_broker.on_event(TaskiqEvents.WORKER_SHUTDOWN)
        async def on_shutdown(state) -> None:
            await dispose_engine()
            logger.info("Taskiq worker shutting down")

    return _broker


def __getattr__(name: str):
    """Lazy attribute access for ``taskiq worker ...:broker``."""
    if name == "broker":
        from modules.backend.tasks.scheduled import register_scheduled_tasks

        broker = get_broker()
        register_scheduled_tasks()
        return broker
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
