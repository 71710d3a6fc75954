"""
Resilience Infrastructure.

Circuit breaker listener and retry callback that emit structured
resilience events. LegalAIClient wraps every model request with both.

The stack is applied outside-in:
    Circuit Breaker (aiobreaker) → Retry (tenacity) → Timeout → Call

Usage:
    breaker = create_circuit_breaker("openai", fail_max=5, timeout_duration=60)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        before_sleep=log_retry,
        reraise=True,
    )
    async def call():
        return await breaker.call_async(client.request)
"""

from datetime import timedelta
from typing import Any

import aiobreaker

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class ResilienceLogger(aiobreaker.CircuitBreakerListener):
    """Circuit breaker listener that logs every state transition.

    Filter the events with:

        jq 'select(.resilience_event != null)' logs/system.jsonl
    """

    def __init__(self, dependency: str) -> None:
        self.dependency = dependency

    def state_change(self, cb: aiobreaker.CircuitBreaker, old_state: Any, new_state: Any) -> None:
        new_str = str(getattr(new_state, "state", new_state)).lower()
        new_str = new_str.rsplit(".", 1)[-1].replace("_", "-")
        event = {
            "open": "circuit_breaker_opened",
            "half-open": "circuit_breaker_half_open",
            "closed": "circuit_breaker_closed",
        }.get(new_str, f"circuit_breaker_{new_str}")

        log = logger.error if new_str == "open" else logger.info
        log(
            f"Circuit breaker {self.dependency}: {old_state} → {new_state}",
            extra={
                "resilience_event": event,
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
            },
        )

    def failure(self, cb: aiobreaker.CircuitBreaker, exception: Exception) -> None:
        logger.warning(
            f"Circuit breaker {self.dependency}: failure recorded",
            extra={
                "resilience_event": "circuit_breaker_failure",
                "dependency": self.dependency,
                "failure_count": cb.fail_counter,
                "error": str(exception),
            },
        )


def log_retry(retry_state: Any) -> None:
    """Tenacity before_sleep callback. Pass as `before_sleep=log_retry`."""
    duration_ms = None
    if retry_state.outcome_timestamp and retry_state.start_time:
        duration_ms = round(
            (retry_state.outcome_timestamp - retry_state.start_time) * 1000
        )

    error = None
    if retry_state.outcome and retry_state.outcome.failed:
        error = str(retry_state.outcome.exception())

    fn_name = getattr(retry_state.fn, "__name__", "unknown")

    logger.warning(
        f"Retrying {fn_name} (attempt {retry_state.attempt_number})",
        extra={
            "resilience_event": "retry_attempt",
            "dependency": fn_name,
            "attempt": retry_state.attempt_number,
            "duration_ms": duration_ms,
            "error": error,
        },
    )


def create_circuit_breaker(
    dependency: str,
    fail_max: int = 5,
    timeout_duration: int = 30,
    exclude: list[type[BaseException]] | None = None,
) -> aiobreaker.CircuitBreaker:
    """Create a circuit breaker with structured logging.

    Args:
        dependency: Name of the external dependency (for logging)
        fail_max: Number of failures before opening
        timeout_duration: Seconds to wait before half-open test
        exclude: Exception types that do not count as failures
    """
    return aiobreaker.CircuitBreaker(
        fail_max=fail_max,
        timeout_duration=timedelta(seconds=timeout_duration),
        exclude=exclude or [],
        listeners=[ResilienceLogger(dependency)],
    )
