"""
In-process request metrics.

Counts requests, server errors and response times since the last
snapshot. The alert checker reads and resets these numbers on each run.
"""

from collections import deque
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class MetricsSnapshot:
    requests: int
    errors: int
    error_rate: float
    avg_response_time_ms: float

    def as_dict(self) -> dict[str, float]:
        return {
            "requests": self.requests,
            "errors": self.errors,
            "error_rate": self.error_rate,
            "avg_response_time_ms": self.avg_response_time_ms,
        }


@dataclass
class MetricsCollector:
    window: int = 1000
    _requests: int = 0
    _errors: int = 0
    _durations: deque = field(default_factory=deque)
    _lock: Lock = field(default_factory=Lock)

    def record(self, status_code: int, duration_ms: float) -> None:
        with self._lock:
            self._requests += 1
            if status_code >= 500:
                self._errors += 1
            self._durations.append(duration_ms)
            while len(self._durations) > self.window:
                self._durations.popleft()

    def snapshot(self, reset: bool = False) -> MetricsSnapshot:
        with self._lock:
            requests = self._requests
            errors = self._errors
            durations = list(self._durations)
            if reset:
                self._requests = 0
                self._errors = 0
                self._durations.clear()

        error_rate = round(errors / requests * 100, 2) if requests else 0.0
        avg = round(sum(durations) / len(durations), 1) if durations else 0.0
        return MetricsSnapshot(requests, errors, error_rate, avg)


_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return _collector
