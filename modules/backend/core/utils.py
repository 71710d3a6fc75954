"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and
    assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def month_start(now: datetime | None = None) -> datetime:
    """First instant of the current calendar month (UTC, naive)."""
    now = now or utc_now()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def truncate(text: str, length: int = 50) -> str:
    """Shorten text for titles and previews, adding an ellipsis."""
    text = " ".join(text.split())
    if len(text) <= length:
        return text
    return text[: length - 3].rstrip() + "..."
