"""
Time helpers for hourly forecast windows.

Key concepts:
  - Window timestamps are always timezone-aware. Naive inputs are taken as UTC.
  - A window covers one hour starting at its timestamp.
  - Cache keys floor a horizon start to the hour.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

WINDOW_DURATION = timedelta(hours=1)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string or datetime into an aware datetime.

    Accepts the trailing ``Z`` suffix. Naive values are assumed to be UTC.

    Args:
        value: ``datetime`` or ISO-8601 ``str``.

    Returns:
        Timezone-aware ``datetime``.

    Raises:
        ValueError: If ``value`` is missing, empty, or not parseable.
    """
    if value is None:
        raise ValueError("timestamp is missing")

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("timestamp is empty")
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"unsupported timestamp type {type(value).__name__}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def floor_to_hour(moment: datetime) -> datetime:
    """Return ``moment`` truncated to the start of its hour."""
    return moment.replace(minute=0, second=0, microsecond=0)


def window_end(start: datetime) -> datetime:
    """Return the exclusive end of the one-hour window starting at ``start``."""
    return start + WINDOW_DURATION


def is_next_hour(previous: datetime, current: datetime) -> bool:
    """True when ``current`` starts exactly one window after ``previous``."""
    return current - previous == WINDOW_DURATION


def format_clock(moment: datetime) -> str:
    """Render ``moment`` as ``HH:MM`` in its own UTC offset."""
    return moment.strftime("%H:%M")


def hourly_range(start: datetime, hours: int) -> list[datetime]:
    """Generate ``hours`` consecutive hourly timestamps beginning at ``start``.

    Raises:
        ValueError: If ``hours < 1``.
    """
    if hours < 1:
        raise ValueError(f"hours must be >= 1, got {hours}.")
    return [start + i * WINDOW_DURATION for i in range(hours)]


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)
