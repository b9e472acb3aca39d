"""Maintenance Rules — validating downtime windows and deciding when to announce them.

Invariants:
    - A window must start in the future and last longer than MIN_DURATION_MINUTES
    - duration_minutes is derived from the window, never taken from the caller
    - A window is announced only while it is active and starts within NOTICE_WINDOW
"""

from datetime import datetime, timedelta

from agrilink.core.errors import ValidationError
from agrilink.core.offer_workflow import ensure_utc


MIN_DURATION_MINUTES: int = 15
NOTICE_WINDOW: timedelta = timedelta(hours=24)


def window_minutes(start: datetime, end: datetime) -> int:
    return int((ensure_utc(end) - ensure_utc(start)).total_seconds() // 60)


def validate_window(start: datetime, end: datetime, now: datetime) -> int:
    """Check a proposed window and return its length in minutes."""
    start, end = ensure_utc(start), ensure_utc(end)
    if start <= now:
        raise ValidationError("Maintenance must start in the future", field="start_time")
    if end <= start:
        raise ValidationError("End time must be after start time", field="end_time")
    minutes = window_minutes(start, end)
    if minutes <= MIN_DURATION_MINUTES:
        raise ValidationError(
            f"Maintenance must last more than {MIN_DURATION_MINUTES} minutes",
            field="end_time",
        )
    return minutes


def should_announce(
    start: datetime, duration_minutes: int, is_active: bool, now: datetime,
) -> bool:
    if not is_active or duration_minutes <= MIN_DURATION_MINUTES:
        return False
    start = ensure_utc(start)
    return now < start <= now + NOTICE_WINDOW
