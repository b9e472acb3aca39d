"""Maintenance Rules — window validation and the announcement window."""

from datetime import datetime, timedelta, timezone

import pytest

from agrilink.core.errors import ValidationError
from agrilink.core.maintenance import (
    MIN_DURATION_MINUTES,
    should_announce,
    validate_window,
    window_minutes,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_window_minutes_accepts_naive_datetimes():
    start = datetime(2026, 3, 1, 14, 0)
    assert window_minutes(start, start + timedelta(hours=2)) == 120


def test_valid_window_returns_duration():
    start = NOW + timedelta(hours=3)
    assert validate_window(start, start + timedelta(minutes=45), NOW) == 45


def test_window_must_start_in_future():
    with pytest.raises(ValidationError) as exc:
        validate_window(NOW - timedelta(minutes=1), NOW + timedelta(hours=1), NOW)
    assert exc.value.field == "start_time"


def test_window_end_must_follow_start():
    start = NOW + timedelta(hours=1)
    with pytest.raises(ValidationError):
        validate_window(start, start, NOW)


def test_window_must_exceed_minimum_duration():
    start = NOW + timedelta(hours=1)
    with pytest.raises(ValidationError):
        validate_window(start, start + timedelta(minutes=MIN_DURATION_MINUTES), NOW)
    assert validate_window(
        start, start + timedelta(minutes=MIN_DURATION_MINUTES + 1), NOW,
    ) == MIN_DURATION_MINUTES + 1


@pytest.mark.parametrize("offset,expected", [
    (timedelta(minutes=-5), False),
    (timedelta(0), False),
    (timedelta(hours=2), True),
    (timedelta(hours=24), True),
    (timedelta(hours=24, minutes=1), False),
])
def test_should_announce_within_notice_window(offset, expected):
    assert should_announce(NOW + offset, 60, True, NOW) is expected


def test_inactive_or_short_windows_not_announced():
    start = NOW + timedelta(hours=1)
    assert should_announce(start, 60, False, NOW) is False
    assert should_announce(start, MIN_DURATION_MINUTES, True, NOW) is False
