"""
Tests for the time-window model.

The effective window resolves missing fields in a fixed order:
explicit end → start + estimate → start + default, never shorter than
the minimum duration.
"""

from datetime import datetime, timedelta, timezone

from scheduler.base import ScheduledJob
from scheduler.time_window import effective_window, duration_minutes, window_from, format_duration

START = datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc)


def _make_job(start=START, end=None, estimate=None) -> ScheduledJob:
    return ScheduledJob(
        id="job-1",
        resource_id="tech-1",
        scheduled_start=start,
        scheduled_end=end,
        estimated_duration=estimate,
    )


def test_explicit_end_wins():
    job = _make_job(end=START + timedelta(minutes=90), estimate=30)
    window = effective_window(job)
    assert window.start == START
    assert window.end == START + timedelta(minutes=90)


def test_estimate_used_when_end_missing():
    window = effective_window(_make_job(estimate=45))
    assert window.end == START + timedelta(minutes=45)


def test_default_duration_is_sixty_minutes():
    window = effective_window(_make_job())
    assert window.end == START + timedelta(minutes=60)


def test_no_start_means_no_window():
    assert effective_window(_make_job(start=None)) is None
    assert duration_minutes(_make_job(start=None)) == 0


def test_end_equal_to_start_is_clamped_to_fifteen_minutes():
    window = effective_window(_make_job(end=START))
    assert window.end == START + timedelta(minutes=15)


def test_end_before_start_is_clamped_to_fifteen_minutes():
    window = window_from(START, START - timedelta(minutes=30))
    assert window.minutes == 15


def test_short_estimate_is_clamped():
    assert duration_minutes(_make_job(estimate=5)) == 15


def test_duration_minutes_drives_block_size():
    assert duration_minutes(_make_job(end=START + timedelta(hours=2))) == 120


def test_format_duration():
    assert format_duration(45) == "45m"
    assert format_duration(60) == "1h"
    assert format_duration(105) == "1h 45m"
