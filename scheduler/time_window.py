"""
Time-window model — where a job actually sits on the clock.

A job stores up to three scheduling fields (start, end, estimated
duration), any of which may be missing. Everything else in the scheduler
works on the resolved [start, end) window computed here:

    scheduled_end present        → [start, scheduled_end)
    else estimated_duration set  → [start, start + estimated_duration)
    else                         → [start, start + DEFAULT_DURATION_MINUTES)

and in every case the window is at least MIN_DURATION_MINUTES long, so a
zero- or negative-length interval can never reach the conflict detector.
"""

from datetime import datetime, timedelta
from typing import Optional

from config.settings import settings
from scheduler.base import ScheduledJob, TimeWindow
from scheduler.grid import to_aware


def window_from(
    start: datetime,
    end: Optional[datetime] = None,
    estimated_minutes: Optional[int] = None,
) -> TimeWindow:
    """Resolve a start plus optional end/estimate into a window of positive length."""
    start = to_aware(start)
    if end is None:
        minutes = estimated_minutes or settings.DEFAULT_DURATION_MINUTES
        end = start + timedelta(minutes=minutes)
    else:
        end = to_aware(end)

    floor = start + timedelta(minutes=settings.MIN_DURATION_MINUTES)
    if end < floor:
        end = floor
    return TimeWindow(start, end)


def effective_window(job: ScheduledJob) -> Optional[TimeWindow]:
    """The job's [start, end) window, or None when it has no start."""
    if job.scheduled_start is None:
        return None
    return window_from(job.scheduled_start, job.scheduled_end, job.estimated_duration)


def duration_minutes(job: ScheduledJob) -> int:
    """Length of the effective window in minutes; 0 for unscheduled jobs."""
    window = effective_window(job)
    return window.minutes if window else 0


def format_duration(minutes: int) -> str:
    """Human label used by toasts and queue cards: 105 → "1h 45m", 45 → "45m"."""
    hours, rest = divmod(max(minutes, 0), 60)
    if not hours:
        return f"{rest}m"
    if not rest:
        return f"{hours}h"
    return f"{hours}h {rest}m"
