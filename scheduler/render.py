"""
Render projection — display primitives for a projected grid.

Presentation only: no scheduling decisions are made here. Week/day views
get positioned time blocks (top offset and height from the time window),
month view gets short chips with a "+N more" overflow, and both share the
status colour and priority decoration rules.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from config.settings import settings
from models.enums import JobPriority, JobStatus
from scheduler.base import ScheduledJob
from scheduler.grid import to_local
from scheduler.time_window import effective_window

STATUS_COLORS: dict[JobStatus, str] = {
    JobStatus.DRAFT: "hsl(var(--muted))",
    JobStatus.SCHEDULED: "hsl(217, 91%, 55%)",    # blue
    JobStatus.IN_PROGRESS: "hsl(38, 92%, 50%)",   # amber
    JobStatus.COMPLETED: "hsl(142, 76%, 36%)",    # green
    JobStatus.INVOICED: "hsl(280, 85%, 60%)",     # purple
    JobStatus.PAID: "hsl(142, 76%, 36%)",         # green
}

PRIORITY_DECORATION: dict[JobPriority, Optional[str]] = {
    JobPriority.URGENT: "ring-strong",
    JobPriority.HIGH: "ring-light",
    JobPriority.MEDIUM: None,
    JobPriority.LOW: None,
}


def status_color(status: JobStatus) -> str:
    return STATUS_COLORS.get(status, STATUS_COLORS[JobStatus.DRAFT])


@dataclass(frozen=True)
class RenderBlock:
    job_id: str
    label: str
    subtitle: str
    top_px: float
    height_px: float
    color: str
    decoration: Optional[str]
    alert_icon: bool


@dataclass(frozen=True)
class MonthCell:
    chips: tuple[str, ...]
    job_ids: tuple[str, ...]
    more: int


def time_block(
    job: ScheduledJob,
    day_start_hour: Optional[int] = None,
    pixels_per_hour: Optional[float] = None,
) -> Optional[RenderBlock]:
    """Position and size of a job in a week/day column, or None if unscheduled."""
    window = effective_window(job)
    if window is None:
        return None
    start_hour = settings.DAY_START_HOUR if day_start_hour is None else day_start_hour
    scale = settings.RESIZE_PIXELS_PER_HOUR if pixels_per_hour is None else pixels_per_hour

    local = to_local(window.start)
    minutes_into_band = (local.hour - start_hour) * 60 + local.minute
    return RenderBlock(
        job_id=job.id,
        label=job.label,
        subtitle=job.customer_name or "",
        top_px=minutes_into_band / 60 * scale,
        height_px=window.minutes / 60 * scale,
        color=status_color(job.status),
        decoration=PRIORITY_DECORATION.get(job.priority),
        alert_icon=job.priority == JobPriority.URGENT,
    )


def month_cell(jobs: Iterable[ScheduledJob], limit: Optional[int] = None) -> MonthCell:
    """First few jobs of a day as "HH:MM title" chips, the rest counted."""
    shown_limit = settings.MONTH_CELL_JOB_LIMIT if limit is None else limit
    jobs = list(jobs)
    shown = jobs[:shown_limit]
    chips = []
    for job in shown:
        if job.scheduled_start is not None:
            chips.append(f"{to_local(job.scheduled_start):%H:%M} {job.title}")
        else:
            chips.append(job.title)
    return MonthCell(
        chips=tuple(chips),
        job_ids=tuple(job.id for job in shown),
        more=max(len(jobs) - shown_limit, 0),
    )


def legend() -> list[dict]:
    return [
        {"kind": "status", "label": "Scheduled", "color": STATUS_COLORS[JobStatus.SCHEDULED]},
        {"kind": "status", "label": "In Progress", "color": STATUS_COLORS[JobStatus.IN_PROGRESS]},
        {"kind": "status", "label": "Completed", "color": STATUS_COLORS[JobStatus.COMPLETED]},
        {"kind": "priority", "label": "Urgent", "decoration": PRIORITY_DECORATION[JobPriority.URGENT]},
        {"kind": "priority", "label": "High", "decoration": PRIORITY_DECORATION[JobPriority.HIGH]},
    ]
