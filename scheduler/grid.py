"""
Grid projector — turns (jobs, view, reference date) into calendar cells.

Three views:

    month → every day of the whole weeks covering the month, no hour rows
    week  → the 7 days of the week containing the reference date, hour rows
    day   → the reference date only, hour rows

Hour rows cover the band DAY_START_HOUR..DAY_END_HOUR (06:00–20:00 by
default → rows 6..19).

Bucketing:
    month     → key (None, date, None)
    week/day  → key (resource_id, date, hour of start)

Only schedulable jobs (technician + start, not archived) are placed;
everything else belongs to the unassigned queue. Dates and hours are
taken in the display time zone. The projection is a pure function of its
inputs: nothing is mutated, and projecting twice gives equal results.
"""

import calendar
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from config.settings import settings
from models.enums import ViewMode
from scheduler.base import ScheduledJob, Resource


def display_zone() -> ZoneInfo:
    return ZoneInfo(settings.DISPLAY_TIMEZONE)


def to_local(moment: datetime) -> datetime:
    """Aware datetimes are shown in the display zone; naive ones are already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(display_zone())


def to_aware(moment: datetime) -> datetime:
    """Naive datetimes are local time; pin them to the display zone so they compare with aware ones."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=display_zone())
    return moment


def start_of_week(day: date) -> date:
    offset = (day.weekday() - settings.WEEK_STARTS_ON) % 7
    return day - timedelta(days=offset)


def visible_days(view: ViewMode, reference_date: date) -> list[date]:
    """Days shown by a view, in order."""
    if view == ViewMode.DAY:
        return [reference_date]

    if view == ViewMode.WEEK:
        first = start_of_week(reference_date)
        return [first + timedelta(days=i) for i in range(7)]

    # month: pad to whole weeks on both sides
    month_start = reference_date.replace(day=1)
    last_day = calendar.monthrange(reference_date.year, reference_date.month)[1]
    month_end = reference_date.replace(day=last_day)
    first = start_of_week(month_start)
    last = start_of_week(month_end) + timedelta(days=6)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def visible_hours(view: ViewMode) -> list[int]:
    if view == ViewMode.MONTH:
        return []
    return list(range(settings.DAY_START_HOUR, settings.DAY_END_HOUR))


def _shift_month(day: date, months: int) -> date:
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    # clamp the 31st to the length of the target month
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


@dataclass(frozen=True)
class GridView:
    """
    Navigation state: which view, anchored on which date.

    Every transition returns a new GridView:
        next / previous → shift by one month, week or day
        today           → jump back to the current date
        with_view       → switch view, keep the reference date
    """
    view: ViewMode = ViewMode.DAY
    reference_date: date = field(default_factory=date.today)

    def next(self) -> "GridView":
        return self._shift(1)

    def previous(self) -> "GridView":
        return self._shift(-1)

    def today(self, today: Optional[date] = None) -> "GridView":
        return replace(self, reference_date=today or datetime.now(display_zone()).date())

    def with_view(self, view: ViewMode) -> "GridView":
        return replace(self, view=view)

    def _shift(self, step: int) -> "GridView":
        if self.view == ViewMode.MONTH:
            return replace(self, reference_date=_shift_month(self.reference_date, step))
        days = 7 if self.view == ViewMode.WEEK else 1
        return replace(self, reference_date=self.reference_date + timedelta(days=days * step))

    def days(self) -> list[date]:
        return visible_days(self.view, self.reference_date)

    def hours(self) -> list[int]:
        return visible_hours(self.view)

    def title(self) -> str:
        ref = self.reference_date
        if self.view == ViewMode.MONTH:
            return f"{calendar.month_name[ref.month]} {ref.year}"
        if self.view == ViewMode.WEEK:
            first = start_of_week(ref)
            return f"Week of {calendar.month_abbr[first.month]} {first.day}, {first.year}"
        return (
            f"{calendar.day_name[ref.weekday()]}, "
            f"{calendar.month_name[ref.month]} {ref.day}, {ref.year}"
        )


@dataclass(frozen=True)
class GridCell:
    """Bucket key. resource_id and hour are None in month view."""
    day: date
    resource_id: Optional[str] = None
    hour: Optional[int] = None


@dataclass(frozen=True)
class GridProjection:
    view: GridView
    days: tuple[date, ...]
    hours: tuple[int, ...]
    resources: tuple[Resource, ...]
    buckets: dict[GridCell, tuple[ScheduledJob, ...]]
    out_of_band: tuple[ScheduledJob, ...] = ()

    def jobs_in(self, cell: GridCell) -> tuple[ScheduledJob, ...]:
        return self.buckets.get(cell, ())

    def cells(self) -> list[GridCell]:
        """Every displayed cell, empty ones included, in display order."""
        if not self.hours:
            return [GridCell(day) for day in self.days]
        return [
            GridCell(day, resource.id, hour)
            for day in self.days
            for resource in self.resources
            for hour in self.hours
        ]

    def placed_job_ids(self) -> set[str]:
        placed = {job.id for bucket in self.buckets.values() for job in bucket}
        placed.update(job.id for job in self.out_of_band)
        return placed


def cell_for(job: ScheduledJob, view: ViewMode) -> Optional[GridCell]:
    """The bucket a job belongs to in this view, or None if it is not on the grid."""
    if not job.is_schedulable:
        return None
    local_start = to_local(job.scheduled_start)
    if view == ViewMode.MONTH:
        return GridCell(local_start.date())
    return GridCell(local_start.date(), job.resource_id, local_start.hour)


def project(
    jobs: Iterable[ScheduledJob],
    grid_view: GridView,
    resources: Iterable[Resource] = (),
) -> GridProjection:
    """Bucket jobs into the cells of the current view."""
    days = grid_view.days()
    hours = grid_view.hours()
    shown_days = set(days)
    shown_hours = set(hours)

    buckets: dict[GridCell, list[ScheduledJob]] = {}
    out_of_band: list[ScheduledJob] = []
    for job in jobs:
        cell = cell_for(job, grid_view.view)
        if cell is None or cell.day not in shown_days:
            continue
        if cell.hour is not None and cell.hour not in shown_hours:
            out_of_band.append(job)
            continue
        buckets.setdefault(cell, []).append(job)

    def _order(job: ScheduledJob):
        return (to_aware(job.scheduled_start), job.id)

    return GridProjection(
        view=grid_view,
        days=tuple(days),
        hours=tuple(hours),
        resources=tuple(resources),
        buckets={cell: tuple(sorted(placed, key=_order)) for cell, placed in buckets.items()},
        out_of_band=tuple(sorted(out_of_band, key=_order)),
    )
