"""
Technician load — how full each technician's day is.

Feeds the "today's schedule" summary: jobs per technician, hours booked
against a WORKDAY_HOURS capacity, the next job, and an availability label.
Technicians on leave are not scheduler columns at all.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from config.settings import settings
from models.enums import EmploymentStatus
from scheduler.base import ScheduledJob, Resource
from scheduler.grid import to_aware, to_local
from scheduler.time_window import duration_minutes
from scheduler.unassigned import unassigned, urgent_unassigned


def resource_from_technician(
    technician_id: str,
    full_name: Optional[str],
    email: str,
    employment_status: Optional[str] = None,
) -> Resource:
    return Resource(id=technician_id, title=full_name or email, employment_status=employment_status)


def available_resources(resources: Iterable[Resource]) -> list[Resource]:
    return [r for r in resources if r.employment_status != EmploymentStatus.ON_LEAVE.value]


@dataclass(frozen=True)
class TechnicianLoad:
    resource: Resource
    job_count: int
    hours_scheduled: float
    next_job: Optional[ScheduledJob]

    @property
    def availability(self) -> str:
        if self.job_count == 0:
            return "Available"
        if self.hours_scheduled >= settings.WORKDAY_HOURS:
            return "Full"
        return f"{settings.WORKDAY_HOURS - self.hours_scheduled:.1f}h free"


@dataclass(frozen=True)
class DaySummary:
    day: date
    jobs_today: int
    unassigned: int
    urgent_unassigned: int
    technicians: tuple[TechnicianLoad, ...]


def jobs_on(jobs: Iterable[ScheduledJob], day: date) -> list[ScheduledJob]:
    """Active jobs starting on this local date, earliest first."""
    todays = [
        job for job in jobs
        if job.scheduled_start is not None
        and job.archived_at is None
        and to_local(job.scheduled_start).date() == day
    ]
    return sorted(todays, key=lambda job: (to_aware(job.scheduled_start), job.id))


def technician_load(
    jobs: Iterable[ScheduledJob], resources: Iterable[Resource], day: date
) -> list[TechnicianLoad]:
    todays = jobs_on(jobs, day)
    loads = []
    for resource in resources:
        mine = [job for job in todays if job.resource_id == resource.id]
        loads.append(TechnicianLoad(
            resource=resource,
            job_count=len(mine),
            hours_scheduled=sum(duration_minutes(job) for job in mine) / 60,
            next_job=mine[0] if mine else None,
        ))
    # stable: ties keep the incoming column order
    return sorted(loads, key=lambda load: -load.job_count)


def day_summary(
    jobs: Iterable[ScheduledJob], resources: Iterable[Resource], day: date
) -> DaySummary:
    jobs = list(jobs)
    return DaySummary(
        day=day,
        jobs_today=len(jobs_on(jobs, day)),
        unassigned=len(unassigned(jobs)),
        urgent_unassigned=len(urgent_unassigned(jobs)),
        technicians=tuple(technician_load(jobs, resources, day)),
    )
