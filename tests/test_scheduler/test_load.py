"""Tests for technician load and the day summary."""

from datetime import date, datetime, timedelta, timezone

from models.enums import EmploymentStatus, JobPriority, JobStatus
from scheduler.base import ScheduledJob, Resource
from scheduler.load import (
    available_resources, day_summary, jobs_on, resource_from_technician, technician_load,
)

WEDNESDAY = date(2026, 10, 21)


def _at(hour: int, day: date = WEDNESDAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


def _make_job(job_id, resource_id="tech-1", start=None, hours=1, priority=JobPriority.MEDIUM):
    return ScheduledJob(
        id=job_id,
        resource_id=resource_id,
        scheduled_start=start,
        scheduled_end=start + timedelta(hours=hours) if start else None,
        status=JobStatus.SCHEDULED if start else JobStatus.DRAFT,
        priority=priority,
    )


ANA = Resource("tech-1", "Ana Ruiz")
BEN = Resource("tech-2", "Ben Osei")


def test_resource_title_falls_back_to_email():
    assert resource_from_technician("t", None, "ana@example.com").title == "ana@example.com"
    assert resource_from_technician("t", "Ana Ruiz", "ana@example.com").title == "Ana Ruiz"


def test_technicians_on_leave_are_not_columns():
    away = Resource("tech-3", "Cy", EmploymentStatus.ON_LEAVE.value)
    active = Resource("tech-4", "Di", EmploymentStatus.ACTIVE.value)
    assert available_resources([ANA, away, active]) == [ANA, active]


def test_jobs_on_filters_by_day_and_sorts():
    jobs = [
        _make_job("late", start=_at(15)),
        _make_job("early", start=_at(8)),
        _make_job("tomorrow", start=_at(8, WEDNESDAY + timedelta(days=1))),
        _make_job("queue"),
    ]
    assert [job.id for job in jobs_on(jobs, WEDNESDAY)] == ["early", "late"]


def test_technician_load_and_availability():
    jobs = [
        _make_job("a", start=_at(8), hours=4),
        _make_job("b", start=_at(13), hours=4),
        _make_job("c", resource_id="tech-2", start=_at(9), hours=2.5),
    ]
    loads = technician_load(jobs, [BEN, ANA], WEDNESDAY)
    assert [load.resource.id for load in loads] == ["tech-1", "tech-2"]

    ana, ben = loads
    assert ana.job_count == 2
    assert ana.hours_scheduled == 8
    assert ana.availability == "Full"
    assert ana.next_job.id == "a"
    assert ben.availability == "5.5h free"


def test_idle_technician_is_available():
    (load,) = technician_load([], [ANA], WEDNESDAY)
    assert load.availability == "Available"
    assert load.next_job is None


def test_day_summary_counts():
    jobs = [
        _make_job("a", start=_at(9)),
        _make_job("q1", resource_id=None, priority=JobPriority.URGENT),
        _make_job("q2", resource_id=None, priority=JobPriority.LOW),
    ]
    summary = day_summary(jobs, [ANA], WEDNESDAY)
    assert summary.jobs_today == 1
    assert summary.unassigned == 2
    assert summary.urgent_unassigned == 1
    assert summary.technicians[0].job_count == 1
