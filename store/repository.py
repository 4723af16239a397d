"""
Read side of the job store: ORM rows → scheduler dataclasses.

The scheduler never holds a session. Whoever embeds it (the API, a script)
loads a snapshot here and hands the plain ScheduledJob / Resource lists to
the scheduling core.

SQLite (used in tests) drops tzinfo on the way back out, so naive
timestamps read from the database are taken as UTC.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.enums import JobStatus, JobPriority
from models.job import Job
from models.technician import Technician
from scheduler.base import ScheduledJob, Resource
from scheduler.load import resource_from_technician


def _aware(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=timezone.utc)


def to_scheduled_job(job: Job) -> ScheduledJob:
    return ScheduledJob(
        id=str(job.id),
        title=job.title,
        job_number=job.job_number,
        resource_id=str(job.assigned_to) if job.assigned_to else None,
        scheduled_start=_aware(job.scheduled_start),
        scheduled_end=_aware(job.scheduled_end),
        estimated_duration=job.estimated_duration,
        status=JobStatus(job.status),
        priority=JobPriority(job.priority),
        archived_at=_aware(job.archived_at),
        customer_name=job.customer_name,
        customer_zip=job.customer_zip,
    )


def to_resource(technician: Technician) -> Resource:
    return resource_from_technician(
        str(technician.id),
        technician.full_name,
        technician.email,
        technician.employment_status,
    )


async def load_jobs(session: AsyncSession, include_archived: bool = False) -> list[ScheduledJob]:
    query = select(Job).order_by(Job.scheduled_start, Job.created_at)
    if not include_archived:
        query = query.where(Job.archived_at.is_(None))
    result = await session.execute(query)
    return [to_scheduled_job(job) for job in result.scalars().all()]


async def load_job(session: AsyncSession, job_id) -> Optional[ScheduledJob]:
    result = await session.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    return to_scheduled_job(job) if job is not None else None


async def load_resources(session: AsyncSession) -> list[Resource]:
    result = await session.execute(select(Technician).order_by(Technician.full_name, Technician.email))
    return [to_resource(t) for t in result.scalars().all()]
