"""
Write side of the job store — the update collaborator.

    update_job_assignment(job_id, AssignmentUpdate) -> ScheduledJob | None

Two implementations of the same contract (scheduler.controller.JobUpdater):

- SqlJobUpdater: writes the row directly with an async SQLAlchemy session.
  Used by the API, which owns the database.
- HttpJobUpdater: calls PATCH /jobs/{id}/assignment on a remote job store
  with httpx. Used by clients that embed the scheduler away from the
  database. Every transport error or non-2xx response becomes
  UpdateFailedError. A 2xx without a job record in the body resolves to
  None.

Only the fields set on the AssignmentUpdate are written; an update that
only changes scheduled_end leaves the technician and the start alone.
"""

import logging
import uuid as _uuid
from datetime import datetime
from typing import Optional

import httpx
from sqlalchemy import select

from config.settings import settings
from models.enums import JobStatus, JobPriority
from models.job import Job
from scheduler.base import AssignmentUpdate, ScheduledJob
from scheduler.errors import JobNotFoundError, UpdateFailedError
from store.repository import to_scheduled_job

logger = logging.getLogger(__name__)

# AssignmentUpdate field → Job column
_COLUMNS = {
    "resource_id": "assigned_to",
    "scheduled_start": "scheduled_start",
    "scheduled_end": "scheduled_end",
    "status": "status",
    "estimated_duration": "estimated_duration",
}


def _parse_uuid(value: str) -> _uuid.UUID:
    try:
        return _uuid.UUID(str(value))
    except (ValueError, AttributeError) as e:
        raise JobNotFoundError(value) from e


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def apply_update(job: Job, update: AssignmentUpdate) -> None:
    """Copy the set fields of an update onto an ORM row."""
    for field, value in update.changes().items():
        column = _COLUMNS[field]
        if field == "resource_id" and value is not None:
            value = _parse_uuid(value)
        elif field == "status":
            if value is None:
                continue   # status is NOT NULL; an explicit null means "leave it"
            value = value.value
        setattr(job, column, value)


class SqlJobUpdater:

    def __init__(self, session_factory):
        self._session_factory = session_factory

    async def update_job_assignment(self, job_id: str, update: AssignmentUpdate) -> ScheduledJob:
        uid = _parse_uuid(job_id)
        async with self._session_factory() as session:
            result = await session.execute(select(Job).where(Job.id == uid))
            job = result.scalar_one_or_none()
            if job is None:
                raise JobNotFoundError(job_id)

            apply_update(job, update)
            await session.commit()
            await session.refresh(job)
            logger.info(f"Job {job.job_number} updated: {sorted(update.changes())}")
            return to_scheduled_job(job)


class HttpJobUpdater:

    def __init__(self, base_url: Optional[str] = None, client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.JOB_STORE_URL,
            timeout=settings.UPDATE_TIMEOUT_SECONDS,
        )

    async def update_job_assignment(self, job_id: str, update: AssignmentUpdate) -> Optional[ScheduledJob]:
        body = update.model_dump(mode="json", exclude_unset=True)
        try:
            response = await self._client.patch(f"/jobs/{job_id}/assignment", json=body)
        except httpx.HTTPError as e:
            raise UpdateFailedError(f"Job store unreachable: {e}") from e

        if response.status_code == 404:
            raise JobNotFoundError(job_id)
        if response.is_error:
            raise UpdateFailedError(
                f"Job store rejected update for {job_id}: HTTP {response.status_code}"
            )

        # a 2xx without a job record is still a successful write
        if not response.content:
            return None
        try:
            data = response.json()
        except ValueError:
            logger.debug(f"Job store acknowledged {job_id} without a JSON body")
            return None
        if not isinstance(data, dict) or "id" not in data:
            return None

        return ScheduledJob(
            id=data["id"],
            title=data.get("title", ""),
            job_number=data.get("job_number", ""),
            resource_id=data.get("assigned_to"),
            scheduled_start=_parse_dt(data.get("scheduled_start")),
            scheduled_end=_parse_dt(data.get("scheduled_end")),
            estimated_duration=data.get("estimated_duration"),
            status=JobStatus(data.get("status", JobStatus.DRAFT.value)),
            priority=JobPriority(data.get("priority", JobPriority.MEDIUM.value)),
            archived_at=_parse_dt(data.get("archived_at")),
            customer_name=data.get("customer_name"),
            customer_zip=data.get("customer_zip"),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
