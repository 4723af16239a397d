"""
Job endpoints — the job store the scheduler reads from and writes to.

POST  /jobs/                   → Create a job (usually unassigned, status draft)
GET   /jobs/                   → List jobs with filtering + pagination
GET   /jobs/{job_id}           → Get a single job
PATCH /jobs/{job_id}/assignment → The update collaborator: change technician,
                                  time window, status or estimated duration
POST  /jobs/{job_id}/archive   → Hide a job from every scheduling surface

The PATCH body is a partial update: only the fields present in the request
are written. This is the endpoint HttpJobUpdater talks to.
"""

from datetime import datetime, timezone
from uuid import UUID
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from api.dependencies import get_db, get_updater
from api.schemas.job import JobCreate, JobResponse, JobListResponse
from models.job import Job
from models.technician import Technician
from models.enums import JobStatus
from scheduler.base import AssignmentUpdate
from scheduler.errors import JobNotFoundError
from store.updater import SqlJobUpdater

router = APIRouter(prefix="/jobs", tags=["jobs"])


async def _get_or_404(db: AsyncSession, job_id: UUID) -> Job:
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    if job is None:
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
    return job


async def _technician_or_422(db: AsyncSession, resource_id: str) -> Technician:
    try:
        uid = UUID(resource_id)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"resource_id {resource_id!r} is not a technician id")
    technician = await db.get(Technician, uid)
    if technician is None:
        raise HTTPException(status_code=422, detail=f"Technician {resource_id} not found")
    return technician


def _as_utc(moment: Optional[datetime]) -> Optional[datetime]:
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=timezone.utc)


@router.post("/", response_model=JobResponse, status_code=201)
async def create_job(
    job_in: JobCreate,
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    job = Job(
        job_number=job_in.job_number,
        title=job_in.title,
        customer_name=job_in.customer_name,
        customer_zip=job_in.customer_zip,
        assigned_to=job_in.assigned_to,
        scheduled_start=job_in.scheduled_start,
        scheduled_end=job_in.scheduled_end,
        estimated_duration=job_in.estimated_duration,
        status=job_in.status.value,
        priority=job_in.priority.value,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)  # reload to get server-generated fields (id, created_at)
    return JobResponse.model_validate(job)


@router.get("/", response_model=JobListResponse)
async def list_jobs(
    status: Optional[JobStatus] = Query(None, description="Filter by job status"),
    assigned_to: Optional[UUID] = Query(None, description="Filter by technician"),
    include_archived: bool = Query(False),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Jobs per page"),
    db: AsyncSession = Depends(get_db),
) -> JobListResponse:
    conditions = []
    if status:
        conditions.append(Job.status == status.value)
    if assigned_to:
        conditions.append(Job.assigned_to == assigned_to)
    if not include_archived:
        conditions.append(Job.archived_at.is_(None))

    count_query = select(func.count(Job.id))
    if conditions:
        count_query = count_query.where(*conditions)
    total = (await db.execute(count_query)).scalar() or 0

    offset = (page - 1) * page_size
    query = select(Job).where(*conditions) if conditions else select(Job)
    query = query.order_by(Job.created_at.desc()).offset(offset).limit(page_size)
    jobs = (await db.execute(query)).scalars().all()

    return JobListResponse(
        jobs=[JobResponse.model_validate(j) for j in jobs],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    return JobResponse.model_validate(await _get_or_404(db, job_id))


@router.patch("/{job_id}/assignment", response_model=JobResponse)
async def update_job_assignment(
    job_id: UUID,
    update: AssignmentUpdate,
    db: AsyncSession = Depends(get_db),
    updater: SqlJobUpdater = Depends(get_updater),
) -> JobResponse:
    """
    Apply a partial assignment change.

    The resulting window must still be a real interval: if both a start and
    an end end up set, the end has to be after the start (422 otherwise).
    Conflicts with other jobs are NOT checked here — that is the scheduler's
    client-side pre-check; the store only guarantees each record is sane.
    """
    job = await _get_or_404(db, job_id)
    changes = update.changes()
    start = _as_utc(changes.get("scheduled_start", job.scheduled_start))
    end = _as_utc(changes.get("scheduled_end", job.scheduled_end))
    if start is not None and end is not None and end <= start:
        raise HTTPException(status_code=422, detail="scheduled_end must be after scheduled_start")
    if job.archived_at is not None:
        raise HTTPException(status_code=409, detail=f"Job {job_id} is archived")
    if changes.get("resource_id") is not None:
        await _technician_or_422(db, changes["resource_id"])

    try:
        await updater.update_job_assignment(str(job_id), update)
    except JobNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return JobResponse.model_validate(await _get_or_404(db, job_id))


@router.post("/{job_id}/archive", response_model=JobResponse)
async def archive_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> JobResponse:
    """Archive instead of delete: the job keeps its history but leaves the grid and the queue."""
    job = await _get_or_404(db, job_id)
    if job.archived_at is None:
        job.archived_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(job)
    return JobResponse.model_validate(job)
