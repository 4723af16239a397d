"""
Scheduler endpoints — the scheduling core, served over a job store snapshot.

GET  /scheduler/grid             → Project jobs onto a day/week/month grid
GET  /scheduler/unassigned       → The unassigned queue, with search + priority filter
POST /scheduler/conflicts/check  → Ask the conflict detector about a window
GET  /scheduler/overlaps         → Audit: same-technician overlaps actually in the store
POST /scheduler/reschedule       → Run a drag gesture (drop on a cell) and commit it
POST /scheduler/resize           → Run a resize gesture and commit it
GET  /scheduler/load             → Technician load summary for a day

Each request loads a fresh snapshot of jobs and technicians and hands plain
dataclasses to scheduler/*. Gesture endpoints drive an InteractionController
exactly as a UI would (start → drop, start → release), then wait for the
commit so the HTTP response can carry the resulting notice:

    success  → 200
    conflict / refused → 409
    job store failure  → 502
"""

import logging
from dataclasses import asdict
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, get_redis, get_updater
from api.locks import JobCommitLock
from api.schemas.scheduler import (
    BlockOut, CellOut, GridResponse, ResourceOut,
    QueueEntry, UnassignedResponse,
    ConflictCheck, ConflictResult, OverlapPair,
    RescheduleRequest, ResizeRequest, GestureResult,
    TechnicianLoadOut, DaySummaryOut,
)
from models.enums import JobPriority, NoticeLevel, ViewMode
from scheduler.base import ScheduledJob
from scheduler.conflicts import find_conflict, find_overlaps
from scheduler.controller import InteractionController
from scheduler.gestures import DropTarget
from scheduler.grid import GridView, project
from scheduler.load import available_resources, day_summary
from scheduler.notices import NoticeLog
from scheduler.payload import DragPayload
from scheduler.render import legend, month_cell, time_block
from scheduler.time_window import format_duration
from scheduler.unassigned import filter_queue, unassigned
from store.repository import load_jobs, load_resources
from store.updater import SqlJobUpdater

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduler", tags=["scheduler"])

_STATUS_CODES = {
    NoticeLevel.SUCCESS: 200,
    NoticeLevel.CONFLICT: 409,
    NoticeLevel.INFO: 409,
    NoticeLevel.ERROR: 502,
}


def _find_job(jobs: list[ScheduledJob], job_id: str) -> ScheduledJob:
    for job in jobs:
        if job.id == job_id:
            return job
    raise HTTPException(status_code=404, detail=f"Job {job_id} not found")


@router.get("/grid", response_model=GridResponse)
async def get_grid(
    view: ViewMode = Query(ViewMode.DAY),
    day: Optional[date] = Query(None, description="Reference date, defaults to today"),
    db: AsyncSession = Depends(get_db),
) -> GridResponse:
    grid_view = GridView(view=view) if day is None else GridView(view=view, reference_date=day)
    jobs = await load_jobs(db)
    resources = available_resources(await load_resources(db))
    projection = project(jobs, grid_view, resources)

    cells = []
    for cell, placed in projection.buckets.items():
        out = CellOut(
            day=cell.day,
            resource_id=cell.resource_id,
            hour=cell.hour,
            job_ids=[job.id for job in placed],
        )
        if view == ViewMode.MONTH:
            summary = month_cell(placed)
            out.chips = list(summary.chips)
            out.more = summary.more
        else:
            out.blocks = [BlockOut(**asdict(time_block(job))) for job in placed]
        cells.append(out)
    cells.sort(key=lambda c: (c.day, c.resource_id or "", c.hour or 0))

    return GridResponse(
        view=view,
        reference_date=grid_view.reference_date,
        title=grid_view.title(),
        days=list(projection.days),
        hours=list(projection.hours),
        resources=[ResourceOut(id=r.id, title=r.title) for r in projection.resources],
        cells=cells,
        out_of_band=[job.id for job in projection.out_of_band],
        legend=legend(),
    )


@router.get("/unassigned", response_model=UnassignedResponse)
async def get_unassigned(
    search: str = Query("", description="Matches title, job number, customer name or zip"),
    priority: Optional[JobPriority] = Query(None),
    db: AsyncSession = Depends(get_db),
) -> UnassignedResponse:
    queue = filter_queue(unassigned(await load_jobs(db)), search=search, priority=priority)
    entries = [
        QueueEntry(
            id=job.id,
            job_number=job.job_number,
            title=job.title,
            customer_name=job.customer_name,
            customer_zip=job.customer_zip,
            priority=job.priority.value,
            status=job.status.value,
            duration_label=format_duration(job.estimated_duration) if job.estimated_duration else None,
        )
        for job in queue
    ]
    return UnassignedResponse(jobs=entries, total=len(entries))


@router.post("/conflicts/check", response_model=ConflictResult)
async def check_conflict(
    check: ConflictCheck,
    db: AsyncSession = Depends(get_db),
) -> ConflictResult:
    obstruction = find_conflict(
        await load_jobs(db), check.resource_id, check.start, check.end, check.exclude_job_id
    )
    return ConflictResult(
        conflict=obstruction is not None,
        conflicting_job_id=obstruction.id if obstruction else None,
    )


@router.get("/overlaps", response_model=list[OverlapPair])
async def get_overlaps(db: AsyncSession = Depends(get_db)) -> list[OverlapPair]:
    return [
        OverlapPair(resource_id=a.resource_id, first_job_id=a.id, second_job_id=b.id)
        for a, b in find_overlaps(await load_jobs(db))
    ]


async def _run_gesture(
    db: AsyncSession,
    redis: Redis,
    updater: SqlJobUpdater,
    job_id: str,
    gesture,
) -> GestureResult:
    """Drive one gesture through a fresh controller under the job's commit lock."""
    async with JobCommitLock(redis).hold(job_id) as locked:
        if not locked:
            raise HTTPException(status_code=409, detail="This job is still being saved, try again in a moment")

        jobs = await load_jobs(db)
        resources = await load_resources(db)
        job = _find_job(jobs, job_id)

        notices = NoticeLog()
        controller = InteractionController(
            jobs_provider=lambda: jobs,
            updater=updater,
            notifier=notices,
            resources_provider=lambda: resources,
        )
        handle = gesture(controller, job)
        if handle is not None:
            await handle.wait()

    notice = notices.last
    if notice is None:
        # gesture ended without a commit attempt or a refusal (e.g. dropped nowhere)
        raise HTTPException(status_code=409, detail="Gesture cancelled")

    result = GestureResult(level=notice.level, message=notice.message, job_id=notice.job_id)
    status_code = _STATUS_CODES[notice.level]
    if status_code != 200:
        raise HTTPException(status_code=status_code, detail=result.model_dump(mode="json"))
    return result


@router.post("/reschedule", response_model=GestureResult)
async def reschedule_job(
    request: RescheduleRequest,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
    updater: SqlJobUpdater = Depends(get_updater),
) -> GestureResult:
    """
    Drop a job on a cell.

    With an hour the job starts at HH:00; without one it keeps its time of
    day (or starts at the default hour if it never had one). Without a
    resource_id it stays with its current technician.
    """
    if request.resource_id is not None:
        columns = available_resources(await load_resources(db))
        if not any(resource.id == request.resource_id for resource in columns):
            raise HTTPException(status_code=404, detail=f"Technician {request.resource_id} is not on the schedule")

    target = DropTarget(day=request.day, resource_id=request.resource_id, hour=request.hour)

    def gesture(controller: InteractionController, job: ScheduledJob):
        source = "queue" if not job.is_schedulable else "grid"
        controller.start_drag(DragPayload.from_job(job, source=source))
        controller.drag_over(target)
        return controller.drop(target)

    return await _run_gesture(db, redis, updater, request.job_id, gesture)


@router.post("/resize", response_model=GestureResult)
async def resize_job(
    request: ResizeRequest,
    db: AsyncSession = Depends(get_db),
    redis: Redis = Depends(get_redis),
    updater: SqlJobUpdater = Depends(get_updater),
) -> GestureResult:
    """Stretch (positive pixel_delta) or shrink a job's bottom edge."""

    def gesture(controller: InteractionController, job: ScheduledJob):
        if not controller.start_resize(job, 0.0):
            return None
        controller.pointer_move(request.pixel_delta)
        return controller.release(request.pixel_delta)

    return await _run_gesture(db, redis, updater, request.job_id, gesture)


@router.get("/load", response_model=DaySummaryOut)
async def get_load(
    day: Optional[date] = Query(None, description="Defaults to today"),
    db: AsyncSession = Depends(get_db),
) -> DaySummaryOut:
    day = day or GridView().today().reference_date
    summary = day_summary(
        await load_jobs(db), available_resources(await load_resources(db)), day
    )
    return DaySummaryOut(
        day=summary.day,
        jobs_today=summary.jobs_today,
        unassigned=summary.unassigned,
        urgent_unassigned=summary.urgent_unassigned,
        technicians=[
            TechnicianLoadOut(
                resource_id=load.resource.id,
                title=load.resource.title,
                job_count=load.job_count,
                hours_scheduled=round(load.hours_scheduled, 2),
                availability=load.availability,
                next_job_id=load.next_job.id if load.next_job else None,
            )
            for load in summary.technicians
        ],
    )
