"""
Interaction controller — turns finished gestures into job store updates.

The controller owns the single GestureState and drives it with the pure
transition() from scheduler/gestures.py. Pointer handling is entirely
synchronous; only the commit crosses an async boundary:

    drop / release
        │
        ├─ read the job collection NOW (not at gesture start)
        ├─ build the candidate window
        ├─ conflict?  → conflict notice, no update, back to idle
        └─ no conflict → schedule the update as an asyncio task, back to idle
                            │
                            ├─ store accepts → success notice
                            └─ store raises  → error notice (nothing was
                                               applied locally, so nothing
                                               to roll back)

The update runs as a task the gesture never awaits, so the pointer stays
responsive. Per job, at most one commit is in flight: a new gesture on a
job whose update has not settled yet is refused. With
SUPERSEDE_INFLIGHT_COMMITS enabled it is allowed instead, and the older
commit is marked superseded so its outcome is ignored when it lands.

The local conflict check is optimistic. Another client can still write
between our read and our update; the job store has the final word.
"""

import asyncio
import logging
from typing import Callable, Iterable, Mapping, Optional, Protocol, Union

from config.settings import settings
from models.enums import JobStatus, NoticeLevel
from scheduler.base import AssignmentUpdate, CandidateAssignment, ScheduledJob, Resource, TimeWindow
from scheduler.conflicts import find_conflict
from scheduler.errors import MalformedPayloadError
from scheduler.gestures import (
    GestureState, GestureEvent, NoGesture, Dragging, Resizing, DropTarget,
    DragStarted, DraggedOver, DropRequested, DragCancelled,
    ResizeStarted, PointerMoved, PointerReleased, ResizeCancelled,
    DropReady, ResizeReady, Cancelled, TERMINAL_STATES,
    transition, is_active, drop_window, resize_window,
)
from scheduler.grid import to_local
from scheduler.notices import (
    Notice, Notifier, NoticeLog,
    CONFLICT_MESSAGE, RESIZE_CONFLICT_MESSAGE, DROP_FAILED_MESSAGE, RESIZE_FAILED_MESSAGE,
)
from scheduler.payload import DragPayload, parse_drag_payload
from scheduler.time_window import effective_window, format_duration

logger = logging.getLogger(__name__)


class JobUpdater(Protocol):
    """The update collaborator: the only writer of job records."""

    async def update_job_assignment(
        self, job_id: str, update: AssignmentUpdate
    ) -> Optional[ScheduledJob]:
        ...


class CommitHandle:
    """One in-flight update. Lets callers wait for it or tell it to stand down."""

    def __init__(self, job_id: str, update: AssignmentUpdate):
        self.job_id = job_id
        self.update = update
        self.task: Optional[asyncio.Task] = None
        self.superseded = False
        self.notice: Optional[Notice] = None

    def supersede(self) -> None:
        self.superseded = True

    @property
    def done(self) -> bool:
        return self.task is not None and self.task.done()

    async def wait(self) -> Optional[Notice]:
        if self.task is not None:
            await self.task
        return self.notice


def _obstruction(snapshot: list[ScheduledJob], candidate: CandidateAssignment) -> Optional[ScheduledJob]:
    """The job blocking a candidate placement; the candidate never blocks itself."""
    return find_conflict(
        snapshot,
        candidate.resource_id,
        candidate.proposed_start,
        candidate.proposed_end,
        exclude_job_id=candidate.job_id,
    )


def _clock(moment) -> str:
    local = to_local(moment)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{local:%a %b} {local.day} at {hour}:{local.minute:02d} {suffix}"


class InteractionController:

    def __init__(
        self,
        jobs_provider: Callable[[], Iterable[ScheduledJob]],
        updater: JobUpdater,
        notifier: Optional[Notifier] = None,
        resources_provider: Optional[Callable[[], Iterable[Resource]]] = None,
        supersede_inflight: Optional[bool] = None,
    ):
        self._jobs_provider = jobs_provider
        self._updater = updater
        self.notifier = notifier if notifier is not None else NoticeLog()
        self._resources_provider = resources_provider or (lambda: ())
        self._supersede = (
            settings.SUPERSEDE_INFLIGHT_COMMITS if supersede_inflight is None else supersede_inflight
        )
        self.state: GestureState = NoGesture()
        self._inflight: dict[str, CommitHandle] = {}

    # ── Drag ────────────────────────────────────────────────────

    def start_drag(self, payload: Union[DragPayload, str, bytes, Mapping]) -> bool:
        """Begin dragging a job card. Returns False if the drag was refused."""
        try:
            parsed = parse_drag_payload(payload)
        except MalformedPayloadError as e:
            logger.warning(f"Ignoring drag with malformed payload: {e}")
            return False
        self.dispatch(DragStarted(parsed))
        return isinstance(self.state, Dragging) and self.state.payload is parsed

    def drag_over(self, target: Optional[DropTarget]) -> None:
        self.dispatch(DraggedOver(target))

    def drop(self, target: Optional[DropTarget]) -> Optional[CommitHandle]:
        return self.dispatch(DropRequested(target))

    def cancel_drag(self) -> None:
        self.dispatch(DragCancelled())

    def drop_external(
        self, payload: Union[DragPayload, str, bytes, Mapping], target: Optional[DropTarget]
    ) -> Optional[CommitHandle]:
        """
        A drop whose payload arrives with the drop itself (e.g. from the
        unassigned queue). A payload that does not parse is logged and the
        drop becomes a no-op.
        """
        if not self.start_drag(payload):
            return None
        return self.drop(target)

    # ── Resize ──────────────────────────────────────────────────

    def start_resize(self, job: ScheduledJob, pointer_y: float) -> bool:
        self.dispatch(ResizeStarted(job, pointer_y))
        return isinstance(self.state, Resizing) and self.state.job is job

    def pointer_move(self, pointer_y: float) -> None:
        self.dispatch(PointerMoved(pointer_y))

    def release(self, pointer_y: float) -> Optional[CommitHandle]:
        return self.dispatch(PointerReleased(pointer_y))

    def cancel_resize(self) -> None:
        self.dispatch(ResizeCancelled())

    # ── State machine plumbing ──────────────────────────────────

    def dispatch(self, event: GestureEvent) -> Optional[CommitHandle]:
        if isinstance(event, (DragStarted, ResizeStarted)):
            if is_active(self.state):
                logger.debug("Gesture already in progress, ignoring new gesture")
                return None
            job_id = event.payload.job_id if isinstance(event, DragStarted) else event.job.id
            if self.is_busy(job_id) and not self._supersede:
                self._notify(NoticeLevel.INFO, "This job is still being saved, try again in a moment", job_id)
                return None

        self.state = transition(self.state, event)
        if not isinstance(self.state, TERMINAL_STATES):
            return None

        finished, self.state = self.state, NoGesture()
        if isinstance(finished, DropReady):
            return self._commit_drop(finished)
        if isinstance(finished, ResizeReady):
            return self._commit_resize(finished)
        return self._cancelled(finished)

    def _cancelled(self, state: Cancelled) -> None:
        logger.info(f"Gesture cancelled for job {state.job_id}: {state.reason}")
        if state.refused:
            self._notify(NoticeLevel.INFO, state.reason, state.job_id)
        return None

    # ── Commits ─────────────────────────────────────────────────

    def _snapshot(self) -> list[ScheduledJob]:
        return list(self._jobs_provider())

    @staticmethod
    def _current(job: ScheduledJob, snapshot: list[ScheduledJob]) -> ScheduledJob:
        """Prefer the collection's copy of the job over the one captured at gesture start."""
        for candidate in snapshot:
            if candidate.id == job.id:
                return candidate
        return job

    def _resource_title(self, resource_id: str) -> str:
        for resource in self._resources_provider():
            if resource.id == resource_id:
                return resource.title
        return "technician"

    def _commit_drop(self, finished: DropReady) -> Optional[CommitHandle]:
        snapshot = self._snapshot()
        job = self._current(finished.payload.to_job(), snapshot)
        target = finished.target

        resource_id = target.resource_id or job.resource_id
        if resource_id is None:
            self._notify(NoticeLevel.INFO, "Drop the job on a technician to assign it", job.id)
            return None

        window = drop_window(job, target)
        candidate = CandidateAssignment(job.id, resource_id, window.start, window.end)
        obstruction = _obstruction(snapshot, candidate)
        if obstruction is not None:
            logger.info(
                f"Drop of job {job.id} on {resource_id} at {window.start.isoformat()} "
                f"blocked by job {obstruction.id}"
            )
            self._notify(NoticeLevel.CONFLICT, CONFLICT_MESSAGE, job.id)
            return None

        fields = {"scheduled_start": window.start, "scheduled_end": window.end}
        if target.resource_id is not None:
            fields["resource_id"] = target.resource_id
        if job.status == JobStatus.DRAFT:
            fields["status"] = JobStatus.SCHEDULED
        update = AssignmentUpdate(**fields)

        verb = "moved" if job.resource_id is not None else "assigned"
        success = (
            f"Job {job.job_number or job.id} {verb} to {self._resource_title(resource_id)} "
            f"on {_clock(window.start)}"
        )
        return self._launch(job, update, success, DROP_FAILED_MESSAGE)

    def _commit_resize(self, finished: ResizeReady) -> Optional[CommitHandle]:
        snapshot = self._snapshot()
        job = self._current(finished.job, snapshot)
        if job.resource_id is None or job.scheduled_start is None:
            self._notify(NoticeLevel.INFO, "Only scheduled jobs can be resized", job.id)
            return None

        # the length is re-read from the commit-time copy, not the one seen at press
        base_minutes = effective_window(job).minutes
        window: TimeWindow = resize_window(job, base_minutes, finished.pixel_delta)
        candidate = CandidateAssignment(job.id, job.resource_id, window.start, window.end)
        obstruction = _obstruction(snapshot, candidate)
        if obstruction is not None:
            logger.info(f"Resize of job {job.id} to {window.minutes}m blocked by job {obstruction.id}")
            self._notify(NoticeLevel.CONFLICT, RESIZE_CONFLICT_MESSAGE, job.id)
            return None

        update = AssignmentUpdate(scheduled_end=window.end, estimated_duration=window.minutes)
        success = f"Duration updated to {format_duration(window.minutes)}"
        return self._launch(job, update, success, RESIZE_FAILED_MESSAGE)

    def _launch(
        self, job: ScheduledJob, update: AssignmentUpdate, success: str, failure: str
    ) -> CommitHandle:
        handle = CommitHandle(job.id, update)
        prior = self._inflight.get(job.id)
        if prior is not None and not prior.done:
            logger.info(f"Superseding in-flight update for job {job.id}")
            prior.supersede()
        self._inflight[job.id] = handle

        loop = asyncio.get_running_loop()
        handle.task = loop.create_task(self._run_commit(handle, success, failure))
        logger.info(f"Committing job {job.id}: {update.changes()}")
        return handle

    async def _run_commit(self, handle: CommitHandle, success: str, failure: str) -> None:
        try:
            await self._updater.update_job_assignment(handle.job_id, handle.update)
        except Exception as e:
            # gesture boundary: a failed update never escapes as an unhandled error
            if handle.superseded:
                logger.info(f"Superseded update for job {handle.job_id} failed, ignoring: {e}")
                return
            logger.warning(f"Update for job {handle.job_id} failed: {e}", exc_info=True)
            handle.notice = self._notify(NoticeLevel.ERROR, failure, handle.job_id)
        else:
            if handle.superseded:
                logger.info(f"Superseded update for job {handle.job_id} landed, ignoring")
                return
            handle.notice = self._notify(NoticeLevel.SUCCESS, success, handle.job_id)
        finally:
            if self._inflight.get(handle.job_id) is handle:
                del self._inflight[handle.job_id]

    # ── In-flight bookkeeping ───────────────────────────────────

    def is_busy(self, job_id: str) -> bool:
        handle = self._inflight.get(job_id)
        return handle is not None and not handle.done

    def pending(self) -> list[CommitHandle]:
        return [h for h in self._inflight.values() if not h.done]

    def abandon(self, job_id: str) -> None:
        """Stop waiting for a job's in-flight update; its outcome will be ignored."""
        handle = self._inflight.pop(job_id, None)
        if handle is not None:
            handle.supersede()

    async def drain(self) -> None:
        """Wait for every in-flight update to settle."""
        tasks = [h.task for h in self.pending() if h.task is not None]
        if tasks:
            await asyncio.gather(*tasks)

    def _notify(self, level: NoticeLevel, message: str, job_id: Optional[str]) -> Notice:
        notice = Notice(level, message, job_id)
        self.notifier.notify(notice)
        return notice
