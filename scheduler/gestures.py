"""
Gesture state machine — drag-to-reschedule and resize-to-change-duration.

One gesture at a time, modelled as a tagged union of immutable states:

    NoGesture ──DragStarted──> Dragging ──DraggedOver──> Dragging(hover=cell)
                                   │
                                   ├──DropRequested(cell)──> DropReady
                                   └──DropRequested(None) / DragCancelled──> Cancelled

    NoGesture ──ResizeStarted──> Resizing ──PointerMoved──> Resizing
                                   │
                                   ├──PointerReleased──> ResizeReady
                                   └──ResizeCancelled──> Cancelled

transition(state, event) is pure: it never looks at the job collection,
never talks to the job store, never awaits. The terminal states
(DropReady, ResizeReady, Cancelled) are consumed by the interaction
controller, which runs the conflict check and the commit and then goes
back to NoGesture.

Events that make no sense in the current state (a pointer move while
idle, a second DragStarted mid-resize) leave the state unchanged.

The helpers at the bottom turn a finished gesture into a candidate
window: where a drop lands on the clock, and how far a resize stretches.
"""

import math
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from config.settings import settings
from scheduler.base import ScheduledJob, TimeWindow
from scheduler.grid import display_zone, to_aware, to_local
from scheduler.payload import DragPayload
from scheduler.time_window import effective_window, window_from


@dataclass(frozen=True)
class DropTarget:
    """A grid cell under the pointer. resource_id is None in month view."""
    day: date
    resource_id: Optional[str] = None
    hour: Optional[int] = None


# ── States ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class NoGesture:
    pass


@dataclass(frozen=True)
class Dragging:
    payload: DragPayload
    hover: Optional[DropTarget] = None   # highlight only, never validated


@dataclass(frozen=True)
class Resizing:
    job: ScheduledJob
    anchor_y: float
    original_minutes: int
    pointer_y: float


@dataclass(frozen=True)
class DropReady:
    payload: DragPayload
    target: DropTarget


@dataclass(frozen=True)
class ResizeReady:
    job: ScheduledJob
    original_minutes: int
    pixel_delta: float


@dataclass(frozen=True)
class Cancelled:
    reason: str
    job_id: Optional[str] = None
    refused: bool = False   # True when the user should be told why nothing happened


GestureState = Union[NoGesture, Dragging, Resizing, DropReady, ResizeReady, Cancelled]
TERMINAL_STATES = (DropReady, ResizeReady, Cancelled)


# ── Events ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class DragStarted:
    payload: DragPayload


@dataclass(frozen=True)
class DraggedOver:
    target: Optional[DropTarget]


@dataclass(frozen=True)
class DropRequested:
    target: Optional[DropTarget]   # None = released outside any cell


@dataclass(frozen=True)
class DragCancelled:
    pass


@dataclass(frozen=True)
class ResizeStarted:
    job: ScheduledJob
    pointer_y: float


@dataclass(frozen=True)
class PointerMoved:
    pointer_y: float


@dataclass(frozen=True)
class PointerReleased:
    pointer_y: float


@dataclass(frozen=True)
class ResizeCancelled:
    pass


GestureEvent = Union[
    DragStarted, DraggedOver, DropRequested, DragCancelled,
    ResizeStarted, PointerMoved, PointerReleased, ResizeCancelled,
]


def is_active(state: GestureState) -> bool:
    return isinstance(state, (Dragging, Resizing))


def gesture_job_id(state: GestureState) -> Optional[str]:
    if isinstance(state, (Dragging, DropReady)):
        return state.payload.job_id
    if isinstance(state, (Resizing, ResizeReady)):
        return state.job.id
    if isinstance(state, Cancelled):
        return state.job_id
    return None


def transition(state: GestureState, event: GestureEvent) -> GestureState:
    # a finished gesture behaves like idle until the controller resets it
    if isinstance(state, TERMINAL_STATES):
        state = NoGesture()

    if isinstance(state, NoGesture):
        if isinstance(event, DragStarted):
            return Dragging(event.payload)
        if isinstance(event, ResizeStarted):
            return _start_resize(event)
        return state

    if isinstance(state, Dragging):
        if isinstance(event, DraggedOver):
            return replace(state, hover=event.target)
        if isinstance(event, DropRequested):
            if event.target is None:
                return Cancelled("Dropped outside the schedule", state.payload.job_id)
            return DropReady(state.payload, event.target)
        if isinstance(event, DragCancelled):
            return Cancelled("Drag cancelled", state.payload.job_id)
        return state

    if isinstance(state, Resizing):
        if isinstance(event, PointerMoved):
            return replace(state, pointer_y=event.pointer_y)
        if isinstance(event, PointerReleased):
            return ResizeReady(
                state.job, state.original_minutes, event.pointer_y - state.anchor_y
            )
        if isinstance(event, ResizeCancelled):
            return Cancelled("Resize cancelled", state.job.id)
        return state

    return state


def _start_resize(event: ResizeStarted) -> GestureState:
    job = event.job
    if job.scheduled_start is None or job.scheduled_end is None:
        return Cancelled(
            "Only jobs with a start and an end time can be resized", job.id, refused=True
        )
    window = effective_window(job)
    return Resizing(job, event.pointer_y, window.minutes, event.pointer_y)


# ── Candidate windows ───────────────────────────────────────────

def candidate_start(job: ScheduledJob, target: DropTarget) -> datetime:
    """
    Where a drop lands on the clock:
        hour slot targeted   → that day at HH:00
        job already had time → same time of day, new date
        otherwise            → DEFAULT_DROP_HOUR on that day
    """
    if target.hour is not None:
        return datetime.combine(target.day, time(target.hour), tzinfo=display_zone())

    if job.scheduled_start is not None:
        local = to_local(job.scheduled_start)
        return datetime.combine(target.day, local.time(), tzinfo=local.tzinfo)

    return datetime.combine(
        target.day, time(settings.DEFAULT_DROP_HOUR), tzinfo=display_zone()
    )


def drop_window(job: ScheduledJob, target: DropTarget) -> TimeWindow:
    """
    Candidate window for a drop.

    With both a start and an end, the job keeps its exact length. Otherwise
    the estimate (or the default duration) applies from the new start.
    """
    start = candidate_start(job, target)
    if job.scheduled_start is not None and job.scheduled_end is not None:
        length = to_aware(job.scheduled_end) - to_aware(job.scheduled_start)
        return window_from(start, start + length)
    return window_from(start, None, job.estimated_duration)


def resize_delta_minutes(pixel_delta: float) -> int:
    """
    Pointer travel → duration change, snapped to SLOT_MINUTES.

    At 50 px/hour, 40 px is 48 minutes, which snaps to 45. Rounds half
    away from zero so shrinking and stretching behave symmetrically.
    """
    raw = pixel_delta / settings.RESIZE_PIXELS_PER_HOUR * 60
    steps = math.floor(abs(raw) / settings.SLOT_MINUTES + 0.5)
    return int(math.copysign(steps * settings.SLOT_MINUTES, raw)) if steps else 0


def resized_duration(original_minutes: int, pixel_delta: float) -> int:
    return max(
        original_minutes + resize_delta_minutes(pixel_delta),
        settings.MIN_DURATION_MINUTES,
    )


def resize_window(job: ScheduledJob, original_minutes: int, pixel_delta: float) -> TimeWindow:
    minutes = resized_duration(original_minutes, pixel_delta)
    start = to_aware(job.scheduled_start)
    return TimeWindow(start, start + timedelta(minutes=minutes))
