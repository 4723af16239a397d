"""
Tests for the gesture state machine and the candidate-window helpers.

transition() is pure, so these tests feed it events and inspect the
returned states; no controller, no job store.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.enums import JobStatus
from scheduler.base import ScheduledJob
from scheduler.gestures import (
    NoGesture, Dragging, Resizing, DropReady, ResizeReady, Cancelled, DropTarget,
    DragStarted, DraggedOver, DropRequested, DragCancelled,
    ResizeStarted, PointerMoved, PointerReleased, ResizeCancelled,
    transition, is_active, gesture_job_id,
    candidate_start, drop_window, resize_delta_minutes, resized_duration, resize_window,
)
from scheduler.payload import DragPayload

WEDNESDAY = date(2026, 10, 21)
NINE = datetime(2026, 10, 21, 9, 0, tzinfo=timezone.utc)


def _make_job(start=NINE, end=NINE + timedelta(hours=1), estimate=None):
    return ScheduledJob(
        id="job-1",
        resource_id="tech-1",
        scheduled_start=start,
        scheduled_end=end,
        estimated_duration=estimate,
        status=JobStatus.SCHEDULED,
    )


PAYLOAD = DragPayload(job_id="job-1")
TARGET = DropTarget(day=WEDNESDAY, resource_id="tech-2", hour=14)


# ── Drag ────────────────────────────────────────────────────────

def test_drag_lifecycle():
    state = transition(NoGesture(), DragStarted(PAYLOAD))
    assert state == Dragging(PAYLOAD)
    assert is_active(state)

    state = transition(state, DraggedOver(TARGET))
    assert state.hover == TARGET

    state = transition(state, DropRequested(TARGET))
    assert state == DropReady(PAYLOAD, TARGET)
    assert not is_active(state)
    assert gesture_job_id(state) == "job-1"


def test_drop_outside_any_cell_cancels():
    state = transition(Dragging(PAYLOAD), DropRequested(None))
    assert isinstance(state, Cancelled)
    assert not state.refused


def test_drag_cancel():
    state = transition(Dragging(PAYLOAD), DragCancelled())
    assert state == Cancelled("Drag cancelled", "job-1")


def test_irrelevant_events_leave_state_unchanged():
    assert transition(NoGesture(), PointerMoved(10.0)) == NoGesture()
    assert transition(NoGesture(), DropRequested(TARGET)) == NoGesture()
    dragging = Dragging(PAYLOAD)
    assert transition(dragging, PointerReleased(5.0)) is dragging
    assert transition(dragging, ResizeStarted(_make_job(), 0.0)) is dragging


def test_terminal_state_behaves_like_idle():
    state = transition(DropReady(PAYLOAD, TARGET), DragStarted(PAYLOAD))
    assert isinstance(state, Dragging)


# ── Resize ──────────────────────────────────────────────────────

def test_resize_lifecycle():
    job = _make_job()
    state = transition(NoGesture(), ResizeStarted(job, 100.0))
    assert state == Resizing(job, 100.0, 60, 100.0)

    state = transition(state, PointerMoved(130.0))
    assert state.pointer_y == 130.0

    state = transition(state, PointerReleased(140.0))
    assert state == ResizeReady(job, 60, 40.0)


def test_resize_cancel():
    state = transition(Resizing(_make_job(), 0.0, 60, 10.0), ResizeCancelled())
    assert state == Cancelled("Resize cancelled", "job-1")


def test_resize_refused_without_an_end():
    state = transition(NoGesture(), ResizeStarted(_make_job(end=None, estimate=60), 0.0))
    assert isinstance(state, Cancelled)
    assert state.refused


# ── Candidate windows ───────────────────────────────────────────

def test_hour_slot_drop_starts_on_the_hour():
    start = candidate_start(_make_job(), TARGET)
    assert start == datetime(2026, 10, 21, 14, 0, tzinfo=timezone.utc)


def test_day_drop_keeps_time_of_day():
    job = _make_job(start=datetime(2026, 10, 19, 10, 30, tzinfo=timezone.utc))
    start = candidate_start(job, DropTarget(day=WEDNESDAY))
    assert start == datetime(2026, 10, 21, 10, 30, tzinfo=timezone.utc)


def test_day_drop_without_time_uses_default_hour():
    job = _make_job(start=None, end=None)
    assert candidate_start(job, DropTarget(day=WEDNESDAY)).hour == 9


def test_drop_window_keeps_exact_length():
    job = _make_job(end=NINE + timedelta(minutes=100))
    window = drop_window(job, TARGET)
    assert window.minutes == 100


def test_drop_window_uses_estimate_when_no_end():
    job = _make_job(start=None, end=None, estimate=45)
    window = drop_window(job, TARGET)
    assert window.end == datetime(2026, 10, 21, 14, 45, tzinfo=timezone.utc)


def test_drop_window_defaults_to_an_hour():
    window = drop_window(_make_job(start=None, end=None), TARGET)
    assert window.minutes == 60


@pytest.mark.parametrize("pixels, minutes", [
    (0, 0),
    (5, 0),
    (40, 45),      # 48 minutes snaps to 45
    (50, 60),
    (-40, -45),
    (6.25, 15),    # exactly half a slot rounds away from zero
    (-6.25, -15),
])
def test_resize_delta_snaps_to_quarter_hours(pixels, minutes):
    assert resize_delta_minutes(pixels) == minutes


def test_resized_duration_never_below_minimum():
    assert resized_duration(60, -200) == 15
    assert resized_duration(60, 40) == 105


def test_resize_window_keeps_start():
    window = resize_window(_make_job(), 60, 40)
    assert window.start == NINE
    assert window.end == NINE + timedelta(minutes=105)
