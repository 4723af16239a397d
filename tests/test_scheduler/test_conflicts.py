"""
Tests for the conflict detector.

Same-technician, half-open interval overlap; the job being moved never
conflicts with its own previous slot.
"""

from datetime import datetime, timedelta, timezone

from models.enums import JobStatus
from scheduler.base import ScheduledJob
from scheduler.conflicts import has_conflict, find_conflict, find_overlaps


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 10, 21, hour, minute, tzinfo=timezone.utc)


def _make_job(job_id, resource_id="tech-1", start=None, end=None, estimate=None, archived=False):
    return ScheduledJob(
        id=job_id,
        resource_id=resource_id,
        scheduled_start=start,
        scheduled_end=end,
        estimated_duration=estimate,
        status=JobStatus.SCHEDULED,
        archived_at=_at(0) if archived else None,
    )


JOB_A = _make_job("a", start=_at(9), end=_at(10))


def test_overlapping_window_conflicts():
    """09:30–10:30 overlaps 09:00–10:00."""
    assert has_conflict([JOB_A], "tech-1", _at(9, 30), _at(10, 30))


def test_touching_windows_do_not_conflict():
    assert not has_conflict([JOB_A], "tech-1", _at(10), _at(11))
    assert not has_conflict([JOB_A], "tech-1", _at(8), _at(9))


def test_contained_window_conflicts():
    assert has_conflict([JOB_A], "tech-1", _at(9, 15), _at(9, 45))


def test_other_technician_never_conflicts():
    assert not has_conflict([JOB_A], "tech-2", _at(9), _at(10))


def test_excluded_job_does_not_conflict_with_itself():
    """Moving A by 15 minutes overlaps only A's own old slot."""
    assert not has_conflict([JOB_A], "tech-1", _at(9, 15), _at(10, 15), exclude_job_id="a")


def test_exclusion_still_sees_other_jobs():
    job_b = _make_job("b", start=_at(10), end=_at(11))
    assert has_conflict([JOB_A, job_b], "tech-1", _at(9, 30), _at(10, 30), exclude_job_id="a")


def test_unscheduled_and_archived_jobs_are_ignored():
    no_start = _make_job("u", start=None)
    archived = _make_job("z", start=_at(9), end=_at(10), archived=True)
    assert not has_conflict([no_start, archived], "tech-1", _at(9), _at(10))


def test_fallback_duration_is_used_for_existing_jobs():
    """A job with only an estimate occupies start + estimate."""
    job = _make_job("e", start=_at(13), estimate=90)
    assert has_conflict([job], "tech-1", _at(14), _at(15))
    assert not has_conflict([job], "tech-1", _at(14, 30), _at(15))


def test_find_conflict_returns_first_obstruction():
    job_b = _make_job("b", start=_at(11), end=_at(12))
    assert find_conflict([JOB_A, job_b], "tech-1", _at(11, 30), _at(12, 30)).id == "b"
    assert find_conflict([JOB_A, job_b], "tech-1", _at(10), _at(11)) is None


def test_find_overlaps_reports_same_resource_pairs():
    overlapping = _make_job("b", start=_at(9, 30), end=_at(10, 30))
    elsewhere = _make_job("c", resource_id="tech-2", start=_at(9), end=_at(10))
    touching = _make_job("d", start=_at(10, 30), end=_at(11))

    pairs = find_overlaps([touching, elsewhere, overlapping, JOB_A])
    assert [(a.id, b.id) for a, b in pairs] == [("a", "b")]


def test_find_overlaps_empty_when_invariant_holds():
    jobs = [
        _make_job("a", start=_at(8), end=_at(9)),
        _make_job("b", start=_at(9), end=_at(10)),
        _make_job("c", start=_at(10), estimate=30),
    ]
    assert find_overlaps(jobs) == []
