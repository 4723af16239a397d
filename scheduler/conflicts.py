"""
Conflict detector — does a proposed placement collide with a committed one?

Algorithm: linear scan.
    1. Keep only jobs on the same technician (and on the grid at all)
    2. Skip the job being moved, so it never collides with its own old slot
    3. Test half-open overlap: start_a < end_b and start_b < end_a
    4. Stop at the first hit

There is no interval tree: a technician carries a handful of jobs per day,
and the scan runs against whatever snapshot of the job collection is
current when the gesture commits.

Touching intervals (one ends at 10:00, the next starts at 10:00) are not
conflicts.
"""

from datetime import datetime
from typing import Iterable, Optional

from scheduler.base import ScheduledJob, TimeWindow
from scheduler.grid import to_aware
from scheduler.time_window import effective_window


def _committed_for(
    jobs: Iterable[ScheduledJob],
    resource_id: str,
    exclude_job_id: Optional[str],
):
    """Yield (job, window) for every committed job on this technician."""
    for job in jobs:
        if not job.is_schedulable or job.resource_id != resource_id:
            continue
        if exclude_job_id is not None and job.id == exclude_job_id:
            continue
        window = effective_window(job)
        if window is not None:
            yield job, window


def find_conflict(
    jobs: Iterable[ScheduledJob],
    resource_id: str,
    start: datetime,
    end: datetime,
    exclude_job_id: Optional[str] = None,
) -> Optional[ScheduledJob]:
    """Return the first committed job that overlaps [start, end), or None."""
    candidate = TimeWindow(to_aware(start), to_aware(end))
    for job, window in _committed_for(jobs, resource_id, exclude_job_id):
        if candidate.overlaps(window):
            return job
    return None


def has_conflict(
    jobs: Iterable[ScheduledJob],
    resource_id: str,
    start: datetime,
    end: datetime,
    exclude_job_id: Optional[str] = None,
) -> bool:
    return find_conflict(jobs, resource_id, start, end, exclude_job_id) is not None


def find_overlaps(jobs: Iterable[ScheduledJob]) -> list[tuple[ScheduledJob, ScheduledJob]]:
    """
    Audit a whole collection: every pair of same-technician jobs that overlap.

    The local detector is only a pre-check (another client can write between
    our read and our write), so this is how the API reports what actually
    ended up in the store. Pairs are ordered by start time.
    """
    by_resource: dict[str, list[tuple[ScheduledJob, TimeWindow]]] = {}
    for job in jobs:
        if not job.is_schedulable:
            continue
        window = effective_window(job)
        by_resource.setdefault(job.resource_id, []).append((job, window))

    pairs = []
    for placed in by_resource.values():
        placed.sort(key=lambda item: (item[1].start, item[0].id))
        for i, (job_a, window_a) in enumerate(placed):
            for job_b, window_b in placed[i + 1:]:
                # sorted by start: once b starts at/after a ends, later ones do too
                if window_b.start >= window_a.end:
                    break
                pairs.append((job_a, job_b))
    return pairs
