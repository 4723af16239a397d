"""
Unassigned queue — the jobs waiting for a technician or a time slot.

A job is in the queue iff:
    (no technician OR no start) AND not archived AND not completed/invoiced/paid

That is exactly the complement of the grid's "schedulable" predicate over
active jobs, so a job is never both in the queue and on the grid.

The queue is also the drag source for the unassigned → assigned
transition: the controller accepts DragPayloads built from these jobs.

Every function here returns a new list in the original order; the input
collection is never modified.
"""

from typing import Iterable, Optional

from models.enums import CLOSED_STATUSES, JobPriority
from scheduler.base import ScheduledJob


def is_unassigned(job: ScheduledJob) -> bool:
    missing_slot = job.resource_id is None or job.scheduled_start is None
    return missing_slot and job.archived_at is None and job.status not in CLOSED_STATUSES


def unassigned(jobs: Iterable[ScheduledJob]) -> list[ScheduledJob]:
    return [job for job in jobs if is_unassigned(job)]


def _matches_search(job: ScheduledJob, needle: str) -> bool:
    if not needle:
        return True
    lowered = needle.lower()
    return (
        lowered in job.title.lower()
        or lowered in job.job_number.lower()
        or lowered in (job.customer_name or "").lower()
        or needle in (job.customer_zip or "")
    )


def filter_queue(
    jobs: Iterable[ScheduledJob],
    search: str = "",
    priority: Optional[JobPriority | str] = None,
) -> list[ScheduledJob]:
    """
    Narrow an already-unassigned list by free text and priority tier.

    search matches title, job number and customer name case-insensitively,
    and the customer zip as a plain substring. priority None or "all"
    disables the tier filter.
    """
    needle = search.strip()
    tier = None if priority in (None, "all") else JobPriority(priority)
    return [
        job for job in jobs
        if _matches_search(job, needle) and (tier is None or job.priority == tier)
    ]


def urgent_unassigned(jobs: Iterable[ScheduledJob]) -> list[ScheduledJob]:
    """Queue entries that need attention first (urgent or high)."""
    return [
        job for job in unassigned(jobs)
        if job.priority in (JobPriority.URGENT, JobPriority.HIGH)
    ]
