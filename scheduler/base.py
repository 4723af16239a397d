"""
Value objects shared by every part of the scheduling core.

ScheduledJob is a lightweight data transfer object (DTO) — just the fields
the scheduler needs to place, check and move a job. It does NOT hold the
ORM row, keeping the scheduling layer independent of SQLAlchemy: tests
build ScheduledJob directly, and store/repository.py converts rows into it.

AssignmentUpdate is the one value that leaves the core: the partial change
handed to the update collaborator when a gesture commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from models.enums import JobStatus, JobPriority


@dataclass(frozen=True)
class ScheduledJob:
    """
    A job as the scheduler sees it.

    Frozen because the scheduler never mutates the shared job collection;
    every change goes through the update collaborator and comes back as a
    new snapshot.
    """
    id: str
    title: str = ""
    job_number: str = ""
    resource_id: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    estimated_duration: Optional[int] = None   # minutes
    status: JobStatus = JobStatus.DRAFT
    priority: JobPriority = JobPriority.MEDIUM
    archived_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_zip: Optional[str] = None

    @property
    def is_schedulable(self) -> bool:
        """On the grid iff it has a technician and a start, and is not archived."""
        return (
            self.resource_id is not None
            and self.scheduled_start is not None
            and self.archived_at is None
        )

    @property
    def label(self) -> str:
        if self.job_number and self.title:
            return f"{self.job_number} - {self.title}"
        return self.job_number or self.title or self.id


@dataclass(frozen=True)
class Resource:
    """A technician column. Supplied by the embedding app, never edited here."""
    id: str
    title: str
    employment_status: Optional[str] = None


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""
    start: datetime
    end: datetime

    @property
    def minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, other: "TimeWindow") -> bool:
        # touching intervals (self.end == other.start) do not overlap
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class CandidateAssignment:
    """Proposed placement built during a single gesture and discarded after it."""
    job_id: str
    resource_id: str
    proposed_start: datetime
    proposed_end: datetime

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.proposed_start, self.proposed_end)


class AssignmentUpdate(BaseModel):
    """
    Partial change sent to the update collaborator.

    Only fields that were explicitly set are sent:
        AssignmentUpdate(scheduled_end=...).model_dump(exclude_unset=True)
        → {"scheduled_end": ...}
    """

    resource_id: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    status: Optional[JobStatus] = None
    estimated_duration: Optional[int] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)
