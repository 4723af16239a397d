"""
Drag payloads — what travels from the drag source to the drop target.

A drag from the grid or from the unassigned queue serializes the job into
a DragPayload; the drop target parses it back. Parsing is the one place
where untrusted data enters a gesture, so it is validated with pydantic
and anything that fails becomes MalformedPayloadError, which the
controller logs and treats as a cancelled gesture.

How the payload physically crosses from widget to widget (a browser
dataTransfer, a websocket message, a test fixture) is the embedding app's
business; this module only defines the value and its JSON form.
"""

from datetime import datetime
from typing import Literal, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from models.enums import JobStatus, JobPriority
from scheduler.base import ScheduledJob
from scheduler.errors import MalformedPayloadError


class DragPayload(BaseModel):
    """Snapshot of the dragged job, taken when the drag starts."""

    job_id: str
    source: Literal["grid", "queue"] = "grid"
    title: str = ""
    job_number: str = ""
    resource_id: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    status: JobStatus = JobStatus.DRAFT
    priority: JobPriority = JobPriority.MEDIUM

    model_config = {"frozen": True}

    @classmethod
    def from_job(cls, job: ScheduledJob, source: str = "grid") -> "DragPayload":
        return cls(
            job_id=job.id,
            source=source,
            title=job.title,
            job_number=job.job_number,
            resource_id=job.resource_id,
            scheduled_start=job.scheduled_start,
            scheduled_end=job.scheduled_end,
            estimated_duration=job.estimated_duration,
            status=job.status,
            priority=job.priority,
        )

    def to_job(self) -> ScheduledJob:
        return ScheduledJob(
            id=self.job_id,
            title=self.title,
            job_number=self.job_number,
            resource_id=self.resource_id,
            scheduled_start=self.scheduled_start,
            scheduled_end=self.scheduled_end,
            estimated_duration=self.estimated_duration,
            status=self.status,
            priority=self.priority,
        )

    def to_json(self) -> str:
        return self.model_dump_json()


def parse_drag_payload(raw: Union[str, bytes, Mapping, DragPayload]) -> DragPayload:
    """Accept a payload in any form a drop adapter may hand over."""
    if isinstance(raw, DragPayload):
        return raw
    try:
        if isinstance(raw, (str, bytes)):
            return DragPayload.model_validate_json(raw)
        if isinstance(raw, Mapping):
            return DragPayload.model_validate(dict(raw))
    except ValidationError as e:
        raise MalformedPayloadError(f"Drag payload is not a job reference: {e}") from e
    raise MalformedPayloadError(f"Unsupported drag payload type: {type(raw).__name__}")
