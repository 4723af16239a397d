"""
User-facing notices ("toasts").

Every commit attempt ends in exactly one notice: success, conflict or
error. Refused gestures (busy job, nothing to resize, no technician
column) get an info notice. The controller hands them to a Notifier; the
embedding app decides how to show them.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from models.enums import NoticeLevel

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "This technician already has a job scheduled at this time"
RESIZE_CONFLICT_MESSAGE = "Cannot extend - conflicts with another job"
DROP_FAILED_MESSAGE = "Failed to update job"
RESIZE_FAILED_MESSAGE = "Failed to update duration"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    job_id: Optional[str] = None


class Notifier(Protocol):
    def notify(self, notice: Notice) -> None:
        ...


class NoticeLog:
    """Notifier that keeps every notice in order. Used by the API and tests."""

    def __init__(self):
        self.notices: list[Notice] = []

    def notify(self, notice: Notice) -> None:
        logger.debug(f"Notice [{notice.level.value}] {notice.message}")
        self.notices.append(notice)

    @property
    def last(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def for_job(self, job_id: str) -> list[Notice]:
        return [n for n in self.notices if n.job_id == job_id]
