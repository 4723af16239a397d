"""
Exceptions raised by the scheduling core and the update collaborator.

Conflicts are deliberately NOT exceptions: the conflict detector returns a
boolean (or the obstructing job) and the interaction controller turns that
into a notice. Exceptions are for things that went wrong.
"""


class SchedulingError(Exception):
    """Base class for everything in this module."""


class MalformedPayloadError(SchedulingError):
    """A drop carried data that does not parse as a job reference."""


class JobNotFoundError(SchedulingError):
    """The job store has no job with this id."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class UpdateFailedError(SchedulingError):
    """The job store rejected the update or could not be reached."""
