"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("scheduled", not "JobStatus.SCHEDULED")
- They work as SQLAlchemy column values
- They work as FastAPI query parameters
- Typos become immediate errors instead of silent bugs
"""

import enum


class JobStatus(str, enum.Enum):
    DRAFT = "draft"              # created, not yet placed on the schedule
    SCHEDULED = "scheduled"      # has a technician and a time window
    IN_PROGRESS = "in_progress"  # technician is on site
    COMPLETED = "completed"      # work done, not yet billed
    INVOICED = "invoiced"        # invoice sent
    PAID = "paid"                # invoice settled


# Jobs in these states never show up in the unassigned queue
CLOSED_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.INVOICED, JobStatus.PAID})


class JobPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ViewMode(str, enum.Enum):
    DAY = "day"      # one day, technicians as columns, hourly rows
    WEEK = "week"    # seven days, hourly rows
    MONTH = "month"  # whole weeks covering the month, no hour rows


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"        # hidden from the scheduler columns
    TERMINATED = "terminated"


class NoticeLevel(str, enum.Enum):
    SUCCESS = "success"    # commit accepted by the job store
    CONFLICT = "conflict"  # blocked locally by the conflict detector
    ERROR = "error"        # job store rejected or failed the update
    INFO = "info"          # gesture refused before any commit was attempted
