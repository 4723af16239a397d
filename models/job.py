"""
Job ORM model — maps to the "jobs" table in PostgreSQL.

This is the record the update collaborator writes. The scheduler itself
only ever reads it through store/repository.py, which converts rows into
ScheduledJob dataclasses.

Key design decisions:
- UUID primary key, plus a human-facing job_number ("J-1042") for cards and toasts
- assigned_to is nullable: NULL means the job sits in the unassigned queue
- scheduled_end is nullable even when scheduled_start is set; the scheduler
  falls back to estimated_duration (minutes) and then to a default
- archived_at hides a job from every scheduling surface without deleting it
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Integer, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base
from models.enums import JobStatus, JobPriority


class Job(Base):
    __tablename__ = "jobs"

    # ── Identity ────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    job_number: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Customer (denormalized for queue search) ────────────────
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_zip: Mapped[str | None] = mapped_column(String(16), nullable=True)

    # ── Assignment ──────────────────────────────────────────────
    assigned_to: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("technicians.id"), nullable=True, index=True
    )
    scheduled_start: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )
    scheduled_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    estimated_duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # ── Workflow ────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        String(20), default=JobStatus.DRAFT.value, nullable=False, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=JobPriority.MEDIUM.value, nullable=False
    )
    archived_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # ── Lifecycle timestamps ────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<Job {self.job_number} [{self.status}] tech={self.assigned_to}>"
