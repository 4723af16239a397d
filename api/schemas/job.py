"""
Pydantic schemas for the /jobs and /technicians endpoints.

These are NOT database models — they define the HTTP API contract:
- JobCreate: what the user sends when creating a job (request body)
- JobResponse: what we send back for a single job (response body)
- JobListResponse: paginated list of jobs
- TechnicianCreate / TechnicianResponse: the scheduler's columns

The assignment PATCH body is scheduler.base.AssignmentUpdate itself, so
the HTTP updater and the endpoint cannot drift apart.

FastAPI validates incoming data against these automatically.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from models.enums import JobStatus, JobPriority, EmploymentStatus


class JobCreate(BaseModel):
    """Request body for POST /jobs/."""

    job_number: str = Field(..., min_length=1, max_length=32, examples=["J-1042"])
    title: str = Field(..., min_length=1, max_length=255, examples=["Replace water heater"])
    customer_name: Optional[str] = Field(default=None, max_length=255)
    customer_zip: Optional[str] = Field(default=None, max_length=16)
    assigned_to: Optional[UUID] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    estimated_duration: Optional[int] = Field(
        default=None,
        gt=0,
        description="Estimated minutes on site; used when scheduled_end is missing",
    )
    status: JobStatus = JobStatus.DRAFT
    priority: JobPriority = JobPriority.MEDIUM

    @model_validator(mode="after")
    def end_after_start(self) -> "JobCreate":
        if self.scheduled_end is not None:
            if self.scheduled_start is None:
                raise ValueError("scheduled_end requires scheduled_start")
            if self.scheduled_end <= self.scheduled_start:
                raise ValueError("scheduled_end must be after scheduled_start")
        return self


class JobResponse(BaseModel):
    """Response body for a single job."""

    id: UUID
    job_number: str
    title: str
    customer_name: Optional[str] = None
    customer_zip: Optional[str] = None
    assigned_to: Optional[UUID] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    estimated_duration: Optional[int] = None
    status: str
    priority: str
    archived_at: Optional[datetime] = None
    created_at: datetime

    # from_attributes=True tells Pydantic to read from SQLAlchemy model attributes
    model_config = {"from_attributes": True}


class JobListResponse(BaseModel):
    """Paginated list of jobs — returned by GET /jobs/."""

    jobs: list[JobResponse]
    total: int
    page: int
    page_size: int


class TechnicianCreate(BaseModel):
    full_name: Optional[str] = Field(default=None, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE


class TechnicianResponse(BaseModel):
    id: UUID
    full_name: Optional[str] = None
    email: str
    employment_status: str

    model_config = {"from_attributes": True}
