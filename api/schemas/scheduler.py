"""
Pydantic schemas for the /scheduler endpoints.

GridResponse: a projected calendar (days, hour rows, technician columns,
              filled cells with their render blocks or month chips)
ConflictCheck / ConflictResult: ask the conflict detector directly
RescheduleRequest / ResizeRequest: run a whole gesture server-side
GestureResult: the notice that gesture ended with
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.enums import NoticeLevel, ViewMode


class ResourceOut(BaseModel):
    id: str
    title: str


class BlockOut(BaseModel):
    job_id: str
    label: str
    subtitle: str
    top_px: float
    height_px: float
    color: str
    decoration: Optional[str] = None
    alert_icon: bool = False


class CellOut(BaseModel):
    day: date
    resource_id: Optional[str] = None
    hour: Optional[int] = None
    job_ids: list[str]
    blocks: list[BlockOut] = []      # week/day views
    chips: list[str] = []            # month view
    more: int = 0                    # month view overflow


class GridResponse(BaseModel):
    view: ViewMode
    reference_date: date
    title: str
    days: list[date]
    hours: list[int]
    resources: list[ResourceOut]
    cells: list[CellOut]
    out_of_band: list[str]
    legend: list[dict]


class QueueEntry(BaseModel):
    id: str
    job_number: str
    title: str
    customer_name: Optional[str] = None
    customer_zip: Optional[str] = None
    priority: str
    status: str
    duration_label: Optional[str] = None


class UnassignedResponse(BaseModel):
    jobs: list[QueueEntry]
    total: int


class ConflictCheck(BaseModel):
    resource_id: str
    start: datetime
    end: datetime
    exclude_job_id: Optional[str] = None

    @field_validator("start", "end")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)

    @model_validator(mode="after")
    def end_after_start(self) -> "ConflictCheck":
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class ConflictResult(BaseModel):
    conflict: bool
    conflicting_job_id: Optional[str] = None


class OverlapPair(BaseModel):
    resource_id: str
    first_job_id: str
    second_job_id: str


class RescheduleRequest(BaseModel):
    """Drop a job on a cell: a technician column (optional), a day, and optionally an hour."""

    job_id: str
    day: date
    resource_id: Optional[str] = None
    hour: Optional[int] = Field(default=None, ge=0, le=23)


class ResizeRequest(BaseModel):
    """Drag a job's bottom edge by pixel_delta (positive = longer)."""

    job_id: str
    pixel_delta: float


class GestureResult(BaseModel):
    level: NoticeLevel
    message: str
    job_id: Optional[str] = None


class TechnicianLoadOut(BaseModel):
    resource_id: str
    title: str
    job_count: int
    hours_scheduled: float
    availability: str
    next_job_id: Optional[str] = None


class DaySummaryOut(BaseModel):
    day: date
    jobs_today: int
    unassigned: int
    urgent_unassigned: int
    technicians: list[TechnicianLoadOut]
