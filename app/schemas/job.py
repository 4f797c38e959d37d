from pydantic import Field, field_validator
from datetime import datetime
from typing import Any, Optional

from app.models.job import JobType, JobPriority, JobStatus
from app.schemas.types import CamelModel, PageMeta
from app.utils.dates import to_business_naive


class JobFields(CamelModel):
    """Fields shared by create and update payloads."""

    @field_validator("scheduled_date", "completed_at", mode="after", check_fields=False)
    @classmethod
    def normalize_timestamp(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_business_naive(v)


class JobCreate(JobFields):
    """Schema for creating a job."""
    customer_id: int
    technician_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: JobType
    priority: JobPriority = JobPriority.medium
    status: JobStatus = JobStatus.scheduled
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = Field(None, max_length=20)
    estimated_duration: Optional[int] = Field(None, ge=0)
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    labor_time: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    equipment_ids: Optional[list[int]] = None
    parts_used: Optional[list[Any]] = None
    completed_at: Optional[datetime] = None


class JobUpdate(JobFields):
    """Schema for updating a job (all fields optional)."""
    customer_id: Optional[int] = None
    technician_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[JobType] = None
    priority: Optional[JobPriority] = None
    status: Optional[JobStatus] = None
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = Field(None, max_length=20)
    estimated_duration: Optional[int] = Field(None, ge=0)
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    labor_time: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    equipment_ids: Optional[list[int]] = None
    parts_used: Optional[list[Any]] = None
    completed_at: Optional[datetime] = None


class JobResponse(CamelModel):
    """Schema for job response."""
    id: int
    company_id: str
    customer_id: int
    technician_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    type: str
    priority: str
    status: str
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = None
    estimated_duration: Optional[int] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    labor_time: Optional[int] = None
    notes: Optional[str] = None
    equipment_ids: Optional[list[int]] = None
    parts_used: Optional[list[Any]] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobListResponse(PageMeta):
    """Paginated job list response."""
    items: list[JobResponse]
