from fastapi import APIRouter, status, Query
from sqlalchemy import select, func, update, delete
from datetime import date, datetime, time, timedelta
from typing import Optional
import logging

from app.api.deps import DbSession, CurrentUser, CompanyId
from app.models.invoice import Invoice
from app.models.job import Job, JobStatus
from app.models.service_history import ServiceHistory
from app.models.user import User, UserRole
from app.schemas.invoice import InvoiceResponse
from app.schemas.job import JobCreate, JobUpdate, JobResponse, JobListResponse
from app.services.invoicing import invoice_from_job
from app.services.tenancy import (
    get_scoped_or_404,
    ensure_customer_in_company,
    ensure_technician_in_company,
    ensure_equipment_for_customer,
)
from app.utils.dates import business_today

logger = logging.getLogger(__name__)

router = APIRouter()

# Columns a partial update may not null out
REQUIRED_FIELDS = ("customer_id", "title", "type", "priority")


async def _resolve_technician(
    db, current_user: User, company_id: str, technician_id: Optional[str]
) -> Optional[str]:
    """Solo owners dispatch every job to themselves."""
    if current_user.role == UserRole.solo_owner.value:
        return current_user.id
    if technician_id:
        await ensure_technician_in_company(db, technician_id, company_id)
    return technician_id


async def _record_first_completion(db, job: Job) -> None:
    result = await db.execute(
        select(ServiceHistory.id).where(ServiceHistory.job_id == job.id).limit(1)
    )
    if result.first() is not None:
        return
    db.add(ServiceHistory.for_completed_job(job))
    logger.info("Job %s completed, service history recorded", job.id)


@router.get("", response_model=JobListResponse)
async def list_jobs(
    db: DbSession,
    company_id: CompanyId,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500, alias="pageSize"),
    job_status: Optional[JobStatus] = Query(None, alias="status"),
    technician_id: Optional[str] = Query(None, alias="technicianId"),
    customer_id: Optional[int] = Query(None, alias="customerId"),
    scheduled_on: Optional[date] = Query(None, alias="date"),
):
    """List jobs, most recently scheduled first."""
    query = select(Job).where(Job.company_id == company_id)

    if job_status:
        query = query.where(Job.status == job_status.value)
    if technician_id:
        query = query.where(Job.technician_id == technician_id)
    if customer_id is not None:
        query = query.where(Job.customer_id == customer_id)
    if scheduled_on:
        day_start = datetime.combine(scheduled_on, time.min)
        query = query.where(
            Job.scheduled_date >= day_start,
            Job.scheduled_date < day_start + timedelta(days=1),
        )

    # Get total count
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Apply pagination
    offset = (page - 1) * page_size
    query = query.order_by(Job.scheduled_date.desc(), Job.id.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    jobs = result.scalars().all()

    return JobListResponse(
        items=jobs,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(job_id: int, db: DbSession, company_id: CompanyId):
    """Get a single job by ID."""
    return await get_scoped_or_404(db, Job, job_id, company_id, "Job")


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    db: DbSession,
    current_user: CurrentUser,
    company_id: CompanyId,
):
    """Create a new job for one of the company's customers."""
    data = job_data.model_dump()
    job_status = data.pop("status")
    completed_at = data.pop("completed_at")

    await ensure_customer_in_company(db, data["customer_id"], company_id)
    data["technician_id"] = await _resolve_technician(
        db, current_user, company_id, data.get("technician_id")
    )
    await ensure_equipment_for_customer(db, data.get("equipment_ids") or [], data["customer_id"])

    job = Job(**data, company_id=company_id)
    completed_now = job.apply_status(job_status, completed_at)
    db.add(job)

    if completed_now:
        # Need the job id for the history row
        await db.flush()
        db.add(ServiceHistory.for_completed_job(job))

    await db.commit()
    await db.refresh(job)
    logger.info("Job %s created for customer %s", job.id, job.customer_id)
    return job


@router.put("/{job_id}", response_model=JobResponse)
@router.patch("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    job_data: JobUpdate,
    db: DbSession,
    current_user: CurrentUser,
    company_id: CompanyId,
):
    """Update a job. Only fields present in the body are changed."""
    job = await get_scoped_or_404(db, Job, job_id, company_id, "Job")

    update_data = job_data.model_dump(exclude_unset=True)
    new_status = update_data.pop("status", None)
    completed_at = update_data.pop("completed_at", None)
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    customer_id = update_data.get("customer_id", job.customer_id)
    if customer_id != job.customer_id:
        await ensure_customer_in_company(db, customer_id, company_id)
    if "technician_id" in update_data:
        update_data["technician_id"] = await _resolve_technician(
            db, current_user, company_id, update_data["technician_id"]
        )
    if "equipment_ids" in update_data or customer_id != job.customer_id:
        equipment_ids = update_data.get("equipment_ids", job.equipment_ids)
        await ensure_equipment_for_customer(db, equipment_ids or [], customer_id)

    for field, value in update_data.items():
        setattr(job, field, value)

    completed_now = False
    if new_status is not None:
        completed_now = job.apply_status(new_status, completed_at)
    elif completed_at is not None and job.is_completed:
        job.completed_at = completed_at

    if completed_now:
        await _record_first_completion(db, job)

    await db.commit()
    await db.refresh(job)
    return job


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(job_id: int, db: DbSession, company_id: CompanyId):
    """Delete a job. Invoices billed against it are kept and unlinked."""
    job = await get_scoped_or_404(db, Job, job_id, company_id, "Job")

    await db.execute(update(Invoice).where(Invoice.job_id == job.id).values(job_id=None))
    await db.execute(delete(ServiceHistory).where(ServiceHistory.job_id == job.id))
    await db.execute(delete(Job).where(Job.id == job.id))
    await db.commit()
    logger.info("Job %s deleted", job_id)


@router.post("/{job_id}/invoice", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice_from_job(job_id: int, db: DbSession, company_id: CompanyId):
    """Bill a completed job."""
    job = await get_scoped_or_404(db, Job, job_id, company_id, "Job")
    today = business_today()
    invoice = await invoice_from_job(db, job, today)
    return InvoiceResponse.from_invoice(invoice, today)
