from fastapi import APIRouter, status, Query
from sqlalchemy import select, func, delete
from typing import Optional
import logging

from app.api.deps import DbSession, CompanyId
from app.exceptions import ValidationError
from app.models.invoice import Invoice, InvoiceStatus
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceResponse,
    InvoiceListResponse,
)
from app.services.invoicing import create_invoice_with_unique_number
from app.services.tenancy import (
    get_scoped_or_404,
    ensure_customer_in_company,
    ensure_job_in_company,
)
from app.utils.dates import business_today

logger = logging.getLogger(__name__)

router = APIRouter()

# Columns a partial update may not null out
REQUIRED_FIELDS = ("amount", "status")


@router.get("", response_model=InvoiceListResponse)
async def list_invoices(
    db: DbSession,
    company_id: CompanyId,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500, alias="pageSize"),
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    overdue: Optional[bool] = None,
    customer_id: Optional[int] = Query(None, alias="customerId"),
):
    """List invoices, newest first. ``status=overdue`` and ``overdue=true`` are equivalent."""
    today = business_today()
    query = select(Invoice).where(Invoice.company_id == company_id)

    if invoice_status == InvoiceStatus.overdue:
        query = query.where(Invoice.overdue_condition(today))
    elif invoice_status:
        query = query.where(Invoice.status == invoice_status.value)

    if overdue:
        query = query.where(Invoice.overdue_condition(today))

    if customer_id is not None:
        query = query.where(Invoice.customer_id == customer_id)

    # Get total count
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Apply pagination
    offset = (page - 1) * page_size
    query = query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    invoices = result.scalars().all()

    return InvoiceListResponse(
        items=[InvoiceResponse.from_invoice(inv, today) for inv in invoices],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(invoice_id: int, db: DbSession, company_id: CompanyId):
    """Get a single invoice by ID."""
    invoice = await get_scoped_or_404(db, Invoice, invoice_id, company_id, "Invoice")
    return InvoiceResponse.from_invoice(invoice, business_today())


@router.post("", response_model=InvoiceResponse, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    db: DbSession,
    company_id: CompanyId,
):
    """Create an invoice. The invoice number is assigned by the server."""
    today = business_today()
    await ensure_customer_in_company(db, invoice_data.customer_id, company_id)
    if invoice_data.job_id is not None:
        job = await ensure_job_in_company(db, invoice_data.job_id, company_id)
        if job.customer_id != invoice_data.customer_id:
            raise ValidationError(
                "Job belongs to a different customer",
                errors=[{"field": "jobId", "message": "Job belongs to a different customer", "type": "value_error"}],
            )

    fields = invoice_data.model_dump()
    fields["paid_date"] = Invoice.paid_date_for(fields["status"], fields["paid_date"], today=today)
    fields["company_id"] = company_id

    invoice = await create_invoice_with_unique_number(db, fields)
    return InvoiceResponse.from_invoice(invoice, today)


@router.put("/{invoice_id}", response_model=InvoiceResponse)
@router.patch("/{invoice_id}", response_model=InvoiceResponse)
async def update_invoice(
    invoice_id: int,
    invoice_data: InvoiceUpdate,
    db: DbSession,
    company_id: CompanyId,
):
    """Update an invoice. Only fields present in the body are changed."""
    today = business_today()
    invoice = await get_scoped_or_404(db, Invoice, invoice_id, company_id, "Invoice")

    update_data = invoice_data.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            update_data.pop(field)
    new_status = update_data.pop("status", None)
    paid_date = update_data.pop("paid_date", None)

    for field, value in update_data.items():
        setattr(invoice, field, value)

    if new_status is not None:
        invoice.apply_status(new_status, paid_date, today)
    elif paid_date is not None and invoice.status == InvoiceStatus.paid.value:
        invoice.paid_date = paid_date

    await db.commit()
    await db.refresh(invoice)
    return InvoiceResponse.from_invoice(invoice, today)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(invoice_id: int, db: DbSession, company_id: CompanyId):
    """Delete an invoice."""
    invoice = await get_scoped_or_404(db, Invoice, invoice_id, company_id, "Invoice")
    await db.execute(delete(Invoice).where(Invoice.id == invoice.id))
    await db.commit()
    logger.info("Invoice %s deleted", invoice_id)
