"""
Invoice creation.

Invoice numbers look like ``INV-20250314-9F2C01AB``. Uniqueness is enforced
by the database; a colliding insert is retried with a fresh number a bounded
number of times.
"""

import logging
import secrets
from datetime import date, timedelta
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import BusinessRuleError, ConflictError
from app.models.invoice import Invoice, InvoiceStatus
from app.models.job import Job
from app.utils.dates import business_today

logger = logging.getLogger(__name__)


def generate_invoice_number(today: Optional[date] = None) -> str:
    today = today or business_today()
    return f"INV-{today:%Y%m%d}-{secrets.token_hex(4).upper()}"


async def invoice_number_exists(db: AsyncSession, invoice_number: str) -> bool:
    result = await db.execute(
        select(Invoice.id).where(Invoice.invoice_number == invoice_number)
    )
    return result.first() is not None


async def create_invoice_with_unique_number(
    db: AsyncSession,
    fields: dict,
    number_factory: Optional[Callable[[], str]] = None,
    max_attempts: Optional[int] = None,
) -> Invoice:
    """Insert and commit an invoice, allocating its number.

    ``fields`` holds every column except ``invoice_number``. The session must
    have no other pending changes: a collision rolls the whole transaction back.

    Raises ConflictError when every attempt collides. Integrity errors that
    are not number collisions propagate unchanged.
    """
    number_factory = number_factory or generate_invoice_number
    max_attempts = max_attempts or settings.INVOICE_NUMBER_MAX_ATTEMPTS

    for attempt in range(1, max_attempts + 1):
        invoice_number = number_factory()
        invoice = Invoice(invoice_number=invoice_number, **fields)
        db.add(invoice)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            if not await invoice_number_exists(db, invoice_number):
                raise
            logger.warning(
                "Invoice number collision (attempt %d of %d)", attempt, max_attempts
            )
            continue

        await db.refresh(invoice)
        logger.info("Invoice %s created", invoice.invoice_number)
        return invoice

    logger.error("Invoice number allocation exhausted after %d attempts", max_attempts)
    raise ConflictError("Could not allocate a unique invoice number, please retry")


def invoice_fields_from_job(job: Job, today: Optional[date] = None) -> dict:
    """Column values for the invoice billed against a completed job."""
    if not job.is_completed:
        raise BusinessRuleError("Can only create invoices for completed jobs")

    today = today or business_today()
    if job.actual_cost is not None:
        amount = job.actual_cost
    elif job.estimated_cost is not None:
        amount = job.estimated_cost
    else:
        amount = 0.0

    return {
        "company_id": job.company_id,
        "customer_id": job.customer_id,
        "job_id": job.id,
        "amount": amount,
        "labor_cost": job.actual_cost if job.actual_cost is not None else 0.0,
        "material_cost": 0.0,
        "status": InvoiceStatus.pending.value,
        "due_date": today + timedelta(days=settings.INVOICE_DUE_DAYS),
        "notes": f"Invoice for {job.title}",
    }


async def invoice_from_job(db: AsyncSession, job: Job, today: Optional[date] = None) -> Invoice:
    """Bill a completed job. Nothing is written when the job is not completed."""
    fields = invoice_fields_from_job(job, today)
    return await create_invoice_with_unique_number(db, fields)
