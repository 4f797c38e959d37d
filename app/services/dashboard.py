"""
Dashboard aggregation for one company's current business day.

Figures are recomputed on every call; nothing is cached.
"""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.invoice import Invoice
from app.models.job import Job
from app.schemas.dashboard import DashboardStats, TodayJob
from app.utils.dates import business_now, local_day_window

logger = logging.getLogger(__name__)


async def get_todays_jobs(
    db: AsyncSession, company_id: str, now: Optional[datetime] = None
) -> list[Job]:
    """Jobs scheduled inside today's window, earliest first, customers loaded."""
    start, end = local_day_window(now)
    result = await db.execute(
        select(Job)
        .options(selectinload(Job.customer))
        .where(
            Job.company_id == company_id,
            Job.scheduled_date >= start,
            Job.scheduled_date < end,
        )
        .order_by(Job.scheduled_date.asc(), Job.id.asc())
    )
    return list(result.scalars().all())


async def count_overdue_invoices(db: AsyncSession, company_id: str, today: date) -> int:
    result = await db.execute(
        select(func.count(Invoice.id)).where(
            Invoice.company_id == company_id,
            Invoice.overdue_condition(today),
        )
    )
    return result.scalar() or 0


async def get_dashboard_stats(
    db: AsyncSession, company_id: str, now: Optional[datetime] = None
) -> DashboardStats:
    now = now or business_now()
    jobs = await get_todays_jobs(db, company_id, now)
    completed = [job for job in jobs if job.is_completed]
    revenue = round(sum(job.actual_cost or 0.0 for job in completed), 2)
    overdue = await count_overdue_invoices(db, company_id, now.date())

    logger.debug(
        "Dashboard for %s: %d jobs, %d completed, %d overdue invoices",
        company_id, len(jobs), len(completed), overdue,
    )
    return DashboardStats(
        todays_jobs=len(jobs),
        completed_jobs=len(completed),
        revenue=revenue,
        overdue_invoices=overdue,
    )


def today_job_summary(job: Job) -> TodayJob:
    """Flatten a job and its (already loaded) customer for the dashboard list."""
    summary = TodayJob.model_validate(job)
    summary.customer_name = job.customer.name if job.customer is not None else None
    return summary
