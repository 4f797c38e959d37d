from fastapi import APIRouter

from app.api.deps import DbSession, CompanyId
from app.schemas.dashboard import DashboardStats, TodayJob
from app.services.dashboard import get_dashboard_stats, get_todays_jobs, today_job_summary

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(db: DbSession, company_id: CompanyId):
    """Today's job counts, completed revenue and overdue invoices."""
    return await get_dashboard_stats(db, company_id)


@router.get("/todays-jobs", response_model=list[TodayJob])
async def todays_jobs(db: DbSession, company_id: CompanyId):
    """Today's jobs in schedule order, with customer names."""
    jobs = await get_todays_jobs(db, company_id)
    return [today_job_summary(job) for job in jobs]
