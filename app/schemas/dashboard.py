from datetime import datetime
from typing import Optional

from app.schemas.types import CamelModel


class DashboardStats(CamelModel):
    """Current-day figures for one company."""
    todays_jobs: int
    completed_jobs: int
    revenue: float
    overdue_invoices: int


class TodayJob(CamelModel):
    id: int
    customer_id: int
    customer_name: Optional[str] = None
    technician_id: Optional[str] = None
    title: str
    type: str
    priority: str
    status: str
    scheduled_date: Optional[datetime] = None
    scheduled_time: Optional[str] = None
    actual_cost: Optional[float] = None
