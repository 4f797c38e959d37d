from fastapi import APIRouter
from app.api.routes import (
    auth,
    customers,
    equipment,
    jobs,
    invoices,
    dashboard,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(equipment.router, prefix="/equipment", tags=["equipment"])
api_router.include_router(jobs.router, prefix="/jobs", tags=["jobs"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
