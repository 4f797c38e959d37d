from app.models.company import Company
from app.models.user import User
from app.models.customer import Customer
from app.models.equipment import Equipment
from app.models.job import Job
from app.models.invoice import Invoice
from app.models.service_history import ServiceHistory

__all__ = [
    "Company",
    "User",
    "Customer",
    "Equipment",
    "Job",
    "Invoice",
    "ServiceHistory",
]
