"""
Tenant scoping.

Every read and write of customer data goes through these helpers so that a
row owned by another company looks exactly like a row that does not exist.
"""

from typing import Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.exceptions import BusinessRuleError, NotFoundError, ValidationError
from app.models.customer import Customer
from app.models.equipment import Equipment
from app.models.job import Job
from app.models.user import User

ModelT = TypeVar("ModelT", bound=Base)

NO_COMPANY_DETAIL = "User not associated with a company"


def require_company(user: User) -> str:
    """Return the caller's company id, or reject callers who have not onboarded."""
    if not user.company_id:
        raise BusinessRuleError(NO_COMPANY_DETAIL)
    return user.company_id


async def get_scoped_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: int,
    company_id: str,
    resource: Optional[str] = None,
) -> ModelT:
    """Fetch a company-owned row by id. Other tenants' rows are reported as missing."""
    result = await db.execute(
        select(model).where(model.id == row_id, model.company_id == company_id)
    )
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundError(resource or model.__name__)
    return row


async def get_equipment_or_404(db: AsyncSession, equipment_id: int, company_id: str) -> Equipment:
    """Equipment is scoped through its customer."""
    result = await db.execute(
        select(Equipment)
        .join(Customer, Equipment.customer_id == Customer.id)
        .where(Equipment.id == equipment_id, Customer.company_id == company_id)
    )
    equipment = result.scalar_one_or_none()
    if equipment is None:
        raise NotFoundError("Equipment")
    return equipment


async def ensure_customer_in_company(db: AsyncSession, customer_id: int, company_id: str) -> Customer:
    return await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")


async def ensure_job_in_company(db: AsyncSession, job_id: int, company_id: str) -> Job:
    return await get_scoped_or_404(db, Job, job_id, company_id, "Job")


async def ensure_technician_in_company(db: AsyncSession, technician_id: str, company_id: str) -> User:
    """A job may only be dispatched to a technician (tech or solo owner) of the same company."""
    result = await db.execute(
        select(User).where(User.id == technician_id, User.company_id == company_id)
    )
    technician = result.scalar_one_or_none()
    if technician is None:
        raise ValidationError(
            "Technician must belong to your company",
            errors=[{"field": "technicianId", "message": "Unknown technician", "type": "value_error"}],
        )
    if not technician.is_technician:
        raise ValidationError(
            "Assignee is not a technician",
            errors=[{"field": "technicianId", "message": f"Role {technician.role} cannot be dispatched", "type": "value_error"}],
        )
    return technician


async def ensure_equipment_for_customer(
    db: AsyncSession, equipment_ids: list[int], customer_id: int
) -> None:
    """Every referenced unit must be installed at the job's customer."""
    if not equipment_ids:
        return
    result = await db.execute(
        select(Equipment.id).where(
            Equipment.id.in_(equipment_ids), Equipment.customer_id == customer_id
        )
    )
    found = set(result.scalars().all())
    missing = [eid for eid in equipment_ids if eid not in found]
    if missing:
        raise ValidationError(
            "Equipment does not belong to this customer",
            errors=[{"field": "equipmentIds", "message": f"Unknown equipment: {missing}", "type": "value_error"}],
        )
