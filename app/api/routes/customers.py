from fastapi import APIRouter, status, Query
from sqlalchemy import select, func, or_, delete
from typing import Optional
import logging

from app.api.deps import DbSession, CompanyId
from app.models.customer import Customer
from app.models.equipment import Equipment
from app.models.invoice import Invoice
from app.models.job import Job
from app.models.service_history import ServiceHistory
from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
)
from app.schemas.equipment import EquipmentResponse, ServiceHistoryResponse
from app.services.tenancy import get_scoped_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    db: DbSession,
    company_id: CompanyId,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=500, alias="pageSize"),
    search: Optional[str] = None,
):
    """List the company's customers, newest first."""
    query = select(Customer).where(Customer.company_id == company_id)

    if search:
        search_filter = or_(
            Customer.name.ilike(f"%{search}%"),
            Customer.email.ilike(f"%{search}%"),
            Customer.phone.ilike(f"%{search}%"),
        )
        query = query.where(search_filter)

    # Get total count
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Apply pagination
    offset = (page - 1) * page_size
    query = query.order_by(Customer.created_at.desc(), Customer.id.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    customers = result.scalars().all()

    return CustomerListResponse(
        items=customers,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    db: DbSession,
    company_id: CompanyId,
):
    """Get a single customer by ID."""
    return await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    db: DbSession,
    company_id: CompanyId,
):
    """Create a new customer."""
    customer = Customer(**customer_data.model_dump(), company_id=company_id)
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    db: DbSession,
    company_id: CompanyId,
):
    """Update a customer. Only fields present in the body are changed."""
    customer = await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")

    update_data = customer_data.model_dump(exclude_unset=True)
    if update_data.get("name") is None:
        update_data.pop("name", None)
    for field, value in update_data.items():
        setattr(customer, field, value)

    await db.commit()
    await db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    db: DbSession,
    company_id: CompanyId,
):
    """Delete a customer together with its equipment, jobs, invoices and service history."""
    customer = await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")

    # Dependents first, children before parents, all in one transaction
    await db.execute(delete(ServiceHistory).where(ServiceHistory.customer_id == customer.id))
    await db.execute(delete(Invoice).where(Invoice.customer_id == customer.id))
    await db.execute(delete(Job).where(Job.customer_id == customer.id))
    await db.execute(delete(Equipment).where(Equipment.customer_id == customer.id))
    await db.execute(delete(Customer).where(Customer.id == customer.id))
    await db.commit()
    logger.info("Customer %s deleted with dependents", customer_id)


@router.get("/{customer_id}/equipment", response_model=list[EquipmentResponse])
async def list_customer_equipment(
    customer_id: int,
    db: DbSession,
    company_id: CompanyId,
):
    """Equipment installed at a customer site."""
    await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")
    result = await db.execute(
        select(Equipment)
        .where(Equipment.customer_id == customer_id)
        .order_by(Equipment.created_at.desc(), Equipment.id.desc())
    )
    return result.scalars().all()


@router.get("/{customer_id}/service-history", response_model=list[ServiceHistoryResponse])
async def list_customer_service_history(
    customer_id: int,
    db: DbSession,
    company_id: CompanyId,
):
    """Completed work for a customer, newest first."""
    await get_scoped_or_404(db, Customer, customer_id, company_id, "Customer")
    result = await db.execute(
        select(ServiceHistory)
        .where(ServiceHistory.customer_id == customer_id)
        .order_by(ServiceHistory.service_date.desc(), ServiceHistory.id.desc())
    )
    return result.scalars().all()
