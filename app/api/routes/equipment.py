"""Equipment endpoints. Equipment belongs to a company through its customer."""

from fastapi import APIRouter, status, Query
from sqlalchemy import select, update, delete
from typing import Optional

from app.api.deps import DbSession, CompanyId
from app.models.customer import Customer
from app.models.equipment import Equipment
from app.models.service_history import ServiceHistory
from app.schemas.equipment import EquipmentCreate, EquipmentUpdate, EquipmentResponse
from app.services.tenancy import ensure_customer_in_company, get_equipment_or_404

router = APIRouter()


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(
    db: DbSession,
    company_id: CompanyId,
    customer_id: Optional[int] = Query(None, alias="customerId"),
    type: Optional[str] = None,
):
    query = (
        select(Equipment)
        .join(Customer, Equipment.customer_id == Customer.id)
        .where(Customer.company_id == company_id)
    )
    if customer_id is not None:
        query = query.where(Equipment.customer_id == customer_id)
    if type:
        query = query.where(Equipment.type == type)

    result = await db.execute(query.order_by(Equipment.created_at.desc(), Equipment.id.desc()))
    return result.scalars().all()


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(equipment_id: int, db: DbSession, company_id: CompanyId):
    return await get_equipment_or_404(db, equipment_id, company_id)


@router.post("", response_model=EquipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_equipment(
    equipment_data: EquipmentCreate,
    db: DbSession,
    company_id: CompanyId,
):
    """Register a unit at one of the company's customers."""
    await ensure_customer_in_company(db, equipment_data.customer_id, company_id)

    equipment = Equipment(**equipment_data.model_dump())
    db.add(equipment)
    await db.commit()
    await db.refresh(equipment)
    return equipment


@router.put("/{equipment_id}", response_model=EquipmentResponse)
@router.patch("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: int,
    equipment_data: EquipmentUpdate,
    db: DbSession,
    company_id: CompanyId,
):
    equipment = await get_equipment_or_404(db, equipment_id, company_id)

    update_data = equipment_data.model_dump(exclude_unset=True)
    if update_data.get("type") is None:
        update_data.pop("type", None)
    for field, value in update_data.items():
        setattr(equipment, field, value)

    await db.commit()
    await db.refresh(equipment)
    return equipment


@router.delete("/{equipment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_equipment(equipment_id: int, db: DbSession, company_id: CompanyId):
    """Delete a unit. Service history that referenced it is kept, unlinked."""
    equipment = await get_equipment_or_404(db, equipment_id, company_id)

    await db.execute(
        update(ServiceHistory)
        .where(ServiceHistory.equipment_id == equipment.id)
        .values(equipment_id=None)
    )
    await db.execute(delete(Equipment).where(Equipment.id == equipment.id))
    await db.commit()
