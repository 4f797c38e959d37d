"""Equipment schemas."""
from pydantic import Field
from datetime import date, datetime
from typing import Optional

from app.schemas.types import CamelModel


class EquipmentCreate(CamelModel):
    customer_id: int
    type: str = Field(..., min_length=1, max_length=100)
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    install_date: Optional[date] = None
    warranty_expires: Optional[date] = None
    notes: Optional[str] = None


class EquipmentUpdate(CamelModel):
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    install_date: Optional[date] = None
    warranty_expires: Optional[date] = None
    notes: Optional[str] = None


class EquipmentResponse(CamelModel):
    id: int
    customer_id: int
    type: str
    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    install_date: Optional[date] = None
    warranty_expires: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ServiceHistoryResponse(CamelModel):
    id: int
    customer_id: int
    job_id: int
    equipment_id: Optional[int] = None
    service_date: date
    service_type: str
    description: Optional[str] = None
    technician_id: Optional[str] = None
    created_at: Optional[datetime] = None
