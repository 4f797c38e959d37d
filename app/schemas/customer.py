from pydantic import EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional

from app.models.customer import ContactMethod
from app.schemas.types import CamelModel, PageMeta


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class CustomerBase(CamelModel):
    """Base customer schema."""
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    notes: Optional[str] = None
    preferred_contact_method: Optional[ContactMethod] = None

    @field_validator("email", "phone", "preferred_contact_method", mode="before")
    @classmethod
    def empty_string_is_none(cls, v):
        return _blank_to_none(v)


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""
    pass


class CustomerUpdate(CamelModel):
    """Schema for updating a customer (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    notes: Optional[str] = None
    preferred_contact_method: Optional[ContactMethod] = None

    @field_validator("email", "phone", "preferred_contact_method", mode="before")
    @classmethod
    def empty_string_is_none(cls, v):
        return _blank_to_none(v)


class CustomerResponse(CamelModel):
    """Schema for customer response."""
    id: int
    company_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    preferred_contact_method: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerListResponse(PageMeta):
    """Paginated customer list response."""
    items: list[CustomerResponse]
