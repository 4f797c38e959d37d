from pydantic import Field
from datetime import date, datetime
from typing import Literal, Optional

from app.schemas.types import CamelModel, PageMeta


# "overdue" is computed at read time and cannot be written
WritableInvoiceStatus = Literal["pending", "paid", "cancelled"]


class InvoiceCreate(CamelModel):
    """Schema for creating an invoice. The invoice number is always server-assigned."""
    customer_id: int
    job_id: Optional[int] = None
    amount: float = Field(..., ge=0)
    labor_cost: Optional[float] = Field(None, ge=0)
    material_cost: Optional[float] = Field(None, ge=0)
    tax_amount: Optional[float] = Field(None, ge=0)
    status: WritableInvoiceStatus = "pending"
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None


class InvoiceUpdate(CamelModel):
    """Schema for updating an invoice (all fields optional)."""
    amount: Optional[float] = Field(None, ge=0)
    labor_cost: Optional[float] = Field(None, ge=0)
    material_cost: Optional[float] = Field(None, ge=0)
    tax_amount: Optional[float] = Field(None, ge=0)
    status: Optional[WritableInvoiceStatus] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None


class InvoiceResponse(CamelModel):
    """Schema for invoice response."""
    id: int
    company_id: str
    customer_id: int
    job_id: Optional[int] = None
    invoice_number: str
    amount: float
    labor_cost: Optional[float] = None
    material_cost: Optional[float] = None
    tax_amount: Optional[float] = None
    status: str
    is_overdue: bool = False
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_invoice(cls, invoice, today: date) -> "InvoiceResponse":
        response = cls.model_validate(invoice)
        response.is_overdue = invoice.is_overdue_on(today)
        return response


class InvoiceListResponse(PageMeta):
    """Paginated invoice list response."""
    items: list[InvoiceResponse]
