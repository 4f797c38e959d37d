from datetime import date
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Date, Numeric, and_
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.utils.dates import business_today


class InvoiceStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"  # derived from pending + due_date, never stored
    cancelled = "cancelled"


STORED_INVOICE_STATUSES = (
    InvoiceStatus.pending.value,
    InvoiceStatus.paid.value,
    InvoiceStatus.cancelled.value,
)


class Invoice(Base):
    """Invoice model for customer billing."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String(64), ForeignKey("companies.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)
    invoice_number = Column(String(50), unique=True, index=True, nullable=False)

    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    labor_cost = Column(Numeric(10, 2, asdecimal=False))
    material_cost = Column(Numeric(10, 2, asdecimal=False))
    tax_amount = Column(Numeric(10, 2, asdecimal=False))

    status = Column(String(20), default=InvoiceStatus.pending.value, nullable=False, index=True)

    due_date = Column(Date, index=True)
    paid_date = Column(Date)

    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer")
    job = relationship("Job")

    def __repr__(self):
        return f"<Invoice {self.invoice_number}>"

    @classmethod
    def overdue_condition(cls, today: date):
        """SQL predicate for invoices that are overdue on ``today``.

        Every read path (invoice listing, dashboard) filters through this.
        """
        return and_(
            cls.status == InvoiceStatus.pending.value,
            cls.due_date.is_not(None),
            cls.due_date <= today,
        )

    def is_overdue_on(self, today: date) -> bool:
        """In-memory counterpart of :meth:`overdue_condition`."""
        return (
            self.status == InvoiceStatus.pending.value
            and self.due_date is not None
            and self.due_date <= today
        )

    @staticmethod
    def paid_date_for(
        status: str,
        paid_date: date | None = None,
        current: date | None = None,
        today: date | None = None,
    ) -> date | None:
        """``paid_date`` is set exactly when the status is paid."""
        if status != InvoiceStatus.paid.value:
            return None
        return paid_date or current or today or business_today()

    def apply_status(self, status: str, paid_date: date | None = None, today: date | None = None) -> None:
        """Set the status and keep ``paid_date`` in step with it."""
        self.status = status
        self.paid_date = self.paid_date_for(status, paid_date, self.paid_date, today)
