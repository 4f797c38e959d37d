from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON, Numeric
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.utils.dates import business_now


class JobType(str, enum.Enum):
    install = "Install"
    repair = "Repair"
    maintenance = "Maintenance"
    quote = "Quote"


class JobPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class JobStatus(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class Job(Base):
    """Job (work order) scheduled for a customer and optionally dispatched to a technician."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String(64), ForeignKey("companies.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    technician_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text)
    type = Column(String(20), nullable=False)
    priority = Column(String(20), nullable=False, default=JobPriority.medium.value)
    status = Column(String(20), nullable=False, default=JobStatus.scheduled.value, index=True)

    # Scheduling (naive local time, matching the business calendar)
    scheduled_date = Column(DateTime, index=True)
    scheduled_time = Column(String(20))
    estimated_duration = Column(Integer)  # minutes

    # Costs
    estimated_cost = Column(Numeric(10, 2, asdecimal=False))
    actual_cost = Column(Numeric(10, 2, asdecimal=False))
    labor_time = Column(Integer)  # minutes

    notes = Column(Text)
    equipment_ids = Column(JSON)
    parts_used = Column(JSON)

    completed_at = Column(DateTime)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    customer = relationship("Customer", back_populates="jobs")
    technician = relationship("User")

    def __repr__(self):
        return f"<Job {self.id} - {self.type}>"

    @property
    def is_completed(self) -> bool:
        return self.status == JobStatus.completed.value

    def apply_status(self, status: str, completed_at: datetime | None = None) -> bool:
        """Set the status and keep ``completed_at`` in step with it.

        Returns True when this call moved the job into ``completed``.
        """
        was_completed = self.is_completed
        self.status = status
        if status != JobStatus.completed.value:
            self.completed_at = None
            return False
        if completed_at is not None:
            self.completed_at = completed_at
        elif self.completed_at is None:
            self.completed_at = business_now()
        return not was_completed
