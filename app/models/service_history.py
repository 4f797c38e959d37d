from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Date
from sqlalchemy.sql import func
from app.database import Base


class ServiceHistory(Base):
    """Append-only record of a completed job, per customer and equipment."""

    __tablename__ = "service_history"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    equipment_id = Column(Integer, ForeignKey("equipment.id", ondelete="SET NULL"), nullable=True)
    service_date = Column(Date, nullable=False)
    service_type = Column(String(50), nullable=False)
    description = Column(Text)
    technician_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<ServiceHistory job={self.job_id} on {self.service_date}>"

    @classmethod
    def for_completed_job(cls, job) -> "ServiceHistory":
        """History entry recorded when ``job`` is first completed."""
        equipment_ids = job.equipment_ids or []
        completed_on = job.completed_at.date() if job.completed_at else None
        return cls(
            customer_id=job.customer_id,
            job_id=job.id,
            equipment_id=equipment_ids[0] if equipment_ids else None,
            service_date=completed_on,
            service_type=job.type,
            description=job.description or job.title,
            technician_id=job.technician_id,
        )
