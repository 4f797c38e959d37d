from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class ContactMethod(str, enum.Enum):
    email = "email"
    phone = "phone"
    text = "text"


class Customer(Base):
    """Customer model."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(String(64), ForeignKey("companies.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), index=True)
    phone = Column(String(30))
    address = Column(Text)
    notes = Column(Text)
    preferred_contact_method = Column(String(20))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    equipment = relationship("Equipment", back_populates="customer")
    jobs = relationship("Job", back_populates="customer")

    def __repr__(self):
        return f"<Customer {self.name}>"
