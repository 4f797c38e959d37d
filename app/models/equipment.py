"""Equipment model for tracking customer HVAC units (furnaces, condensers, heat pumps)."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Date
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class Equipment(Base):
    """Equipment installed at a customer site.

    Equipment has no company column of its own; it belongs to a tenant
    through its customer.
    """

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)

    make = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    serial_number = Column(String(100), nullable=True)
    type = Column(String(100), nullable=False)  # HVAC, Furnace, AC, Heat Pump, ...

    install_date = Column(Date, nullable=True)
    warranty_expires = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    customer = relationship("Customer", back_populates="equipment")

    def __repr__(self):
        return f"<Equipment {self.id} - {self.type}>"
