"""Company model: the tenant boundary.

Every customer, job and invoice row carries a ``company_id``. A company is
created exactly once, when its owner completes onboarding.
"""

from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


def company_id_for_owner(user_id: str) -> str:
    """Companies are keyed by their owner, so an owner can never hold two."""
    return f"company_{user_id}"


class Company(Base):
    __tablename__ = "companies"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    is_solo = Column(Boolean, default=True, nullable=False)
    address = Column(Text)
    phone = Column(String(30))
    email = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", back_populates="company")

    def __repr__(self):
        return f"<Company {self.id}: {self.name}>"
