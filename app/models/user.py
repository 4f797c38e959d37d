from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class UserRole(str, enum.Enum):
    solo_owner = "solo_owner"
    admin = "admin"
    dispatcher = "dispatcher"
    tech = "tech"


TECHNICIAN_ROLES = {UserRole.solo_owner.value, UserRole.tech.value}


class User(Base):
    """Local profile for an identity managed by Supabase Auth.

    The primary key is the Supabase user id; credentials never touch this table.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    profile_image_url = Column(String(500))
    role = Column(String(20), default=UserRole.admin.value, nullable=False)
    is_owner = Column(Boolean, default=False, nullable=False)
    company_id = Column(String(64), ForeignKey("companies.id"), nullable=True, index=True)
    has_completed_onboarding = Column(Boolean, default=False, nullable=False)
    current_location = Column(String(255))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    company = relationship("Company", back_populates="users")

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def is_technician(self) -> bool:
        return self.role in TECHNICIAN_ROLES
