from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_os.core.database import Base
import enum


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    CHATTER = "chatter"
    CHATTER_MANAGER = "chatter_manager"


# Roles that sell and get paid from the reporting engine
AGENT_ROLES = (UserRole.CHATTER.value, UserRole.CHATTER_MANAGER.value)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)

    role = Column(String, default="chatter", nullable=False)
    is_active = Column(Boolean, default=True)

    # Compensation: commission_percent XOR fixed_salary (validated on write)
    commission_percent = Column(Numeric(5, 2), nullable=True)  # e.g. 10.00 for 10%
    fixed_salary = Column(Numeric(10, 2), nullable=True)  # per calendar month

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sales = relationship("Sale", back_populates="agent", cascade="all, delete-orphan")
    payments = relationship("Payment", back_populates="agent", cascade="all, delete-orphan")
