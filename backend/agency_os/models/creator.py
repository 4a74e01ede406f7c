"""Creator (content owner) model and compensation settings."""
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_os.core.database import Base
import enum


class CreatorCompensationType(str, enum.Enum):
    REVENUE_SHARE = "revenue_share"
    FIXED_COST = "fixed_cost"


class Creator(Base):
    __tablename__ = "creators"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)

    compensation_type = Column(String, default="revenue_share", nullable=False)
    revenue_share_percent = Column(Numeric(5, 2), nullable=True)  # used for revenue_share
    fixed_salary_cost = Column(Numeric(10, 2), nullable=True)  # per month, used for fixed_cost

    # Platform fee: 20 normally, 15 when the creator gives the agency 5% cashback
    platform_commission_percent = Column(Integer, default=20, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    sales = relationship("Sale", back_populates="creator")
    monthly_financials = relationship(
        "MonthlyFinancial", back_populates="creator", cascade="all, delete-orphan"
    )
