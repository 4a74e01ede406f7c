from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_os.core.database import Base
import enum


class SaleType(str, enum.Enum):
    TIP = "tip"
    PPV = "ppv"
    INITIAL = "initial"
    CAM = "cam"
    CUSTOM = "custom"
    BASE = "base"  # flat amount paid 1:1 to the agent


class SaleStatus(str, enum.Enum):
    ONLINE = "online"
    OFFLINE = "offline"


class Sale(Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)

    agent_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id"), nullable=False, index=True)

    # Amounts
    amount = Column(Numeric(10, 2), nullable=False, default=0)  # variable, commissionable
    base_amount = Column(Numeric(10, 2), nullable=False, default=0)  # flat, agent only

    sale_type = Column(String, nullable=False, default="tip")
    status = Column(String, default="online", nullable=False)
    note = Column(Text, nullable=True)

    # Dates
    sale_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    agent = relationship("User", back_populates="sales")
    creator = relationship("Creator", back_populates="sales")
