"""Monthly cost ledger, entered manually per creator."""
from sqlalchemy import Column, Integer, Numeric, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from agency_os.core.database import Base


class MonthlyFinancial(Base):
    """One row per creator per calendar month."""
    __tablename__ = "monthly_financials"
    __table_args__ = (
        UniqueConstraint("creator_id", "year", "month", name="uq_monthly_financial_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    creator_id = Column(Integer, ForeignKey("creators.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    month = Column(Integer, nullable=False)

    # Display only, the engine works from sales
    gross_revenue = Column(Numeric(12, 2), default=0)

    marketing_costs = Column(Numeric(12, 2), default=0)
    tool_costs = Column(Numeric(12, 2), default=0)
    other_costs = Column(Numeric(12, 2), default=0)
    custom_costs = Column(JSON, nullable=True)  # [{"label": "...", "amount": "12.50"}]

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    creator = relationship("Creator", back_populates="monthly_financials")
