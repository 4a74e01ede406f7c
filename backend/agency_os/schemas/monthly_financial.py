from pydantic import BaseModel, Field
from typing import List, Optional, Tuple
from decimal import Decimal


class CustomCost(BaseModel):
    label: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)

    class Config:
        frozen = True


class MonthlyFinancialUpsert(BaseModel):
    gross_revenue: Decimal = Field(default=Decimal("0"), ge=0)
    marketing_costs: Decimal = Field(default=Decimal("0"), ge=0)
    tool_costs: Decimal = Field(default=Decimal("0"), ge=0)
    other_costs: Decimal = Field(default=Decimal("0"), ge=0)
    custom_costs: List[CustomCost] = Field(default_factory=list)


class MonthlyFinancialOut(MonthlyFinancialUpsert):
    id: Optional[int] = None
    creator_id: int
    year: int
    month: int


class CostLedgerEntry(BaseModel):
    """One creator's manually entered costs for one calendar month."""
    creator_id: int
    year: int
    month: int = Field(..., ge=1, le=12)
    marketing_cost: Decimal = Field(default=Decimal("0"), ge=0)
    tool_cost: Decimal = Field(default=Decimal("0"), ge=0)
    other_cost: Decimal = Field(default=Decimal("0"), ge=0)
    custom_costs: Tuple[CustomCost, ...] = ()
    gross_revenue_reported: Decimal = Field(default=Decimal("0"), ge=0)

    class Config:
        frozen = True

    @property
    def total(self) -> Decimal:
        custom = sum((c.amount for c in self.custom_costs), Decimal("0"))
        return self.marketing_cost + self.tool_cost + self.other_cost + custom
