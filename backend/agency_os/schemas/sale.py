from pydantic import BaseModel, Field, model_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from agency_os.models.sale import SaleType, SaleStatus


class SaleBase(BaseModel):
    creator_id: int
    amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    base_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    sale_type: SaleType = SaleType.TIP
    status: SaleStatus = SaleStatus.ONLINE
    note: Optional[str] = None


class SaleCreate(SaleBase):
    sale_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_amounts(self):
        """BASE sales may carry only a flat amount; every other type needs a variable amount."""
        if self.sale_type == SaleType.BASE:
            if self.amount <= 0 and self.base_amount <= 0:
                raise ValueError("BASE sales need a positive amount or base_amount")
        elif self.amount <= 0:
            raise ValueError("Amount must be positive unless the sale type is BASE")
        return self


class Transaction(BaseModel):
    """Read-only snapshot of a sale as the reporting engine sees it."""
    id: int
    agent_id: int
    creator_id: int
    occurred_at: datetime
    variable_amount: Decimal = Field(default=Decimal("0"), ge=0)
    flat_amount: Decimal = Field(default=Decimal("0"), ge=0)
    kind: SaleType = SaleType.TIP

    class Config:
        frozen = True
