from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal


class PaymentRecord(BaseModel):
    """Money already disbursed to an agent."""
    id: int
    agent_id: int
    paid_at: datetime
    amount: Decimal

    class Config:
        frozen = True
