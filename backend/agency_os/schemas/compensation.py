"""Compensation settings for agents and creators.

The snapshot models (`AgentCompensation`, `CreatorCompensation`) are what the
reporting engine consumes and are taken as-is. The `*Update` models are the
write-time validators: contradictory configurations are rejected there.
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional
from decimal import Decimal

from agency_os.core.errors import CompensationConfigError
from agency_os.models.creator import CreatorCompensationType


class AgentCompensation(BaseModel):
    agent_id: int
    agent_name: Optional[str] = None
    commission_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    flat_salary_per_month: Optional[Decimal] = Field(None, ge=0)

    class Config:
        frozen = True

    @property
    def is_percent_based(self) -> bool:
        return bool(self.commission_percent)


class AgentCompensationUpdate(BaseModel):
    commission_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    flat_salary_per_month: Optional[Decimal] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_exclusive(self):
        if self.commission_percent is not None and self.flat_salary_per_month is not None:
            raise CompensationConfigError("An agent is paid by commission percent or by flat salary, not both")
        return self


class CreatorCompensation(BaseModel):
    creator_id: int
    creator_name: Optional[str] = None
    compensation_mode: CreatorCompensationType = CreatorCompensationType.REVENUE_SHARE
    revenue_share_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    fixed_cost: Optional[Decimal] = Field(None, ge=0)
    platform_take_percent: int = Field(20, ge=0, le=100)

    class Config:
        frozen = True


class CreatorCompensationUpdate(BaseModel):
    compensation_mode: CreatorCompensationType
    revenue_share_percent: Optional[Decimal] = Field(None, ge=0, le=100)
    fixed_cost: Optional[Decimal] = Field(None, ge=0)
    platform_take_percent: int = Field(20, ge=0, le=100)

    @model_validator(mode="after")
    def check_mode_fields(self):
        if self.compensation_mode == CreatorCompensationType.REVENUE_SHARE:
            if self.revenue_share_percent is None:
                raise CompensationConfigError("revenue_share_percent is required for revenue share creators")
        elif self.fixed_cost is None:
            raise CompensationConfigError("fixed_cost is required for fixed cost creators")
        return self
