"""Reporting windows and the computed records handed to dashboards and exports.

All records here are frozen and rebuilt on every request.
"""
from pydantic import BaseModel
from typing import List, Optional, Tuple
from datetime import date, datetime, timedelta
from decimal import Decimal
import enum

from dateutil.relativedelta import relativedelta

from agency_os.models.creator import CreatorCompensationType
from agency_os.schemas.monthly_financial import CustomCost
from agency_os.schemas.payment import PaymentRecord


class PeriodMode(str, enum.Enum):
    SINGLE_MONTH = "single_month"
    YEAR_TO_DATE = "year_to_date"
    CUMULATIVE = "cumulative"
    CUSTOM_RANGE = "custom_range"


class ReportingWindow(BaseModel):
    """Half-open window [start, end) plus the number of calendar months it touches."""
    start: datetime
    end: datetime
    month_span: int
    mode: PeriodMode

    class Config:
        frozen = True

    def contains(self, ts: datetime) -> bool:
        # Naive timestamps (e.g. from SQLite) are read in the window's timezone
        if ts.tzinfo is None and self.start.tzinfo is not None:
            ts = ts.replace(tzinfo=self.start.tzinfo)
        return self.start <= ts < self.end

    @property
    def last_instant(self) -> datetime:
        return self.end - timedelta(microseconds=1)

    def months(self) -> List[Tuple[int, int]]:
        """Ordered (year, month) pairs touched by the window."""
        last = self.last_instant
        cursor = date(self.start.year, self.start.month, 1)
        pairs = []
        while (cursor.year, cursor.month) <= (last.year, last.month):
            pairs.append((cursor.year, cursor.month))
            cursor += relativedelta(months=1)
        return pairs

    @property
    def is_bounded(self) -> bool:
        return self.mode != PeriodMode.CUMULATIVE


class AgentEarningsResult(BaseModel):
    agent_id: int
    agent_name: Optional[str] = None
    window: ReportingWindow
    commission_percent: Optional[Decimal] = None
    flat_salary_per_month: Optional[Decimal] = None
    transaction_count: int = 0
    variable_total: Decimal = Decimal("0")
    flat_total: Decimal = Decimal("0")
    sales_total: Decimal = Decimal("0")  # variable only, flat amounts are not sales
    commission_component: Decimal = Decimal("0")
    salary_component: Decimal = Decimal("0")
    total_earnings: Decimal = Decimal("0")
    payments_in_window: Decimal = Decimal("0")
    amount_owed: Decimal = Decimal("0")  # negative means overpaid

    class Config:
        frozen = True


class DailyBreakdownRow(BaseModel):
    day: date
    sales: Decimal = Decimal("0")
    commission: Decimal = Decimal("0")  # percentage commission only
    flat_earnings: Decimal = Decimal("0")
    salary_portion: Decimal = Decimal("0")
    count: int = 0

    class Config:
        frozen = True


class AgentDetail(BaseModel):
    earnings: AgentEarningsResult
    daily_breakdown: List[DailyBreakdownRow]
    payments: List[PaymentRecord]

    class Config:
        frozen = True


class CreatorReconciliationResult(BaseModel):
    creator_id: int
    creator_name: Optional[str] = None
    window: ReportingWindow
    compensation_mode: CreatorCompensationType
    revenue_share_percent: Optional[Decimal] = None
    fixed_cost: Optional[Decimal] = None
    platform_take_percent: int = 20
    transaction_count: int = 0
    gross_variable: Decimal = Decimal("0")
    cashback_percent: Decimal = Decimal("0")
    cashback: Decimal = Decimal("0")
    revenue_after_platform_take: Decimal = Decimal("0")
    creator_earnings: Decimal = Decimal("0")
    net_revenue: Decimal = Decimal("0")
    agent_commissions_attributed: Decimal = Decimal("0")
    marketing_cost: Decimal = Decimal("0")
    tool_cost: Decimal = Decimal("0")
    other_cost: Decimal = Decimal("0")
    custom_costs: List[CustomCost] = []
    costs_total: Decimal = Decimal("0")
    agency_profit: Decimal = Decimal("0")
    gross_revenue_reported: Decimal = Decimal("0")

    class Config:
        frozen = True


class AggregateTotals(BaseModel):
    total_commissions_owed: Decimal = Decimal("0")
    total_flat_salaries: Decimal = Decimal("0")
    total_payments: Decimal = Decimal("0")
    # Left empty for cumulative windows
    total_owed_net_of_payments: Optional[Decimal] = None
    total_gross_variable: Decimal = Decimal("0")
    total_net_revenue: Decimal = Decimal("0")
    total_agency_profit: Decimal = Decimal("0")

    class Config:
        frozen = True


class AggregateReport(BaseModel):
    window: ReportingWindow
    per_agent: List[AgentEarningsResult]
    per_creator: List[CreatorReconciliationResult]
    totals: AggregateTotals

    class Config:
        frozen = True


class PeriodSalesTotal(BaseModel):
    year: int
    month: int
    amount: Decimal = Decimal("0")
    count: int = 0

    class Config:
        frozen = True


class MonthOverMonth(BaseModel):
    current: PeriodSalesTotal
    previous: PeriodSalesTotal
    change_amount: Decimal
    change_percent: Decimal

    class Config:
        frozen = True
