"""Reporting facade used by dashboards and exports.

Usage:
    service = ReportingService(SqlAlchemyReportingRepository(db))
    window = service.resolve(PeriodMode.SINGLE_MONTH, month=3, year=2025)
    report = service.agency_report(window)
"""
import logging
from datetime import date, tzinfo
from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from agency_os.core.config import settings
from agency_os.core.errors import NotFoundError
from agency_os.schemas.reporting import (
    AgentDetail,
    AgentEarningsResult,
    AggregateReport,
    CreatorReconciliationResult,
    MonthOverMonth,
    PeriodMode,
    PeriodSalesTotal,
    ReportingWindow,
)
from agency_os.services.agent_earnings import compute_agent_earnings, daily_breakdown
from agency_os.services.aggregation import aggregate
from agency_os.services.creator_reconciliation import compute_creator_reconciliation
from agency_os.services.period import resolve_period
from agency_os.services.repository import ReportingRepository, ReportingSnapshot

logger = logging.getLogger(__name__)


class ReportingService:
    def __init__(
        self,
        repository: ReportingRepository,
        tz: Optional[tzinfo] = None,
        inception: Optional[date] = None,
        max_workers: Optional[int] = None,
    ):
        self.repository = repository
        self.tz = tz or ZoneInfo(settings.REPORTING_TIMEZONE)
        self.inception = inception or settings.PROGRAM_INCEPTION
        self.max_workers = max_workers or settings.AGGREGATION_MAX_WORKERS

    def resolve(
        self,
        mode: PeriodMode,
        month: int,
        year: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ReportingWindow:
        explicit_range = None
        if start is not None or end is not None:
            if start is None or end is None:
                raise ValueError("Both start and end are required for an explicit range")
            explicit_range = (start, end)
        return resolve_period(mode, month, year, explicit_range, inception=self.inception, tz=self.tz)

    def _snapshot(self, window: ReportingWindow) -> ReportingSnapshot:
        return self.repository.load_snapshot(window)

    def agent_report(self, agent_id: int, window: ReportingWindow) -> AgentEarningsResult:
        snapshot = self._snapshot(window)
        agent = next((a for a in snapshot.agents if a.agent_id == agent_id), None)
        if agent is None:
            raise NotFoundError(f"Agent {agent_id} not found")
        return compute_agent_earnings(agent_id, agent, snapshot.transactions, snapshot.payments, window)

    def creator_report(self, creator_id: int, window: ReportingWindow) -> CreatorReconciliationResult:
        snapshot = self._snapshot(window)
        creator = next((c for c in snapshot.creators if c.creator_id == creator_id), None)
        if creator is None:
            raise NotFoundError(f"Creator {creator_id} not found")
        agent_map = snapshot.agent_compensation_map()
        return compute_creator_reconciliation(
            creator_id, creator, snapshot.transactions, agent_map, snapshot.cost_ledger, window
        )

    def agency_report(self, window: ReportingWindow) -> AggregateReport:
        snapshot = self._snapshot(window)
        report = aggregate(window, snapshot, max_workers=self.max_workers)
        logger.info(
            f"Agency report {window.mode.value} {window.start.date()}..{window.end.date()}: "
            f"commissions={report.totals.total_commissions_owed}, "
            f"profit={report.totals.total_agency_profit}"
        )
        return report

    def agent_detail(self, agent_id: int, month: int, year: int) -> AgentDetail:
        """Month view for one agent: totals, one row per day, payments made."""
        window = self.resolve(PeriodMode.SINGLE_MONTH, month, year)
        snapshot = self._snapshot(window)
        agent = next((a for a in snapshot.agents if a.agent_id == agent_id), None)
        if agent is None:
            raise NotFoundError(f"Agent {agent_id} not found")

        earnings = compute_agent_earnings(agent_id, agent, snapshot.transactions, snapshot.payments, window)
        rows = daily_breakdown(
            agent_id, agent, snapshot.transactions, window, self.tz, max_days=settings.MAX_BREAKDOWN_DAYS
        )
        payments = [p for p in snapshot.payments if p.agent_id == agent_id and window.contains(p.paid_at)]
        return AgentDetail(earnings=earnings, daily_breakdown=rows, payments=payments)

    def _sales_total(self, month: int, year: int, agent_id: Optional[int]) -> PeriodSalesTotal:
        window = self.resolve(PeriodMode.SINGLE_MONTH, month, year)
        sales = [
            t for t in self.repository.query_transactions(window.start, window.end, agent_id=agent_id)
            if window.contains(t.occurred_at)
        ]
        return PeriodSalesTotal(
            year=year,
            month=month,
            amount=sum((t.variable_amount for t in sales), Decimal("0")),
            count=len(sales),
        )

    def month_over_month(self, month: int, year: int, agent_id: Optional[int] = None) -> MonthOverMonth:
        prior_date = date(year, month, 1) - relativedelta(months=1)

        current = self._sales_total(month, year, agent_id)
        previous = self._sales_total(prior_date.month, prior_date.year, agent_id)

        change = current.amount - previous.amount
        change_percent = change / previous.amount * 100 if previous.amount > 0 else Decimal("0")
        return MonthOverMonth(
            current=current,
            previous=previous,
            change_amount=change,
            change_percent=change_percent,
        )
