"""Shared fixtures: an in-memory repository, a SQLite session and record builders."""
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, List, Optional

import pytest

from agency_os.core.database import Base, SessionLocal, engine
import agency_os.models  # noqa: F401
from agency_os.models.creator import CreatorCompensationType
from agency_os.models.sale import SaleType
from agency_os.schemas.compensation import AgentCompensation, CreatorCompensation
from agency_os.schemas.monthly_financial import CostLedgerEntry, CustomCost
from agency_os.schemas.payment import PaymentRecord
from agency_os.schemas.reporting import PeriodMode, ReportingWindow
from agency_os.schemas.sale import Transaction
from agency_os.services.period import resolve_period
from agency_os.services.repository import ReportingSnapshot

UTC = timezone.utc


def at(year: int, month: int, day: int = 1, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour, tzinfo=UTC)


def make_sale(
    id: int = 1,
    agent_id: int = 1,
    creator_id: int = 1,
    occurred_at: Optional[datetime] = None,
    variable: str = "0",
    flat: str = "0",
    kind: SaleType = SaleType.TIP,
) -> Transaction:
    return Transaction(
        id=id,
        agent_id=agent_id,
        creator_id=creator_id,
        occurred_at=occurred_at or at(2025, 3, 10),
        variable_amount=Decimal(variable),
        flat_amount=Decimal(flat),
        kind=kind,
    )


def make_payment(id: int = 1, agent_id: int = 1, amount: str = "0", paid_at: Optional[datetime] = None) -> PaymentRecord:
    return PaymentRecord(id=id, agent_id=agent_id, paid_at=paid_at or at(2025, 3, 20), amount=Decimal(amount))


def make_ledger(
    creator_id: int = 1,
    year: int = 2025,
    month: int = 3,
    marketing: str = "0",
    tools: str = "0",
    other: str = "0",
    custom: Iterable = (),
) -> CostLedgerEntry:
    return CostLedgerEntry(
        creator_id=creator_id,
        year=year,
        month=month,
        marketing_cost=Decimal(marketing),
        tool_cost=Decimal(tools),
        other_cost=Decimal(other),
        custom_costs=tuple(CustomCost(label=label, amount=Decimal(amount)) for label, amount in custom),
    )


def percent_agent(agent_id: int = 1, percent: str = "10", name: str = "Giulia") -> AgentCompensation:
    return AgentCompensation(agent_id=agent_id, agent_name=name, commission_percent=Decimal(percent))


def salaried_agent(agent_id: int = 2, salary: str = "300", name: str = "Marco") -> AgentCompensation:
    return AgentCompensation(agent_id=agent_id, agent_name=name, flat_salary_per_month=Decimal(salary))


def revenue_share_creator(creator_id: int = 1, share: str = "50", take: int = 20, name: str = "Luna") -> CreatorCompensation:
    return CreatorCompensation(
        creator_id=creator_id,
        creator_name=name,
        compensation_mode=CreatorCompensationType.REVENUE_SHARE,
        revenue_share_percent=Decimal(share),
        platform_take_percent=take,
    )


def fixed_cost_creator(creator_id: int = 2, cost: str = "1000", take: int = 20, name: str = "Aurora") -> CreatorCompensation:
    return CreatorCompensation(
        creator_id=creator_id,
        creator_name=name,
        compensation_mode=CreatorCompensationType.FIXED_COST,
        fixed_cost=Decimal(cost),
        platform_take_percent=take,
    )


class InMemoryReportingRepository:
    """Repository fake backed by plain lists."""

    def __init__(self, agents=(), creators=(), transactions=(), payments=(), cost_ledger=(), inactive_agents=()):
        self.agents: List[AgentCompensation] = list(agents)
        self.inactive_agents: List[AgentCompensation] = list(inactive_agents)
        self.creators: List[CreatorCompensation] = list(creators)
        self.transactions: List[Transaction] = list(transactions)
        self.payments: List[PaymentRecord] = list(payments)
        self.cost_ledger: List[CostLedgerEntry] = list(cost_ledger)
        self.snapshots_loaded = 0

    def query_transactions(self, start, end, agent_id=None, creator_id=None):
        return [
            t for t in self.transactions
            if start <= t.occurred_at < end
            and (agent_id is None or t.agent_id == agent_id)
            and (creator_id is None or t.creator_id == creator_id)
        ]

    def query_payments(self, start, end, agent_id=None):
        return [
            p for p in self.payments
            if start <= p.paid_at < end and (agent_id is None or p.agent_id == agent_id)
        ]

    def query_cost_ledger(self, months, creator_id=None):
        wanted = set(months)
        return [
            e for e in self.cost_ledger
            if (e.year, e.month) in wanted and (creator_id is None or e.creator_id == creator_id)
        ]

    def list_agents(self, active_only=True):
        if active_only:
            return list(self.agents)
        return self.agents + self.inactive_agents

    def list_creators(self, active_only=True):
        return list(self.creators)

    def load_snapshot(self, window: ReportingWindow) -> ReportingSnapshot:
        self.snapshots_loaded += 1
        return ReportingSnapshot(
            window=window,
            agents=self.list_agents(),
            all_agents=self.list_agents(active_only=False),
            creators=self.list_creators(),
            transactions=self.query_transactions(window.start, window.end),
            payments=self.query_payments(window.start, window.end),
            cost_ledger=self.query_cost_ledger(window.months()),
        )


@pytest.fixture
def march_2025() -> ReportingWindow:
    return resolve_period(PeriodMode.SINGLE_MONTH, 3, 2025, tz=UTC)


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
