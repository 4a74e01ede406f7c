"""Read-only data access for reporting.

The reporting engine never queries on its own. A repository loads one
`ReportingSnapshot` per request and every per-agent / per-creator computation
reads from that same snapshot, so a roll-up always adds up.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from agency_os.core.config import settings
from agency_os.models.creator import Creator
from agency_os.models.monthly_financial import MonthlyFinancial
from agency_os.models.payment import Payment
from agency_os.models.sale import Sale, SaleType
from agency_os.models.user import User, AGENT_ROLES
from agency_os.schemas.compensation import AgentCompensation, CreatorCompensation
from agency_os.schemas.monthly_financial import CostLedgerEntry, CustomCost
from agency_os.schemas.payment import PaymentRecord
from agency_os.schemas.reporting import ReportingWindow
from agency_os.schemas.sale import Transaction

logger = logging.getLogger(__name__)


class ReportingSnapshot(BaseModel):
    """Everything one report reads, fetched once."""
    window: ReportingWindow
    agents: List[AgentCompensation]
    # Active and deactivated agents, for commission attribution
    all_agents: List[AgentCompensation]
    creators: List[CreatorCompensation]
    transactions: List[Transaction]
    payments: List[PaymentRecord]
    cost_ledger: List[CostLedgerEntry]

    class Config:
        frozen = True

    def agent_compensation_map(self) -> Dict[int, AgentCompensation]:
        return {a.agent_id: a for a in self.all_agents}


class ReportingRepository(Protocol):
    def query_transactions(
        self,
        start: datetime,
        end: datetime,
        agent_id: Optional[int] = None,
        creator_id: Optional[int] = None,
    ) -> List[Transaction]: ...

    def query_payments(self, start: datetime, end: datetime, agent_id: Optional[int] = None) -> List[PaymentRecord]: ...

    def query_cost_ledger(self, months: Iterable[Tuple[int, int]], creator_id: Optional[int] = None) -> List[CostLedgerEntry]: ...

    def list_agents(self, active_only: bool = True) -> List[AgentCompensation]: ...

    def list_creators(self, active_only: bool = True) -> List[CreatorCompensation]: ...

    def load_snapshot(self, window: ReportingWindow) -> ReportingSnapshot: ...


def _dec(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _opt_dec(value) -> Optional[Decimal]:
    return None if value is None else _dec(value)


def parse_custom_costs(raw) -> Tuple[CustomCost, ...]:
    if not raw or not isinstance(raw, list):
        return ()
    costs = []
    for item in raw:
        # Older rows used "name" instead of "label"
        label = item.get("label") or item.get("name") or "Other"
        costs.append(CustomCost(label=label, amount=_dec(item.get("amount"))))
    return tuple(costs)


def agent_from_user(user: User) -> AgentCompensation:
    return AgentCompensation(
        agent_id=user.id,
        agent_name=user.full_name or user.email,
        commission_percent=_opt_dec(user.commission_percent),
        flat_salary_per_month=_opt_dec(user.fixed_salary),
    )


def creator_compensation(creator: Creator) -> CreatorCompensation:
    return CreatorCompensation(
        creator_id=creator.id,
        creator_name=creator.name,
        compensation_mode=creator.compensation_type,
        revenue_share_percent=_opt_dec(creator.revenue_share_percent),
        fixed_cost=_opt_dec(creator.fixed_salary_cost),
        platform_take_percent=(
            settings.DEFAULT_PLATFORM_TAKE_PERCENT
            if creator.platform_commission_percent is None
            else creator.platform_commission_percent
        ),
    )


def ledger_entry(mf: MonthlyFinancial) -> CostLedgerEntry:
    return CostLedgerEntry(
        creator_id=mf.creator_id,
        year=mf.year,
        month=mf.month,
        marketing_cost=_dec(mf.marketing_costs),
        tool_cost=_dec(mf.tool_costs),
        other_cost=_dec(mf.other_costs),
        custom_costs=parse_custom_costs(mf.custom_costs),
        gross_revenue_reported=_dec(mf.gross_revenue),
    )


class SqlAlchemyReportingRepository:
    def __init__(self, db: Session):
        self.db = db

    def query_transactions(self, start, end, agent_id=None, creator_id=None) -> List[Transaction]:
        query = self.db.query(Sale).filter(Sale.sale_date >= start, Sale.sale_date < end)
        if agent_id is not None:
            query = query.filter(Sale.agent_id == agent_id)
        if creator_id is not None:
            query = query.filter(Sale.creator_id == creator_id)

        return [
            Transaction(
                id=s.id,
                agent_id=s.agent_id,
                creator_id=s.creator_id,
                occurred_at=s.sale_date,
                variable_amount=_dec(s.amount),
                flat_amount=_dec(s.base_amount),
                kind=SaleType(s.sale_type),
            )
            for s in query.order_by(Sale.sale_date).all()
        ]

    def query_payments(self, start, end, agent_id=None) -> List[PaymentRecord]:
        query = self.db.query(Payment).filter(Payment.payment_date >= start, Payment.payment_date < end)
        if agent_id is not None:
            query = query.filter(Payment.agent_id == agent_id)

        return [
            PaymentRecord(id=p.id, agent_id=p.agent_id, paid_at=p.payment_date, amount=_dec(p.amount))
            for p in query.order_by(Payment.payment_date.desc()).all()
        ]

    def query_cost_ledger(self, months, creator_id=None) -> List[CostLedgerEntry]:
        wanted = set(months)
        if not wanted:
            return []
        years = sorted({y for y, _ in wanted})

        query = self.db.query(MonthlyFinancial).filter(MonthlyFinancial.year.in_(years))
        if creator_id is not None:
            query = query.filter(MonthlyFinancial.creator_id == creator_id)

        return [
            ledger_entry(mf)
            for mf in query.order_by(MonthlyFinancial.year, MonthlyFinancial.month).all()
            if (mf.year, mf.month) in wanted
        ]

    def list_agents(self, active_only: bool = True) -> List[AgentCompensation]:
        query = self.db.query(User).filter(User.role.in_(AGENT_ROLES))
        if active_only:
            query = query.filter(User.is_active == True)
        return [agent_from_user(u) for u in query.order_by(User.id).all()]

    def list_creators(self, active_only: bool = True) -> List[CreatorCompensation]:
        query = self.db.query(Creator)
        if active_only:
            query = query.filter(Creator.is_active == True)
        return [creator_compensation(c) for c in query.order_by(Creator.id).all()]

    def load_snapshot(self, window: ReportingWindow) -> ReportingSnapshot:
        """Read agents, creators, sales, payments and costs for the window.

        On PostgreSQL the reads share one REPEATABLE READ transaction.
        """
        if self.db.get_bind().dialect.name == "postgresql" and not self.db.in_transaction():
            self.db.execute(text("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ"))

        snapshot = ReportingSnapshot(
            window=window,
            agents=self.list_agents(),
            all_agents=self.list_agents(active_only=False),
            creators=self.list_creators(),
            transactions=self.query_transactions(window.start, window.end),
            payments=self.query_payments(window.start, window.end),
            cost_ledger=self.query_cost_ledger(window.months()),
        )
        logger.info(
            f"Snapshot {window.start.date()}..{window.end.date()} ({window.mode.value}): "
            f"{len(snapshot.agents)} agents, {len(snapshot.creators)} creators, "
            f"{len(snapshot.transactions)} sales, {len(snapshot.payments)} payments, "
            f"{len(snapshot.cost_ledger)} ledger rows"
        )
        return snapshot
