"""Agent earnings for one reporting window.

    commission = variable_total * commission_percent / 100   (percent agents)
    salary     = flat_salary_per_month * month_span           (salaried agents)
    earnings   = commission + salary + flat_total             (flat always 1:1)
    owed       = earnings - payments in window                (may go negative)

Pure functions over snapshots; nothing here touches the database.
"""
import calendar
from collections import OrderedDict
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from agency_os.schemas.compensation import AgentCompensation
from agency_os.schemas.payment import PaymentRecord
from agency_os.schemas.reporting import AgentEarningsResult, DailyBreakdownRow, ReportingWindow
from agency_os.schemas.sale import Transaction

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _agent_transactions(agent_id: int, transactions: Iterable[Transaction], window: ReportingWindow) -> List[Transaction]:
    return [t for t in transactions if t.agent_id == agent_id and window.contains(t.occurred_at)]


def percent_commission(variable_amount: Decimal, commission_percent: Optional[Decimal]) -> Decimal:
    if not commission_percent:
        return ZERO
    return variable_amount * commission_percent / HUNDRED


def compute_agent_earnings(
    agent_id: int,
    compensation: AgentCompensation,
    transactions: Iterable[Transaction],
    payments: Iterable[PaymentRecord],
    window: ReportingWindow,
) -> AgentEarningsResult:
    """Compute what one agent earned in the window and what is still owed."""
    sales = _agent_transactions(agent_id, transactions, window)

    variable_total = sum((t.variable_amount for t in sales), ZERO)
    flat_total = sum((t.flat_amount for t in sales), ZERO)

    commission_component = percent_commission(variable_total, compensation.commission_percent)

    salary_component = ZERO
    if compensation.flat_salary_per_month is not None:
        salary_component = compensation.flat_salary_per_month * window.month_span

    total_earnings = commission_component + salary_component + flat_total

    payments_in_window = sum(
        (p.amount for p in payments if p.agent_id == agent_id and window.contains(p.paid_at)),
        ZERO,
    )

    return AgentEarningsResult(
        agent_id=agent_id,
        agent_name=compensation.agent_name,
        window=window,
        commission_percent=compensation.commission_percent,
        flat_salary_per_month=compensation.flat_salary_per_month,
        transaction_count=len(sales),
        variable_total=variable_total,
        flat_total=flat_total,
        sales_total=variable_total,
        commission_component=commission_component,
        salary_component=salary_component,
        total_earnings=total_earnings,
        payments_in_window=payments_in_window,
        amount_owed=total_earnings - payments_in_window,
    )


def _local_day(ts: datetime, tz: tzinfo) -> date:
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


def daily_breakdown(
    agent_id: int,
    compensation: AgentCompensation,
    transactions: Iterable[Transaction],
    window: ReportingWindow,
    tz: tzinfo,
    max_days: int = 31,
) -> List[DailyBreakdownRow]:
    """Day-by-day earnings for a bounded window.

    Every calendar day of the window gets a row, even without sales. A flat
    salary is spread evenly over the days of its month, so a full month of
    rows adds back up to the monthly figure.
    """
    first_day = _local_day(window.start, tz)
    last_day = _local_day(window.last_instant, tz)
    n_days = (last_day - first_day).days + 1
    if not window.is_bounded or n_days > max_days:
        raise ValueError(f"Daily breakdown is limited to {max_days} days, window has {n_days}")

    days: Dict[date, Dict] = OrderedDict()
    for offset in range(n_days):
        days[first_day + timedelta(days=offset)] = {
            "sales": ZERO,
            "commission": ZERO,
            "flat_earnings": ZERO,
            "count": 0,
        }

    for t in _agent_transactions(agent_id, transactions, window):
        bucket = days.get(_local_day(t.occurred_at, tz))
        if bucket is None:
            continue
        bucket["sales"] += t.variable_amount
        bucket["commission"] += percent_commission(t.variable_amount, compensation.commission_percent)
        bucket["flat_earnings"] += t.flat_amount
        bucket["count"] += 1

    rows = []
    for day, data in days.items():
        salary_portion = ZERO
        if compensation.flat_salary_per_month:
            days_in_month = calendar.monthrange(day.year, day.month)[1]
            salary_portion = compensation.flat_salary_per_month / days_in_month
        rows.append(DailyBreakdownRow(day=day, salary_portion=salary_portion, **data))
    return rows
