"""Agency-wide roll-up over one reporting window.

Per-agent and per-creator computations are independent and run on a thread
pool; they all read the same snapshot and are merged here in input order.
"""
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Optional

from agency_os.schemas.reporting import AggregateReport, AggregateTotals, ReportingWindow
from agency_os.services.agent_earnings import compute_agent_earnings
from agency_os.services.creator_reconciliation import compute_creator_reconciliation
from agency_os.services.repository import ReportingSnapshot

ZERO = Decimal("0")


def aggregate(
    window: ReportingWindow,
    snapshot: ReportingSnapshot,
    max_workers: Optional[int] = None,
) -> AggregateReport:
    agent_map = snapshot.agent_compensation_map()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        agent_futures = [
            executor.submit(
                compute_agent_earnings,
                agent.agent_id,
                agent,
                snapshot.transactions,
                snapshot.payments,
                window,
            )
            for agent in snapshot.agents
        ]
        creator_futures = [
            executor.submit(
                compute_creator_reconciliation,
                creator.creator_id,
                creator,
                snapshot.transactions,
                agent_map,
                snapshot.cost_ledger,
                window,
            )
            for creator in snapshot.creators
        ]
        per_agent = [f.result() for f in agent_futures]
        per_creator = [f.result() for f in creator_futures]

    total_commissions = sum((a.total_earnings for a in per_agent), ZERO)
    total_payments = sum((a.payments_in_window for a in per_agent), ZERO)

    totals = AggregateTotals(
        total_commissions_owed=total_commissions,
        total_flat_salaries=sum((a.salary_component for a in per_agent), ZERO),
        total_payments=total_payments,
        # An unbounded horizon gives no meaningful "owed" figure
        total_owed_net_of_payments=(total_commissions - total_payments) if window.is_bounded else None,
        total_gross_variable=sum((c.gross_variable for c in per_creator), ZERO),
        total_net_revenue=sum((c.net_revenue for c in per_creator), ZERO),
        total_agency_profit=sum((c.agency_profit for c in per_creator), ZERO),
    )

    return AggregateReport(
        window=window,
        per_agent=per_agent,
        per_creator=per_creator,
        totals=totals,
    )
