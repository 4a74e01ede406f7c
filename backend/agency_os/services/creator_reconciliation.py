"""Creator (content owner) reconciliation for one reporting window.

The platform always keeps 20% from the creator's point of view, so creator
earnings are computed on gross * 0.8 whatever the creator's platform take
percent is. A 15% take means the platform hands the agency a 5% cashback;
that cashback is agency margin and never reaches the creator.

    revenue_after_take = gross_variable * 0.80
    creator_earnings   = revenue_after_take * share% / 100      (revenue share)
                       = fixed_cost * month_span                (fixed cost)
    net_revenue        = revenue_after_take - creator_earnings + cashback
    agency_profit      = net_revenue - agent commissions - ledger costs

Flat (BASE) sale amounts belong to agents: they never count as creator
revenue, but they do count among the agent commissions charged to the creator.
"""
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional

from agency_os.models.creator import CreatorCompensationType
from agency_os.schemas.compensation import AgentCompensation, CreatorCompensation
from agency_os.schemas.monthly_financial import CostLedgerEntry, CustomCost
from agency_os.schemas.reporting import CreatorReconciliationResult, ReportingWindow
from agency_os.schemas.sale import Transaction
from agency_os.services.agent_earnings import percent_commission

ZERO = Decimal("0")
HUNDRED = Decimal("100")

CANONICAL_PLATFORM_TAKE = Decimal("20")
CASHBACK_PLATFORM_TAKE = 15
CASHBACK_PERCENT = Decimal("5")


def cashback_percent_for(platform_take_percent: int) -> Decimal:
    return CASHBACK_PERCENT if platform_take_percent == CASHBACK_PLATFORM_TAKE else ZERO


def attributed_agent_commission(transaction: Transaction, agent: Optional[AgentCompensation] = None) -> Decimal:
    """Commission the agency owes an agent for one sale of this creator.

    Flat salaries are accounted agency-wide, so only the percentage part and
    the flat sale amount are charged to the creator.
    """
    if agent is not None and agent.is_percent_based:
        return percent_commission(transaction.variable_amount, agent.commission_percent) + transaction.flat_amount
    return transaction.flat_amount


def compute_creator_reconciliation(
    creator_id: int,
    compensation: CreatorCompensation,
    transactions: Iterable[Transaction],
    agent_compensations: Mapping[int, AgentCompensation],
    cost_ledger: Iterable[CostLedgerEntry],
    window: ReportingWindow,
) -> CreatorReconciliationResult:
    """Compute revenue, creator earnings, costs and agency profit for one creator."""
    sales = [t for t in transactions if t.creator_id == creator_id and window.contains(t.occurred_at)]

    gross_variable = sum((t.variable_amount for t in sales), ZERO)

    cashback_percent = cashback_percent_for(compensation.platform_take_percent)
    cashback = gross_variable * cashback_percent / HUNDRED

    revenue_after_take = gross_variable * (HUNDRED - CANONICAL_PLATFORM_TAKE) / HUNDRED

    creator_earnings = ZERO
    if compensation.compensation_mode == CreatorCompensationType.REVENUE_SHARE:
        if compensation.revenue_share_percent is not None:
            creator_earnings = revenue_after_take * compensation.revenue_share_percent / HUNDRED
    elif compensation.compensation_mode == CreatorCompensationType.FIXED_COST:
        if compensation.fixed_cost is not None:
            creator_earnings = compensation.fixed_cost * window.month_span

    net_revenue = revenue_after_take - creator_earnings + cashback

    agent_commissions = sum(
        (attributed_agent_commission(t, agent_compensations.get(t.agent_id)) for t in sales),
        ZERO,
    )

    # Missing months simply contribute nothing
    months = set(window.months())
    entries = [
        e for e in cost_ledger
        if e.creator_id == creator_id and (e.year, e.month) in months
    ]
    entries.sort(key=lambda e: (e.year, e.month))

    marketing = sum((e.marketing_cost for e in entries), ZERO)
    tools = sum((e.tool_cost for e in entries), ZERO)
    other = sum((e.other_cost for e in entries), ZERO)
    custom: List[CustomCost] = [c for e in entries for c in e.custom_costs]
    costs_total = sum((e.total for e in entries), ZERO)

    return CreatorReconciliationResult(
        creator_id=creator_id,
        creator_name=compensation.creator_name,
        window=window,
        compensation_mode=compensation.compensation_mode,
        revenue_share_percent=compensation.revenue_share_percent,
        fixed_cost=compensation.fixed_cost,
        platform_take_percent=compensation.platform_take_percent,
        transaction_count=len(sales),
        gross_variable=gross_variable,
        cashback_percent=cashback_percent,
        cashback=cashback,
        revenue_after_platform_take=revenue_after_take,
        creator_earnings=creator_earnings,
        net_revenue=net_revenue,
        agent_commissions_attributed=agent_commissions,
        marketing_cost=marketing,
        tool_cost=tools,
        other_cost=other,
        custom_costs=custom,
        costs_total=costs_total,
        agency_profit=net_revenue - agent_commissions - costs_total,
        gross_revenue_reported=sum((e.gross_revenue_reported for e in entries), ZERO),
    )
