"""Commission and creator financial exports (CSV / Excel)."""
import io
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List

import pandas as pd

from agency_os.schemas.reporting import AggregateReport

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _money(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def _period_label(report: AggregateReport) -> str:
    window = report.window
    last = window.last_instant
    if window.month_span == 1:
        return f"{window.start.month}/{window.start.year}"
    return f"{window.start.month}/{window.start.year} - {last.month}/{last.year}"


def agent_rows(report: AggregateReport) -> List[Dict]:
    period = _period_label(report)
    return [
        {
            "Chatter": a.agent_name or f"#{a.agent_id}",
            "Period": period,
            "Sales": _money(a.sales_total),
            "Commission %": float(a.commission_percent) if a.commission_percent is not None else None,
            "Commission": _money(a.commission_component),
            "BASE": _money(a.flat_total),
            "Fixed Salary": _money(a.salary_component),
            "Total Earnings": _money(a.total_earnings),
            "Payments": _money(a.payments_in_window),
            "Amount Owed": _money(a.amount_owed),
        }
        for a in report.per_agent
    ]


def creator_rows(report: AggregateReport) -> List[Dict]:
    period = _period_label(report)
    return [
        {
            "Creator": c.creator_name or f"#{c.creator_id}",
            "Period": period,
            "Compensation": c.compensation_mode.value,
            "Sales": _money(c.gross_variable),
            "After Platform Fee": _money(c.revenue_after_platform_take),
            "Creator Earnings": _money(c.creator_earnings),
            "Cashback": _money(c.cashback),
            "Net Revenue": _money(c.net_revenue),
            "Chatter Commissions": _money(c.agent_commissions_attributed),
            "Marketing": _money(c.marketing_cost),
            "Tools": _money(c.tool_cost),
            "Other": _money(c.other_cost),
            "Custom Costs": _money(sum((x.amount for x in c.custom_costs), Decimal("0"))),
            "Agency Profit": _money(c.agency_profit),
        }
        for c in report.per_creator
    ]


def totals_rows(report: AggregateReport) -> List[Dict]:
    t = report.totals
    rows = [
        {"Metric": "Total Commissions", "Value": _money(t.total_commissions_owed)},
        {"Metric": "Total Fixed Salaries", "Value": _money(t.total_flat_salaries)},
        {"Metric": "Total Payments", "Value": _money(t.total_payments)},
    ]
    if t.total_owed_net_of_payments is not None:
        rows.append({"Metric": "Total Owed To Chatters", "Value": _money(t.total_owed_net_of_payments)})
    rows += [
        {"Metric": "Total Sales", "Value": _money(t.total_gross_variable)},
        {"Metric": "Total Net Revenue", "Value": _money(t.total_net_revenue)},
        {"Metric": "Total Agency Profit", "Value": _money(t.total_agency_profit)},
    ]
    return rows


def export_commissions_csv(report: AggregateReport) -> bytes:
    """Per-chatter commission table as CSV."""
    df = pd.DataFrame(agent_rows(report), columns=[
        "Chatter", "Period", "Sales", "Commission %", "Commission", "BASE",
        "Fixed Salary", "Total Earnings", "Payments", "Amount Owed",
    ])
    return df.to_csv(index=False).encode("utf-8")


def export_commissions_excel(report: AggregateReport) -> bytes:
    """Workbook with chatter, creator and totals sheets."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        pd.DataFrame(agent_rows(report)).to_excel(writer, sheet_name="Commissions", index=False)
        pd.DataFrame(creator_rows(report)).to_excel(writer, sheet_name="Creators", index=False)
        pd.DataFrame(totals_rows(report)).to_excel(writer, sheet_name="Totals", index=False)

        for ws in writer.sheets.values():
            for column in ws.columns:
                width = max(len(str(cell.value or "")) for cell in column) + 2
                ws.column_dimensions[column[0].column_letter].width = min(width, 40)

    logger.info(f"Commission workbook built: {len(report.per_agent)} chatters, {len(report.per_creator)} creators")
    return buffer.getvalue()
