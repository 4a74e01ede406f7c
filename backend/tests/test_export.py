import io
from datetime import date, timezone

import pandas as pd
import pytest

from agency_os.models.sale import SaleType
from agency_os.schemas.reporting import PeriodMode
from agency_os.services.commission_pdf import generate_agent_statement_pdf
from agency_os.services.export import (
    agent_rows,
    export_commissions_csv,
    export_commissions_excel,
    totals_rows,
)
from agency_os.services.reporting import ReportingService

from conftest import (
    InMemoryReportingRepository, make_ledger, make_payment, make_sale, percent_agent, revenue_share_creator,
)

UTC = timezone.utc


@pytest.fixture
def service():
    repo = InMemoryReportingRepository(
        agents=[percent_agent(agent_id=1, percent="10", name="Giulia Rossi")],
        creators=[revenue_share_creator(creator_id=1, take=15)],
        transactions=[
            make_sale(id=1, variable="1000"),
            make_sale(id=2, flat="50", kind=SaleType.BASE),
        ],
        payments=[make_payment(amount="70")],
        cost_ledger=[make_ledger(marketing="25", custom=[("Photographer", "40")])],
    )
    return ReportingService(repo, tz=UTC, inception=date(2025, 1, 1))


class TestExports:
    def test_agent_rows(self, service):
        report = service.agency_report(service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025))
        (row,) = agent_rows(report)

        assert row["Chatter"] == "Giulia Rossi"
        assert row["Period"] == "3/2025"
        assert row["Sales"] == 1000.0
        assert row["Total Earnings"] == 150.0
        assert row["Amount Owed"] == 80.0

    def test_csv(self, service):
        report = service.agency_report(service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025))
        df = pd.read_csv(io.BytesIO(export_commissions_csv(report)))

        assert list(df["Chatter"]) == ["Giulia Rossi"]
        assert df.loc[0, "Commission"] == 100.0
        assert df.loc[0, "BASE"] == 50.0

    def test_excel_sheets(self, service):
        report = service.agency_report(service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025))
        sheets = pd.read_excel(io.BytesIO(export_commissions_excel(report)), sheet_name=None)

        assert set(sheets) == {"Commissions", "Creators", "Totals"}
        creators = sheets["Creators"]
        assert creators.loc[0, "Net Revenue"] == 450.0
        assert creators.loc[0, "Custom Costs"] == 40.0
        assert creators.loc[0, "Agency Profit"] == 235.0

    def test_cumulative_totals_skip_owed(self, service):
        report = service.agency_report(service.resolve(PeriodMode.CUMULATIVE, 3, 2025))
        metrics = [r["Metric"] for r in totals_rows(report)]

        assert "Total Owed To Chatters" not in metrics
        assert "Total Agency Profit" in metrics
        assert agent_rows(report)[0]["Period"] == "1/2025 - 3/2025"


class TestStatementPdf:
    def test_pdf_bytes(self, service):
        pdf = generate_agent_statement_pdf(service.agent_detail(1, 3, 2025))
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000
