from datetime import date, timezone
from decimal import Decimal

import pytest

from agency_os.core.errors import NotFoundError
from agency_os.models.sale import SaleType
from agency_os.schemas.reporting import PeriodMode
from agency_os.services.reporting import ReportingService

from conftest import (
    InMemoryReportingRepository, at, make_payment, make_sale, percent_agent, revenue_share_creator, salaried_agent,
)

UTC = timezone.utc


@pytest.fixture
def service():
    repo = InMemoryReportingRepository(
        agents=[percent_agent(agent_id=1, percent="10"), salaried_agent(agent_id=2, salary="300")],
        creators=[revenue_share_creator(creator_id=1, take=15)],
        transactions=[
            make_sale(id=1, agent_id=1, variable="100", occurred_at=at(2025, 3, 3)),
            make_sale(id=2, agent_id=1, flat="50", kind=SaleType.BASE, occurred_at=at(2025, 3, 4)),
            make_sale(id=3, agent_id=1, variable="80", occurred_at=at(2025, 2, 10)),
            make_sale(id=4, agent_id=2, variable="40", occurred_at=at(2025, 2, 11)),
        ],
        payments=[make_payment(id=1, agent_id=1, amount="70", paid_at=at(2025, 3, 28))],
    )
    return ReportingService(repo, tz=UTC, inception=date(2025, 1, 1), max_workers=2)


class TestResolve:
    def test_explicit_range(self, service):
        window = service.resolve(PeriodMode.CUSTOM_RANGE, 3, 2025, start=date(2025, 3, 1), end=date(2025, 3, 15))
        assert window.month_span == 1
        assert window.end == at(2025, 3, 16, 0)

    def test_half_a_range_rejected(self, service):
        with pytest.raises(ValueError):
            service.resolve(PeriodMode.CUSTOM_RANGE, 3, 2025, start=date(2025, 3, 1))

    def test_cumulative_uses_service_inception(self, service):
        window = service.resolve(PeriodMode.CUMULATIVE, 3, 2025)
        assert window.start == at(2025, 1, 1, 0)
        assert window.month_span == 3


class TestReports:
    def test_agent_report(self, service):
        window = service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025)
        result = service.agent_report(1, window)

        assert result.total_earnings == Decimal("60")
        assert result.amount_owed == Decimal("-10")

    def test_unknown_agent(self, service):
        window = service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025)
        with pytest.raises(NotFoundError):
            service.agent_report(42, window)

    def test_unknown_creator(self, service):
        window = service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025)
        with pytest.raises(NotFoundError):
            service.creator_report(42, window)

    def test_creator_report(self, service):
        window = service.resolve(PeriodMode.SINGLE_MONTH, 3, 2025)
        result = service.creator_report(1, window)

        assert result.gross_variable == Decimal("100")
        assert result.cashback == Decimal("5")

    def test_agency_report_reads_one_snapshot(self, service):
        window = service.resolve(PeriodMode.YEAR_TO_DATE, 3, 2025)
        report = service.agency_report(window)

        assert service.repository.snapshots_loaded == 1
        assert report.totals.total_gross_variable == Decimal("220")
        assert report.per_agent[1].salary_component == Decimal("900")

    def test_agent_detail(self, service):
        detail = service.agent_detail(1, 3, 2025)

        assert detail.earnings.total_earnings == Decimal("60")
        assert len(detail.daily_breakdown) == 31
        assert detail.daily_breakdown[2].commission == Decimal("10")
        assert detail.daily_breakdown[3].flat_earnings == Decimal("50")
        assert [p.amount for p in detail.payments] == [Decimal("70")]


class TestMonthOverMonth:
    def test_change_against_previous_month(self, service):
        mom = service.month_over_month(3, 2025)

        assert mom.current.amount == Decimal("100")
        assert mom.previous.amount == Decimal("120")
        assert mom.change_amount == Decimal("-20")
        assert mom.change_percent.quantize(Decimal("0.01")) == Decimal("-16.67")

    def test_single_agent(self, service):
        mom = service.month_over_month(3, 2025, agent_id=1)
        assert mom.previous.amount == Decimal("80")
        assert mom.current.count == 2

    def test_no_previous_sales(self, service):
        mom = service.month_over_month(2, 2025)
        assert mom.previous.amount == Decimal("0")
        assert mom.change_percent == Decimal("0")

    def test_january_compares_with_december(self, service):
        mom = service.month_over_month(1, 2025)
        assert (mom.previous.year, mom.previous.month) == (2024, 12)
