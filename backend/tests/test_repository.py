from datetime import datetime, timezone
from decimal import Decimal

import pytest

from agency_os.core.config import settings
from agency_os.models import Creator, MonthlyFinancial, Payment, Sale, User
from agency_os.models.creator import CreatorCompensationType
from agency_os.models.sale import SaleType
from agency_os.schemas.reporting import PeriodMode
from agency_os.services.period import resolve_period
from agency_os.services.reporting import ReportingService
from agency_os.services.repository import SqlAlchemyReportingRepository, creator_compensation, parse_custom_costs

UTC = timezone.utc


@pytest.fixture
def seeded(db_session):
    chatter = User(email="giulia@agency.local", full_name="Giulia", role="chatter", commission_percent=Decimal("10"))
    manager = User(email="marco@agency.local", full_name="Marco", role="chatter_manager", fixed_salary=Decimal("300"))
    inactive = User(email="old@agency.local", role="chatter", is_active=False, commission_percent=Decimal("5"))
    admin = User(email="admin@agency.local", role="admin")
    luna = Creator(
        name="Luna",
        compensation_type=CreatorCompensationType.REVENUE_SHARE.value,
        revenue_share_percent=Decimal("50"),
        platform_commission_percent=15,
    )
    db_session.add_all([chatter, manager, inactive, admin, luna])
    db_session.flush()

    db_session.add_all([
        Sale(agent_id=chatter.id, creator_id=luna.id, amount=Decimal("1000"), base_amount=Decimal("0"),
             sale_type=SaleType.PPV.value, sale_date=datetime(2025, 3, 10, 12)),
        Sale(agent_id=chatter.id, creator_id=luna.id, amount=Decimal("0"), base_amount=Decimal("50"),
             sale_type=SaleType.BASE.value, sale_date=datetime(2025, 3, 31, 23, 59)),
        Sale(agent_id=manager.id, creator_id=luna.id, amount=Decimal("200"), base_amount=Decimal("0"),
             sale_type=SaleType.TIP.value, sale_date=datetime(2025, 4, 1, 0, 0)),
        Payment(agent_id=chatter.id, amount=Decimal("70"), payment_date=datetime(2025, 3, 20)),
        MonthlyFinancial(creator_id=luna.id, year=2025, month=3, marketing_costs=Decimal("25"),
                         tool_costs=Decimal("0"), other_costs=Decimal("0"),
                         custom_costs=[{"label": "Photographer", "amount": "40"}]),
        MonthlyFinancial(creator_id=luna.id, year=2025, month=5, marketing_costs=Decimal("999")),
    ])
    db_session.commit()
    return {"chatter": chatter, "manager": manager, "inactive": inactive, "creator": luna}


class TestSqlAlchemyRepository:
    def test_transactions_half_open(self, db_session, seeded, march_2025):
        repo = SqlAlchemyReportingRepository(db_session)
        sales = repo.query_transactions(march_2025.start, march_2025.end)

        assert len(sales) == 2
        assert {s.kind for s in sales} == {SaleType.PPV, SaleType.BASE}

    def test_transactions_filtered_by_agent(self, db_session, seeded):
        repo = SqlAlchemyReportingRepository(db_session)
        window = resolve_period(PeriodMode.YEAR_TO_DATE, 4, 2025, tz=UTC)
        sales = repo.query_transactions(window.start, window.end, agent_id=seeded["manager"].id)
        assert [s.variable_amount for s in sales] == [Decimal("200")]

    def test_only_active_agents(self, db_session, seeded):
        agents = SqlAlchemyReportingRepository(db_session).list_agents()
        assert [a.agent_name for a in agents] == ["Giulia", "Marco"]
        assert agents[0].is_percent_based
        assert agents[1].flat_salary_per_month == Decimal("300")

    def test_creator_compensation(self, db_session, seeded):
        (creator,) = SqlAlchemyReportingRepository(db_session).list_creators()
        assert creator.compensation_mode == CreatorCompensationType.REVENUE_SHARE
        assert creator.platform_take_percent == 15

    def test_cost_ledger_only_requested_months(self, db_session, seeded):
        entries = SqlAlchemyReportingRepository(db_session).query_cost_ledger([(2025, 3), (2025, 4)])

        assert [(e.year, e.month) for e in entries] == [(2025, 3)]
        assert entries[0].custom_costs[0].label == "Photographer"
        assert entries[0].total == Decimal("65")

    def test_snapshot_drives_full_report(self, db_session, seeded, march_2025):
        service = ReportingService(SqlAlchemyReportingRepository(db_session), tz=UTC)
        report = service.agency_report(march_2025)
        chatter, manager = report.per_agent
        (creator,) = report.per_creator

        assert chatter.total_earnings == Decimal("150")
        assert chatter.amount_owed == Decimal("80")
        assert manager.total_earnings == Decimal("300")
        assert creator.net_revenue == Decimal("450")
        assert creator.agency_profit == Decimal("450") - Decimal("150") - Decimal("65")


class TestDeactivatedAgents:
    @pytest.fixture
    def inactive_sale(self, db_session, seeded):
        db_session.add(Sale(agent_id=seeded["inactive"].id, creator_id=seeded["creator"].id, amount=Decimal("1000"),
                            base_amount=Decimal("0"), sale_type=SaleType.PPV.value, sale_date=datetime(2025, 3, 12, 9)))
        db_session.commit()

    def test_snapshot_keeps_them_for_attribution(self, db_session, seeded, march_2025):
        snapshot = SqlAlchemyReportingRepository(db_session).load_snapshot(march_2025)

        assert seeded["inactive"].id not in [a.agent_id for a in snapshot.agents]
        assert snapshot.agent_compensation_map()[seeded["inactive"].id].commission_percent == Decimal("5")

    def test_commission_still_charged_to_creator(self, db_session, seeded, inactive_sale, march_2025):
        service = ReportingService(SqlAlchemyReportingRepository(db_session), tz=UTC)
        creator = service.creator_report(seeded["creator"].id, march_2025)

        # 10% of 1000 + 50 flat for Giulia, 5% of 1000 for the deactivated chatter
        assert creator.gross_variable == Decimal("2000")
        assert creator.agent_commissions_attributed == Decimal("200")

    def test_left_out_of_per_agent_earnings(self, db_session, seeded, inactive_sale, march_2025):
        report = ReportingService(SqlAlchemyReportingRepository(db_session), tz=UTC).agency_report(march_2025)
        (creator,) = report.per_creator

        assert [a.agent_name for a in report.per_agent] == ["Giulia", "Marco"]
        assert creator.agent_commissions_attributed == Decimal("200")
        assert creator.agency_profit == Decimal("900") - Decimal("200") - Decimal("65")


class TestPlatformTake:
    def test_zero_take_is_kept(self, db_session):
        db_session.add(Creator(name="Nova", compensation_type=CreatorCompensationType.FIXED_COST.value,
                               fixed_salary_cost=Decimal("800"), platform_commission_percent=0))
        db_session.commit()

        (creator,) = SqlAlchemyReportingRepository(db_session).list_creators()
        assert creator.platform_take_percent == 0

    def test_missing_take_falls_back_to_default(self):
        creator = Creator(id=7, name="Nova", compensation_type=CreatorCompensationType.REVENUE_SHARE.value,
                          revenue_share_percent=Decimal("40"))
        assert creator_compensation(creator).platform_take_percent == settings.DEFAULT_PLATFORM_TAKE_PERCENT


class TestParseCustomCosts:
    def test_accepts_legacy_name_key(self):
        costs = parse_custom_costs([{"name": "Ads", "amount": 12.5}, {"label": "Studio", "amount": "3"}])
        assert [(c.label, c.amount) for c in costs] == [("Ads", Decimal("12.5")), ("Studio", Decimal("3"))]

    def test_empty_values(self):
        assert parse_custom_costs(None) == ()
        assert parse_custom_costs({}) == ()
