"""Cost ledger maintenance: one row of manually entered costs per creator per month."""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from agency_os.core.errors import NotFoundError
from agency_os.models.creator import Creator
from agency_os.models.monthly_financial import MonthlyFinancial
from agency_os.schemas.monthly_financial import MonthlyFinancialOut, MonthlyFinancialUpsert
from agency_os.services.repository import parse_custom_costs

logger = logging.getLogger(__name__)


def _to_out(mf: MonthlyFinancial) -> MonthlyFinancialOut:
    custom = list(parse_custom_costs(mf.custom_costs))
    return MonthlyFinancialOut(
        id=mf.id,
        creator_id=mf.creator_id,
        year=mf.year,
        month=mf.month,
        gross_revenue=mf.gross_revenue or Decimal("0"),
        marketing_costs=mf.marketing_costs or Decimal("0"),
        tool_costs=mf.tool_costs or Decimal("0"),
        other_costs=mf.other_costs or Decimal("0"),
        custom_costs=custom,
    )


class MonthlyFinancialService:
    def __init__(self, db: Session):
        self.db = db

    def _require_creator(self, creator_id: int) -> Creator:
        creator = self.db.query(Creator).filter(Creator.id == creator_id).first()
        if not creator:
            raise NotFoundError(f"Creator {creator_id} not found")
        return creator

    @staticmethod
    def _check_period(year: int, month: int):
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        if year < 2000:
            raise ValueError(f"Year {year} is out of range")

    def upsert(self, creator_id: int, year: int, month: int, data: MonthlyFinancialUpsert) -> MonthlyFinancialOut:
        """Create or replace the cost row for (creator, year, month)."""
        self._check_period(year, month)
        self._require_creator(creator_id)

        mf = (
            self.db.query(MonthlyFinancial)
            .filter(
                MonthlyFinancial.creator_id == creator_id,
                MonthlyFinancial.year == year,
                MonthlyFinancial.month == month,
            )
            .first()
        )
        if not mf:
            mf = MonthlyFinancial(creator_id=creator_id, year=year, month=month)
            self.db.add(mf)

        mf.gross_revenue = data.gross_revenue
        mf.marketing_costs = data.marketing_costs
        mf.tool_costs = data.tool_costs
        mf.other_costs = data.other_costs
        mf.custom_costs = [{"label": c.label, "amount": str(c.amount)} for c in data.custom_costs]

        self.db.commit()
        self.db.refresh(mf)
        logger.info(f"Monthly financials saved for creator {creator_id} {year}-{month:02d}")
        return _to_out(mf)

    def get(self, creator_id: int, year: int, month: int) -> MonthlyFinancialOut:
        """Return the cost row, or an all-zero row when none was entered."""
        self._check_period(year, month)
        self._require_creator(creator_id)

        mf = (
            self.db.query(MonthlyFinancial)
            .filter(
                MonthlyFinancial.creator_id == creator_id,
                MonthlyFinancial.year == year,
                MonthlyFinancial.month == month,
            )
            .first()
        )
        if not mf:
            return MonthlyFinancialOut(creator_id=creator_id, year=year, month=month)
        return _to_out(mf)

    def list(
        self,
        creator_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> List[MonthlyFinancialOut]:
        query = self.db.query(MonthlyFinancial)
        if creator_id is not None:
            query = query.filter(MonthlyFinancial.creator_id == creator_id)
        if year is not None:
            query = query.filter(MonthlyFinancial.year == year)
        if month is not None:
            query = query.filter(MonthlyFinancial.month == month)

        rows = query.order_by(MonthlyFinancial.year.desc(), MonthlyFinancial.month.desc()).all()
        return [_to_out(mf) for mf in rows]
