"""Monthly financials API: manually entered costs per creator per month."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from agency_os.core.database import get_db
from agency_os.core.errors import NotFoundError
from agency_os.schemas.monthly_financial import MonthlyFinancialOut, MonthlyFinancialUpsert
from agency_os.services.monthly_financial import MonthlyFinancialService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/monthly-financials", tags=["monthly-financials"])


@router.get("/", response_model=List[MonthlyFinancialOut])
def list_monthly_financials(
    creator_id: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
):
    return MonthlyFinancialService(db).list(creator_id=creator_id, year=year, month=month)


@router.get("/{creator_id}/{year}/{month}", response_model=MonthlyFinancialOut)
def get_monthly_financial(creator_id: int, year: int, month: int, db: Session = Depends(get_db)):
    try:
        return MonthlyFinancialService(db).get(creator_id, year, month)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/{creator_id}/{year}/{month}", response_model=MonthlyFinancialOut)
def upsert_monthly_financial(
    creator_id: int,
    year: int,
    month: int,
    data: MonthlyFinancialUpsert,
    db: Session = Depends(get_db),
):
    """Create or replace the cost row for a creator's month."""
    try:
        return MonthlyFinancialService(db).upsert(creator_id, year, month, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
