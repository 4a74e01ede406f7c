"""Reports API: chatter earnings, creator reconciliation, agency roll-up and exports."""
import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from agency_os.core.database import get_db
from agency_os.core.errors import NotFoundError
from agency_os.schemas.reporting import (
    AgentDetail,
    AgentEarningsResult,
    AggregateReport,
    CreatorReconciliationResult,
    MonthOverMonth,
    PeriodMode,
    ReportingWindow,
)
from agency_os.services.commission_pdf import generate_agent_statement_pdf
from agency_os.services.export import export_commissions_csv, export_commissions_excel
from agency_os.services.reporting import ReportingService
from agency_os.services.repository import SqlAlchemyReportingRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/reports", tags=["reports"])


def get_reporting_service(db: Session = Depends(get_db)) -> ReportingService:
    return ReportingService(SqlAlchemyReportingRepository(db))


def _current_month(service: ReportingService):
    now = datetime.now(service.tz)
    return now.month, now.year


def _resolve(
    service: ReportingService,
    mode: PeriodMode,
    month: Optional[int],
    year: Optional[int],
    start: Optional[date],
    end: Optional[date],
) -> ReportingWindow:
    default_month, default_year = _current_month(service)
    try:
        return service.resolve(mode, month or default_month, year or default_year, start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _period_slug(window: ReportingWindow) -> str:
    last = window.last_instant
    if window.month_span == 1:
        return f"{window.start.year}-{window.start.month:02d}"
    return f"{window.start.year}-{window.start.month:02d}_{last.year}-{last.month:02d}"


@router.get("/agency", response_model=AggregateReport)
def agency_report(
    mode: PeriodMode = Query(PeriodMode.SINGLE_MONTH, description="single_month, year_to_date, cumulative, custom_range"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    start: Optional[date] = Query(None, description="Range start YYYY-MM-DD"),
    end: Optional[date] = Query(None, description="Range end YYYY-MM-DD, inclusive"),
    service: ReportingService = Depends(get_reporting_service),
):
    """Per-chatter earnings, per-creator reconciliation and agency totals."""
    window = _resolve(service, mode, month, year, start, end)
    return service.agency_report(window)


@router.get("/agents/{agent_id}", response_model=AgentEarningsResult)
def agent_report(
    agent_id: int,
    mode: PeriodMode = Query(PeriodMode.SINGLE_MONTH),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: ReportingService = Depends(get_reporting_service),
):
    window = _resolve(service, mode, month, year, start, end)
    try:
        return service.agent_report(agent_id, window)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/agents/{agent_id}/detail", response_model=AgentDetail)
def agent_detail(
    agent_id: int,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    service: ReportingService = Depends(get_reporting_service),
):
    """Single month for one chatter with a row per day."""
    default_month, default_year = _current_month(service)
    try:
        return service.agent_detail(agent_id, month or default_month, year or default_year)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/creators/{creator_id}", response_model=CreatorReconciliationResult)
def creator_report(
    creator_id: int,
    mode: PeriodMode = Query(PeriodMode.SINGLE_MONTH),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: ReportingService = Depends(get_reporting_service),
):
    window = _resolve(service, mode, month, year, start, end)
    try:
        return service.creator_report(creator_id, window)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/month-over-month", response_model=MonthOverMonth)
def month_over_month(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    agent_id: Optional[int] = Query(None),
    service: ReportingService = Depends(get_reporting_service),
):
    """Sales for the month against the month before it."""
    default_month, default_year = _current_month(service)
    return service.month_over_month(month or default_month, year or default_year, agent_id=agent_id)


@router.get("/agency/export.csv")
def export_agency_csv(
    mode: PeriodMode = Query(PeriodMode.SINGLE_MONTH),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: ReportingService = Depends(get_reporting_service),
):
    window = _resolve(service, mode, month, year, start, end)
    report = service.agency_report(window)

    filename = f"commissions_{_period_slug(window)}.csv"
    return Response(
        content=export_commissions_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/agency/export.xlsx")
def export_agency_excel(
    mode: PeriodMode = Query(PeriodMode.SINGLE_MONTH),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: ReportingService = Depends(get_reporting_service),
):
    window = _resolve(service, mode, month, year, start, end)
    report = service.agency_report(window)

    filename = f"commissions_{_period_slug(window)}.xlsx"
    return Response(
        content=export_commissions_excel(report),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/agents/{agent_id}/statement.pdf")
def agent_statement_pdf(
    agent_id: int,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000),
    service: ReportingService = Depends(get_reporting_service),
):
    """Download the monthly earnings statement for a chatter."""
    default_month, default_year = _current_month(service)
    try:
        detail = service.agent_detail(agent_id, month or default_month, year or default_year)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    pdf_bytes = generate_agent_statement_pdf(detail)
    name = (detail.earnings.agent_name or f"agent_{agent_id}").replace(" ", "_")
    filename = f"Earnings_Statement_{name}_{_period_slug(detail.earnings.window)}.pdf"
    logger.info(f"Statement PDF generated for agent {agent_id} ({len(pdf_bytes)} bytes)")
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
