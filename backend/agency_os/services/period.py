"""Reporting period resolution.

Turns a (mode, month, year) selector into a half-open [start, end) window and
the number of calendar months it touches. Everything is computed from explicit
calendar values; the caller supplies the timezone the boundaries live in.

    SINGLE_MONTH   first instant of (year, month) .. first instant of next month
    YEAR_TO_DATE   Jan 1 of year .. first instant after (year, month),
                   or the caller's explicit range
    CUSTOM_RANGE   the caller's explicit range (required)
    CUMULATIVE     program inception .. first instant after (year, month)

month_span counts each (year, month) pair touched once:
    sum over years y of (last_month_in_y - first_month_in_y + 1)
"""
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from agency_os.core.config import settings
from agency_os.schemas.reporting import PeriodMode, ReportingWindow

DateLike = Union[date, datetime]


def month_start(year: int, month: int, tz: tzinfo = timezone.utc) -> datetime:
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return datetime(year, month, 1, tzinfo=tz)


def next_month_start(year: int, month: int, tz: tzinfo = timezone.utc) -> datetime:
    return month_start(year, month, tz) + relativedelta(months=1)


def count_months(first: Tuple[int, int], last: Tuple[int, int]) -> int:
    """Inclusive number of calendar months between two (year, month) pairs."""
    first_year, first_month = first
    last_year, last_month = last
    if (last_year, last_month) < (first_year, first_month):
        return 0

    months = 0
    for y in range(first_year, last_year + 1):
        start_m = first_month if y == first_year else 1
        end_m = last_month if y == last_year else 12
        months += end_m - start_m + 1
    return months


def _to_instant(value: DateLike, tz: tzinfo, is_end: bool = False) -> datetime:
    """Dates become day boundaries (an end date is inclusive); datetimes are kept."""
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=tz)
    instant = datetime(value.year, value.month, value.day, tzinfo=tz)
    if is_end:
        instant += timedelta(days=1)
    return instant


def _window(start: datetime, end: datetime, mode: PeriodMode) -> ReportingWindow:
    if end <= start:
        raise ValueError(f"Reporting window is empty: {start.isoformat()} .. {end.isoformat()}")
    last = end - timedelta(microseconds=1)
    span = count_months((start.year, start.month), (last.year, last.month))
    return ReportingWindow(start=start, end=end, month_span=span, mode=mode)


def resolve_period(
    mode: PeriodMode,
    month: int,
    year: int,
    explicit_range: Optional[Tuple[DateLike, DateLike]] = None,
    *,
    inception: Optional[date] = None,
    tz: tzinfo = timezone.utc,
) -> ReportingWindow:
    """Resolve a period selector into a ReportingWindow.

    Args:
        mode: Which kind of period to build.
        month: Selected month (1-12); the last month for cumulative/YTD windows.
        year: Selected year.
        explicit_range: (start, end) supplied by the caller. Used verbatim for
            YEAR_TO_DATE and CUSTOM_RANGE. Plain dates are inclusive days.
        inception: Floor for CUMULATIVE windows (defaults to PROGRAM_INCEPTION).
        tz: Timezone the calendar boundaries are expressed in.

    Raises:
        ValueError: on an invalid month, a missing custom range, or an empty window.
    """
    mode = PeriodMode(mode)

    if mode == PeriodMode.SINGLE_MONTH:
        start = month_start(year, month, tz)
        return ReportingWindow(
            start=start,
            end=next_month_start(year, month, tz),
            month_span=1,
            mode=mode,
        )

    if mode in (PeriodMode.YEAR_TO_DATE, PeriodMode.CUSTOM_RANGE) and explicit_range is not None:
        range_start, range_end = explicit_range
        return _window(
            _to_instant(range_start, tz),
            _to_instant(range_end, tz, is_end=True),
            mode,
        )

    if mode == PeriodMode.CUSTOM_RANGE:
        raise ValueError("A custom range needs explicit start and end dates")

    end = next_month_start(year, month, tz)

    if mode == PeriodMode.YEAR_TO_DATE:
        return _window(month_start(year, 1, tz), end, mode)

    floor = inception or settings.PROGRAM_INCEPTION
    return _window(month_start(floor.year, floor.month, tz), end, mode)
