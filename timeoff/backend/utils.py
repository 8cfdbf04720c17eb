"""
Utility functions for date-range calculations.
Pure functions with no database dependencies.

All calendar dates cross module boundaries as YYYY-MM-DD strings.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple, Union

DATE_FORMAT = "%Y-%m-%d"

DateLike = Union[date, str]


def parse_date(value: str) -> date:
    """Parse a YYYY-MM-DD string, rejecting anything that is not in that exact form"""
    if not isinstance(value, str):
        raise ValueError(f"Date must be a YYYY-MM-DD string: {value!r}")
    parsed = datetime.strptime(value, DATE_FORMAT).date()
    # strptime happily accepts "2024-7-1"; holiday matching is by exact string
    if parsed.strftime(DATE_FORMAT) != value:
        raise ValueError(f"Date must be in YYYY-MM-DD format: {value!r}")
    return parsed


def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return parse_date(value)


def is_weekend(day: date) -> bool:
    # Saturday=5, Sunday=6
    return day.weekday() >= 5


def calculate_business_days(start_date: Optional[str], end_date: Optional[str], holidays: Iterable[str] = ()) -> int:
    """Calculate business days between two dates, excluding weekends and holidays"""
    if not start_date or not end_date:
        return 0

    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        return 0

    holiday_set = set(holidays)
    total_days = 0
    current = start

    while current <= end:
        if not is_weekend(current) and format_date(current) not in holiday_set:
            total_days += 1
        current += timedelta(days=1)

    return total_days


def holidays_in_range(start_date: str, end_date: str, holidays: Iterable[str]) -> List[str]:
    """Holiday dates that fall inside the inclusive interval, sorted"""
    start = parse_date(start_date)
    end = parse_date(end_date)
    return sorted({h for h in holidays if start <= parse_date(h) <= end})


def is_date_in_range(day: DateLike, start_date: Optional[str], end_date: Optional[str]) -> bool:
    """
    Check whether a day is highlighted by the current selection.

    A missing start means nothing is selected yet. With only a start, just
    that day matches. With both, the earlier of the two bounds is used as the
    range start regardless of argument order.
    """
    if not start_date:
        return False

    candidate = _as_date(day)
    start = parse_date(start_date)
    if not end_date:
        return candidate == start

    end = parse_date(end_date)
    range_start, range_end = (start, end) if start <= end else (end, start)
    return range_start <= candidate <= range_end


def advance_selection(
    start_date: Optional[str],
    end_date: Optional[str],
    clicked: str
) -> Tuple[str, Optional[str]]:
    """Apply one click of the two-click range picker and return the new (start, end)"""
    parse_date(clicked)
    if not start_date or end_date:
        return clicked, None
    if parse_date(clicked) < parse_date(start_date):
        return clicked, start_date
    return start_date, clicked


def get_month_days(reference: date) -> List[date]:
    """
    All days shown on a Sunday-first calendar grid for the month containing
    reference, including the leading and trailing days of adjacent months.
    """
    month_start = reference.replace(day=1)
    month_end = shift_month(reference, 1) - timedelta(days=1)

    grid_start = month_start - timedelta(days=(month_start.weekday() + 1) % 7)
    grid_end = month_end + timedelta(days=(5 - month_end.weekday()) % 7)

    return [grid_start + timedelta(days=i) for i in range((grid_end - grid_start).days + 1)]


def shift_month(reference: date, months: int) -> date:
    """First day of the month that is `months` away from reference"""
    index = reference.year * 12 + (reference.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def format_date_range(start_date: str, end_date: str) -> str:
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start_date == end_date:
        return f"{start:%b} {start.day}, {start.year}"
    return f"{start:%b} {start.day} - {end:%b} {end.day}, {end.year}"


def get_default_holidays(year: int) -> List[Tuple[str, str]]:
    """Holidays seeded on first start, as (date, name) pairs"""
    return [
        (format_date(date(year, 12, 25)), "Christmas Day"),
        (format_date(date(year, 1, 1)), "New Year's Day"),
    ]
