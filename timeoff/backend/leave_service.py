"""
Business logic layer for leave tracking.
This service layer holds the rules applied before anything reaches the ledger
(date validation, the quota gate) and the read models the API layers render.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

import config
from ledger import LeaveLedger
from models import (
    CalendarDay,
    CalendarMonth,
    LeaveEntry,
    LeavePreview,
    LeaveType,
    PublicHoliday,
    QuotaUsage,
)
from utils import (
    advance_selection,
    calculate_business_days,
    format_date,
    format_date_range,
    get_month_days,
    holidays_in_range,
    is_date_in_range,
    is_weekend,
    parse_date,
    shift_month,
)

POLICY_BLOCK = "block"
POLICY_WARN = "warn"
QUOTA_POLICIES = (POLICY_BLOCK, POLICY_WARN)


def parse_leave_type(value) -> LeaveType:
    if isinstance(value, LeaveType):
        return value
    try:
        return LeaveType(str(value).upper())
    except ValueError:
        raise ValueError(f"Unknown leave type: {value!r}. Expected one of: VACATION, SICK")


# ==================== LEAVE OPERATIONS ====================

def list_leave_entries(ledger: LeaveLedger, order: str = "recent") -> List[LeaveEntry]:
    """
    Get leave entries in display order.

    Args:
        ledger: The ledger to read
        order: 'recent' (newest first) or 'calendar' (by start date)

    Returns:
        New list of entries; the ledger itself is not reordered
    """
    if order == "recent":
        return ledger.entries_by_recency()
    if order == "calendar":
        return ledger.entries_by_calendar()
    raise ValueError(f"Unknown order: {order!r}. Expected 'recent' or 'calendar'")


def preview_leave(
    ledger: LeaveLedger,
    leave_type: LeaveType,
    start_date: Optional[str],
    end_date: Optional[str]
) -> LeavePreview:
    """
    Work out what a leave request would cost without recording it.

    Args:
        ledger: The ledger supplying holidays and current usage
        leave_type: VACATION or SICK
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)

    Returns:
        LeavePreview with business days, remaining quota and the over-quota flag

    Raises:
        ValueError: If a date is missing or malformed, or start is after end
    """
    leave_type = parse_leave_type(leave_type)
    if not start_date or not end_date:
        raise ValueError("Start date and end date are required")
    if parse_date(start_date) > parse_date(end_date):
        raise ValueError("Start date must be before end date")

    holidays = ledger.holiday_dates()
    business_days = calculate_business_days(start_date, end_date, holidays)
    remaining = ledger.remaining_quota()[leave_type]

    return LeavePreview(
        type=leave_type,
        start_date=start_date,
        end_date=end_date,
        business_days=business_days,
        remaining=remaining,
        over_quota=business_days > remaining,
        holidays_in_range=holidays_in_range(start_date, end_date, holidays),
        date_range=format_date_range(start_date, end_date),
    )


def create_leave_entry(
    ledger: LeaveLedger,
    leave_type: LeaveType,
    start_date: Optional[str],
    end_date: Optional[str],
    description: str = "",
    policy: str = None
) -> Tuple[LeaveEntry, LeavePreview]:
    """
    Create a new leave entry with validation.

    Args:
        ledger: The ledger to record into
        leave_type: VACATION or SICK
        start_date: Start date (YYYY-MM-DD)
        end_date: End date (YYYY-MM-DD)
        description: Optional free text
        policy: Quota policy, 'block' or 'warn' (defaults to QUOTA_POLICY)

    Returns:
        The created entry and the preview it was checked against

    Raises:
        ValueError: If validation fails
    """
    if policy is None:
        policy = config.QUOTA_POLICY
    if policy not in QUOTA_POLICIES:
        raise ValueError(f"Unknown quota policy: {policy!r}")

    preview = preview_leave(ledger, leave_type, start_date, end_date)

    if preview.business_days == 0:
        raise ValueError("No business days in selected date range")

    if preview.over_quota and policy == POLICY_BLOCK:
        raise ValueError(
            f"Insufficient {preview.type.value.lower()} days. "
            f"Available: {preview.remaining}, Requested: {preview.business_days}"
        )

    entry = ledger.add_entry(preview.type, start_date, end_date, description)
    return entry, preview


def delete_leave_entry(ledger: LeaveLedger, entry_id: str) -> bool:
    """Delete a leave entry. Unknown ids are a no-op; returns whether anything was removed."""
    return ledger.delete_entry(entry_id)


def get_quota_summary(ledger: LeaveLedger) -> Dict[str, QuotaUsage]:
    return {leave_type.value: usage for leave_type, usage in ledger.quota_summary().items()}


# ==================== HOLIDAY OPERATIONS ====================

def list_public_holidays(ledger: LeaveLedger) -> List[PublicHoliday]:
    return ledger.holidays_by_date()


def add_public_holiday(ledger: LeaveLedger, holiday_date: Optional[str], name: Optional[str]) -> PublicHoliday:
    """
    Add a public holiday. Existing entries keep the day counts they were created with.

    Raises:
        ValueError: If the date is malformed or the name is empty
    """
    if not isinstance(name, str) or not holiday_date or not name.strip():
        raise ValueError("Holiday date and name are required")
    parse_date(holiday_date)
    return ledger.add_holiday(holiday_date, name.strip())


def remove_public_holiday(ledger: LeaveLedger, holiday_id: str) -> bool:
    return ledger.remove_holiday(holiday_id)


# ==================== CALENDAR ====================

def select_calendar_date(
    start_date: Optional[str],
    end_date: Optional[str],
    clicked: str
) -> Tuple[str, Optional[str]]:
    """Advance the two-click range selection by one click"""
    return advance_selection(start_date, end_date, clicked)


def build_calendar_month(
    ledger: LeaveLedger,
    reference: date,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    today: date = None
) -> CalendarMonth:
    """
    Build the month grid for the month containing reference, flagging
    weekends, holidays, the current selection and today.
    """
    if today is None:
        today = date.today()

    holiday_names = {}
    for holiday in ledger.holidays_by_date():
        holiday_names.setdefault(holiday.date, holiday.name)

    days = []
    for day in get_month_days(reference):
        day_str = format_date(day)
        days.append(CalendarDay(
            date=day_str,
            day=day.day,
            in_month=(day.year, day.month) == (reference.year, reference.month),
            is_weekend=is_weekend(day),
            is_holiday=day_str in holiday_names,
            holiday_name=holiday_names.get(day_str),
            is_selected=day_str in (start_date, end_date),
            in_range=is_date_in_range(day, start_date, end_date),
            is_today=day == today,
        ))

    return CalendarMonth(
        month=f"{reference:%Y-%m}",
        title=f"{reference:%B} {reference.year}",
        previous_month=f"{shift_month(reference, -1):%Y-%m}",
        next_month=f"{shift_month(reference, 1):%Y-%m}",
        selection_start=start_date,
        selection_end=end_date,
        days=days,
    )
