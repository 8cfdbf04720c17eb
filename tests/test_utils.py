import pytest
from datetime import date, timedelta

from utils import (
    advance_selection,
    calculate_business_days,
    format_date_range,
    get_default_holidays,
    get_month_days,
    holidays_in_range,
    is_date_in_range,
    parse_date,
    shift_month,
)


def test_full_work_week():
    """Monday to Friday with no holidays is five business days."""
    assert calculate_business_days("2024-07-01", "2024-07-05", []) == 5


def test_single_day_that_is_a_holiday():
    assert calculate_business_days("2024-07-04", "2024-07-04", ["2024-07-04"]) == 0


@pytest.mark.parametrize("day", ["2024-07-01", "2024-07-03", "2024-07-05"])
def test_single_weekday_counts_as_one(day):
    assert calculate_business_days(day, day, set()) == 1


@pytest.mark.parametrize("start,end", [
    ("2024-07-06", "2024-07-06"),
    ("2024-07-07", "2024-07-07"),
    ("2024-07-06", "2024-07-07"),
])
def test_weekend_only_range_is_zero(start, end):
    assert calculate_business_days(start, end, []) == 0


def test_range_across_weekend_and_holiday():
    # Thu 2024-07-04 .. Tue 2024-07-09, with the 4th off: Fri, Mon, Tue
    assert calculate_business_days("2024-07-04", "2024-07-09", ["2024-07-04"]) == 3


def test_start_after_end_is_zero_not_swapped():
    assert calculate_business_days("2024-07-05", "2024-07-01", []) == 0


@pytest.mark.parametrize("start,end", [(None, "2024-07-01"), ("2024-07-01", ""), ("", None)])
def test_missing_dates_are_zero(start, end):
    assert calculate_business_days(start, end, []) == 0


def test_holidays_outside_range_do_not_matter():
    base = calculate_business_days("2024-07-01", "2024-07-31", [])
    with_outside = calculate_business_days("2024-07-01", "2024-07-31", ["2024-06-28", "2024-08-01"])
    assert base == with_outside == 23


def test_holidays_never_increase_the_count():
    holidays = ["2024-07-04", "2024-07-06", "2024-07-04", "2024-12-25"]
    assert calculate_business_days("2024-07-01", "2024-07-31", holidays) <= calculate_business_days("2024-07-01", "2024-07-31", [])
    # duplicate holidays exclude once
    assert calculate_business_days("2024-07-01", "2024-07-31", holidays) == 22


def test_long_range_is_not_truncated():
    # 2024 has 262 weekdays
    assert calculate_business_days("2024-01-01", "2024-12-31", []) == 262


@pytest.mark.parametrize("bad", ["2024-7-1", "2024/07/01", "July 1", "2024-02-30"])
def test_malformed_dates_are_rejected(bad):
    with pytest.raises(ValueError):
        calculate_business_days(bad, "2024-12-31", [])


def test_parse_date_round_trips():
    assert parse_date("2024-02-29") == date(2024, 2, 29)


@pytest.mark.parametrize("value", [20240229, None, ["2024-02-29"]])
def test_parse_date_rejects_non_strings(value):
    with pytest.raises(ValueError, match="YYYY-MM-DD string"):
        parse_date(value)


def test_date_in_range_without_start():
    assert not is_date_in_range(date(2024, 7, 1), None, "2024-07-05")


def test_date_in_range_with_start_only():
    assert is_date_in_range(date(2024, 7, 1), "2024-07-01", None)
    assert not is_date_in_range(date(2024, 7, 2), "2024-07-01", None)


def test_date_in_range_is_inclusive_and_symmetric():
    start, end = "2024-07-01", "2024-07-05"
    for offset in range(-2, 8):
        day = date(2024, 7, 1) + timedelta(days=offset)
        assert is_date_in_range(day, start, end) == is_date_in_range(day, end, start)
        assert is_date_in_range(day, start, end) == (0 <= offset <= 4)


def test_date_in_range_accepts_strings():
    assert is_date_in_range("2024-07-03", "2024-07-05", "2024-07-01")


def test_selection_first_click_sets_start():
    assert advance_selection(None, None, "2024-07-10") == ("2024-07-10", None)


def test_selection_second_click_sets_end():
    assert advance_selection("2024-07-10", None, "2024-07-12") == ("2024-07-10", "2024-07-12")


def test_selection_earlier_second_click_swaps():
    assert advance_selection("2024-07-10", None, "2024-07-08") == ("2024-07-08", "2024-07-10")


def test_selection_third_click_restarts():
    assert advance_selection("2024-07-08", "2024-07-10", "2024-07-20") == ("2024-07-20", None)


@pytest.mark.parametrize("reference", [
    date(2024, 2, 15),   # leap February
    date(2024, 6, 1),    # starts on a Saturday
    date(2024, 9, 30),   # starts on a Sunday
    date(2015, 2, 1),    # exactly four weeks
    date(2024, 12, 31),
])
def test_month_grid_shape(reference):
    days = get_month_days(reference)
    assert len(days) % 7 == 0
    # Sunday first, Saturday last
    assert days[0].weekday() == 6
    assert days[-1].weekday() == 5
    in_month = [d for d in days if d.month == reference.month]
    assert in_month[0].day == 1
    assert len(in_month) == (shift_month(reference, 1) - timedelta(days=1)).day
    assert days == get_month_days(reference)


def test_month_grid_exact_bounds():
    days = get_month_days(date(2024, 7, 17))
    assert days[0] == date(2024, 6, 30)
    assert days[-1] == date(2024, 8, 3)
    assert len(days) == 35


def test_shift_month_across_years():
    assert shift_month(date(2024, 12, 31), 1) == date(2025, 1, 1)
    assert shift_month(date(2024, 1, 31), -1) == date(2023, 12, 1)


def test_format_single_day():
    assert format_date_range("2024-07-04", "2024-07-04") == "Jul 4, 2024"


def test_format_range():
    assert format_date_range("2024-12-30", "2025-01-03") == "Dec 30 - Jan 3, 2025"


def test_holidays_in_range():
    holidays = ["2024-07-04", "2024-12-25", "2024-07-04"]
    assert holidays_in_range("2024-07-01", "2024-07-31", holidays) == ["2024-07-04"]


def test_default_holidays():
    assert get_default_holidays(2030) == [
        ("2030-12-25", "Christmas Day"),
        ("2030-01-01", "New Year's Day"),
    ]
