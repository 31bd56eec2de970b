from datetime import date, datetime

import pytest

from calendar_logic import (
    MONDAY,
    SATURDAY,
    SUNDAY,
    add_months,
    between_dates,
    get_locale,
    month_label,
    month_start_offset,
    next_month,
    presentation_order,
    prev_month,
    same_date,
    to_day,
    weekday_headers,
)


def test_to_day_drops_time():
    assert to_day(datetime(2024, 5, 6, 23, 59)) == date(2024, 5, 6)
    assert to_day(date(2024, 5, 6)) == date(2024, 5, 6)


def test_same_date_ignores_time_of_day():
    assert same_date(datetime(2024, 5, 6, 0, 1), datetime(2024, 5, 6, 22, 0))
    assert not same_date(date(2024, 5, 6), date(2024, 5, 7))


def test_between_dates_is_half_open():
    lo, hi = date(2024, 1, 1), date(2024, 1, 31)
    assert between_dates(lo, lo, hi)
    assert between_dates(date(2024, 1, 30), lo, hi)
    assert not between_dates(hi, lo, hi)


@pytest.mark.parametrize("first_weekday, expected", [
    (SUNDAY, -1),    # 2024-01-01 is a Monday
    (MONDAY, 0),
    (SATURDAY, -2),
])
def test_month_start_offset_never_positive(first_weekday, expected):
    assert month_start_offset(2024, 1, first_weekday) == expected


def test_locale_lookup():
    assert get_locale(None).code == "en_US"
    assert get_locale("de_DE").first_weekday == MONDAY
    assert get_locale("he_IL").rtl
    loc = get_locale("fa_IR")
    assert get_locale(loc) is loc
    with pytest.raises(KeyError):
        get_locale("xx_XX")


def test_weekday_headers_follow_week_start():
    assert weekday_headers(get_locale("en_US"))[0] == "Sun"
    assert weekday_headers(get_locale("de_DE"))[0] == "Mon"
    # RTL: Sunday-first, displayed right to left
    assert weekday_headers(get_locale("he_IL"))[-1] == "Sun"


def test_presentation_order_only_reverses_rtl():
    week = list(range(7))
    assert presentation_order(week, get_locale("en_US")) == week
    assert presentation_order(week, get_locale("ar_SA")) == week[::-1]
    assert week == list(range(7))


def test_month_stepping():
    assert prev_month(2024, 1) == (2023, 12)
    assert next_month(2024, 12) == (2025, 1)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 15), -3) == date(2023, 12, 15)


def test_month_label():
    assert month_label(2024, 2) == "February 2024"
