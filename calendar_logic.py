"""Pure calendar calculations, no UI dependencies."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class Locale:
    """Week layout of a locale: which day starts the week and text direction."""

    code: str
    first_weekday: int
    rtl: bool = False


# --- Locale registry: code -> Locale ----------------------------------------

LOCALES: dict[str, Locale] = {
    loc.code: loc
    for loc in (
        Locale("en_US", SUNDAY),
        Locale("en_GB", MONDAY),
        Locale("de_DE", MONDAY),
        Locale("de_CH", MONDAY),
        Locale("fr_FR", MONDAY),
        Locale("es_ES", MONDAY),
        Locale("pt_BR", SUNDAY),
        Locale("ja_JP", SUNDAY),
        Locale("zh_CN", MONDAY),
        Locale("he_IL", SUNDAY, rtl=True),
        Locale("ar_SA", SUNDAY, rtl=True),
        Locale("ar_EG", SATURDAY, rtl=True),
        Locale("fa_IR", SATURDAY, rtl=True),
    )
}

DEFAULT_LOCALE = LOCALES["en_US"]


def get_locale(code: str | Locale | None) -> Locale:
    """Resolve a locale code (or pass a Locale through). None gives the default."""
    if code is None:
        return DEFAULT_LOCALE
    if isinstance(code, Locale):
        return code
    return LOCALES[code]


def to_day(value: date | datetime) -> date:
    """Drop the time-of-day component."""
    if isinstance(value, datetime):
        return value.date()
    return value


def same_date(a: date | datetime, b: date | datetime) -> bool:
    """Compare by calendar day/month/year, never by instant."""
    a, b = to_day(a), to_day(b)
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def between_dates(d: date, lo: date, hi: date) -> bool:
    """Half-open check: lo <= d < hi."""
    return lo <= d < hi


def month_start_offset(year: int, month: int, first_weekday: int) -> int:
    """Days to step back from the 1st to reach the start of its grid row.

    Always <= 0: a grid never starts after the 1st.
    """
    offset = first_weekday - date(year, month, 1).weekday()
    if offset > 0:
        offset -= 7
    return offset


def weekday_headers(loc: Locale) -> list[str]:
    """Abbreviated day names in display order for the locale."""
    names = [calendar.day_abbr[(loc.first_weekday + i) % 7] for i in range(7)]
    return presentation_order(names, loc)


def presentation_order(week: list, loc: Locale) -> list:
    """Left-to-right display order; reversed for right-to-left locales."""
    if loc.rtl:
        return list(reversed(week))
    return list(week)


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} {year}"


def day_of_year(d: date) -> int:
    """Return the 1-based day-of-year for the given date."""
    return d.timetuple().tm_yday


def prev_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month earlier."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) for one month later."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def add_months(d: date, count: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    y, m = d.year, d.month
    step = next_month if count >= 0 else prev_month
    for _ in range(abs(count)):
        y, m = step(y, m)
    return date(y, m, min(d.day, calendar.monthrange(y, m)[1]))
