"""Turn a [min_date, max_date) range into months of 7-day week rows."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Iterator

from calendar_logic import (
    ONE_DAY,
    Locale,
    between_dates,
    get_locale,
    month_label,
    month_start_offset,
    next_month,
    same_date,
    to_day,
)
from errors import InvalidRangeError

logger = logging.getLogger(__name__)

SelectablePredicate = Callable[[date], bool]


class RangeState(enum.Enum):
    NONE = "none"
    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


@dataclass(eq=False)
class Cell:
    """One displayed day.

    Compared by identity: the padding copy of a date is a different cell
    from the in-month one.
    """

    date: date
    value: int
    is_current_month: bool
    is_selectable: bool
    is_today: bool
    is_selected: bool = False
    is_highlighted: bool = False
    range_state: RangeState = RangeState.NONE


Week = list[Cell]


@dataclass
class Month:
    year: int
    month: int
    label: str
    weeks: list[Week] = field(default_factory=list)

    @property
    def month_index(self) -> int:
        """0-based month (January == 0)."""
        return self.month - 1

    def current_cells(self) -> list[Cell]:
        return [c for week in self.weeks for c in week if c.is_current_month]


class Grid:
    """Months built for one (bounds, locale, today) configuration.

    Keeps an index from date to the in-month cell so lookups do not scan.
    """

    def __init__(self, months: list[Month], min_date: date, max_date: date,
                 today: date, locale: Locale,
                 selectable: SelectablePredicate | None) -> None:
        self.months = months
        self.min_date = min_date
        self.max_date = max_date
        self.today = today
        self.locale = locale
        self.selectable = selectable
        self._by_date: dict[date, tuple[Cell, int]] = {}
        self._copies: dict[date, list[Cell]] = {}
        for pos, month in enumerate(months):
            for week in month.weeks:
                for cell in week:
                    self._copies.setdefault(cell.date, []).append(cell)
                    if cell.is_current_month:
                        self._by_date[cell.date] = (cell, pos)

    def __len__(self) -> int:
        return len(self.months)

    def __iter__(self) -> Iterator[Month]:
        return iter(self.months)

    def __getitem__(self, pos: int) -> Month:
        return self.months[pos]

    def iter_cells(self) -> Iterator[Cell]:
        """Every cell, padding included, in grid order."""
        for month in self.months:
            for week in month.weeks:
                yield from week

    def cell_for(self, day: date | datetime) -> Cell | None:
        """The in-month cell for a date, or None if no built month holds it."""
        entry = self._by_date.get(to_day(day))
        return entry[0] if entry else None

    def cells_for(self, day: date | datetime) -> list[Cell]:
        """Every cell showing the date, padding copies included."""
        return list(self._copies.get(to_day(day), ()))

    def month_position(self, day: date | datetime) -> int | None:
        """Index into months of the month holding the date."""
        entry = self._by_date.get(to_day(day))
        return entry[1] if entry else None

    def contains(self, day: date | datetime) -> bool:
        return between_dates(to_day(day), self.min_date, self.max_date)

    def is_date_selectable(self, day: date | datetime) -> bool:
        return self.selectable is None or bool(self.selectable(to_day(day)))


def _range_state(day: date, lo: date | None, hi: date | None) -> RangeState:
    if lo is None:
        return RangeState.NONE
    if day == lo:
        return RangeState.FIRST
    if day == hi:
        return RangeState.LAST
    if lo < day < hi:
        return RangeState.MIDDLE
    return RangeState.NONE


def _month_weeks(year: int, month: int, grid_min: date, grid_max: date,
                 today: date, loc: Locale,
                 selectable: SelectablePredicate | None,
                 selected: set[date], highlighted: set[date],
                 range_lo: date | None, range_hi: date | None) -> list[Week]:
    cur = date(year, month, 1) + timedelta(
        days=month_start_offset(year, month, loc.first_weekday))
    weeks: list[Week] = []
    # Stop once the cursor leaves the month, padding days of the prior
    # year included.
    while (cur.month <= month or cur.year < year) and cur.year <= year:
        logger.debug("Building week row starting at %s", cur)
        week: Week = []
        for _ in range(7):
            in_month = cur.month == month
            is_selectable = (
                in_month
                and between_dates(cur, grid_min, grid_max)
                and (selectable is None or bool(selectable(cur)))
            )
            week.append(Cell(
                date=cur,
                value=cur.day,
                is_current_month=in_month,
                is_selectable=is_selectable,
                is_today=same_date(cur, today),
                is_selected=in_month and cur in selected,
                is_highlighted=cur in highlighted,
                range_state=(_range_state(cur, range_lo, range_hi)
                             if in_month else RangeState.NONE),
            ))
            cur += ONE_DAY
        weeks.append(week)
    return weeks


def build_grid(
    min_date: date | datetime | None,
    max_date: date | datetime | None,
    today: date | datetime | None = None,
    locale: Locale | str | None = None,
    selectable: SelectablePredicate | None = None,
    selected_dates: Iterable[date | datetime] = (),
    highlighted_dates: Iterable[date | datetime] = (),
) -> Grid:
    """Build every month overlapping [min_date, max_date).

    Time of day is ignored. For instance min 2012-11-16 17:15 and max
    2013-11-16 04:30 make 2012-11-16 the first selectable day and
    2013-11-15 the last one.
    """
    if min_date is None or max_date is None:
        raise InvalidRangeError(
            f"min_date and max_date must be set. min_date: {min_date} max_date: {max_date}")
    lo, hi = to_day(min_date), to_day(max_date)
    if lo >= hi:
        raise InvalidRangeError(
            f"min_date must be before max_date. min_date: {lo} max_date: {hi}")

    loc = get_locale(locale)
    today = to_day(today) if today is not None else date.today()
    selected = sorted({to_day(d) for d in selected_dates})
    selected_set = set(selected)
    highlighted = {to_day(d) for d in highlighted_dates}
    range_lo = range_hi = None
    if len(selected) > 1:
        range_lo, range_hi = selected[0], selected[-1]

    # max is exclusive: step back so a max on the 1st adds no extra month.
    last = hi - ONE_DAY
    max_year, max_month = last.year, last.month

    months: list[Month] = []
    y, m = lo.year, lo.month
    while (m <= max_month or y < max_year) and y <= max_year:
        month = Month(year=y, month=m, label=month_label(y, m))
        month.weeks = _month_weeks(
            y, m, lo, hi, today, loc, selectable, selected_set,
            highlighted, range_lo, range_hi,
        )
        logger.debug("Adding month %s (%d weeks)", month.label, len(month.weeks))
        months.append(month)
        y, m = next_month(y, m)

    return Grid(months, lo, hi, today, loc, selectable)
