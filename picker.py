"""CalendarPicker: one grid plus the selection engine that works on it.

Must be initialized with init(), which returns a FluentInitializer for
the remaining configuration::

    picker = CalendarPicker()
    picker.init(date(2024, 1, 1), date(2025, 1, 1), "de_DE") \\
        .in_mode(SelectionMode.RANGE) \\
        .with_selected_dates([date(2024, 3, 4), date(2024, 3, 8)])
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Iterable

from calendar_logic import Locale, get_locale, to_day
from errors import InvalidDateError
from grid_builder import Cell, Grid, SelectablePredicate, build_grid
from selection import Anchor, DateCallback, SelectionEngine, SelectionMode

logger = logging.getLogger(__name__)


class CalendarPicker:
    """Date picker state for one host view."""

    def __init__(self) -> None:
        self._grid: Grid | None = None
        self._engine: SelectionEngine | None = None
        self.locale: Locale = get_locale(None)
        self.display_only = False
        self.ignore_validating_dates = False
        self.selectable_filter: SelectablePredicate | None = None
        self.cell_click_interceptor: Callable[[date], bool] | None = None
        self.on_date_selected: DateCallback | None = None
        self.on_date_unselected: DateCallback | None = None
        self.on_invalid_date_selected: DateCallback | None = None

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------
    def init(self, min_date: date | datetime, max_date: date | datetime,
             locale: Locale | str | None = None,
             today: date | datetime | None = None) -> "FluentInitializer":
        """Rebuild for [min_date, max_date). Resets mode to SINGLE and drops
        every selection, highlight and anchor.
        """
        loc = get_locale(locale)
        grid = build_grid(min_date, max_date, today=today, locale=loc,
                          selectable=self.selectable_filter)
        self.locale = loc
        self.display_only = False
        self.ignore_validating_dates = False
        if self._engine is None:
            self._engine = SelectionEngine(
                grid,
                on_date_selected=self._fire_selected,
                on_date_unselected=self._fire_unselected,
                on_invalid_date_selected=self._fire_invalid,
            )
        else:
            self._engine.adopt(grid)
            self._engine.mode = SelectionMode.SINGLE
            self._engine.set_anchor(None)
        self._grid = grid
        logger.info("Picker initialised: %s .. %s (%d months, %s)",
                    grid.min_date, grid.max_date, len(grid), loc.code)
        return FluentInitializer(self)

    def set_locale(self, locale: Locale | str) -> None:
        """Rebuild the same range for another locale, keeping selections."""
        grid, engine = self._require()
        loc = get_locale(locale)
        rebuilt = build_grid(
            grid.min_date, grid.max_date, today=grid.today, locale=loc,
            selectable=grid.selectable, selected_dates=engine.picks,
            highlighted_dates=engine.highlighted_dates,
        )
        engine.adopt(rebuilt, keep=True)
        self._grid = rebuilt
        self.locale = loc

    def _require(self) -> tuple[Grid, SelectionEngine]:
        if self._grid is None or self._engine is None:
            raise RuntimeError(
                "Must have at least one month to display. Did you forget to call init()?")
        return self._grid, self._engine

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def grid(self) -> Grid:
        return self._require()[0]

    @property
    def engine(self) -> SelectionEngine:
        return self._require()[1]

    @property
    def mode(self) -> SelectionMode:
        return self.engine.mode

    @property
    def selected_date(self) -> date | None:
        return self.engine.selected_date

    @property
    def selected_dates(self) -> list[date]:
        return self.engine.selected_dates

    def scroll_target(self) -> int:
        """Month to bring into view: first one holding a selection, else today's."""
        grid, engine = self._require()
        for pos, month in enumerate(grid):
            if any(month.year == d.year and month.month == d.month
                   for d in engine.picks):
                return pos
        today_pos = grid.month_position(grid.today)
        return today_pos if today_pos is not None else 0

    def month_position(self, day: date | datetime) -> int | None:
        return self.grid.month_position(day)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def set_mode(self, mode: SelectionMode) -> None:
        self.engine.set_mode(mode)

    def handle_click(self, cell: Cell) -> bool:
        """A user tapped a cell. Listeners are notified."""
        if self.display_only:
            return False
        if self.cell_click_interceptor is not None and self.cell_click_interceptor(cell.date):
            logger.debug("Click on %s intercepted", cell.date)
            return False
        return self.engine.select(cell.date, cell)

    def select_date(self, day: date | datetime | None) -> bool:
        """Programmatic selection. Listeners are not notified.

        Raises InvalidDateError for None or a date outside the bounds.
        """
        self._validate(day)
        return self.engine.select(day, notify=False)

    def highlight_dates(self, dates: Iterable[date | datetime | None]) -> None:
        dates = list(dates)
        for day in dates:
            self._validate(day)
        self.engine.highlight(dates)

    def highlight_date(self, day: date | datetime | None) -> None:
        self.highlight_dates([day])

    def clear_highlighted_dates(self) -> None:
        self.engine.clear_highlights()

    def clear_selection(self) -> None:
        self.engine.clear_selection(notify=True)

    def _validate(self, day: date | datetime | None) -> None:
        if day is None:
            raise InvalidDateError("Selected date must be non-null.")
        if self.ignore_validating_dates:
            return
        grid = self.grid
        if not grid.contains(day):
            raise InvalidDateError(
                f"Date must be between min_date and max_date. "
                f"min_date: {grid.min_date} max_date: {grid.max_date} date: {to_day(day)}")

    # ------------------------------------------------------------------
    # Listener forwarding
    # ------------------------------------------------------------------
    def _fire_selected(self, day: date) -> None:
        if self.on_date_selected is not None:
            self.on_date_selected(day)

    def _fire_unselected(self, day: date) -> None:
        if self.on_date_unselected is not None:
            self.on_date_unselected(day)

    def _fire_invalid(self, day: date) -> None:
        if self.ignore_validating_dates:
            return
        if self.on_invalid_date_selected is not None:
            self.on_invalid_date_selected(day)


class FluentInitializer:
    """Chained configuration returned by CalendarPicker.init()."""

    def __init__(self, picker: CalendarPicker) -> None:
        self._picker = picker

    def in_mode(self, mode: SelectionMode) -> "FluentInitializer":
        self._picker.set_mode(mode)
        return self

    def with_selected_date(self, day: date | datetime) -> "FluentInitializer":
        return self.with_selected_dates([day])

    def with_selected_dates(self, dates: Iterable[date | datetime]) -> "FluentInitializer":
        """Pre-select dates. SINGLE takes one date, RANGE at most two."""
        dates = list(dates)
        mode = self._picker.mode
        if mode is SelectionMode.SINGLE and len(dates) > 1:
            raise ValueError("SINGLE mode can't be used with multiple selected dates")
        if mode is SelectionMode.RANGE and len(dates) > 2:
            raise ValueError(
                f"RANGE mode only allows two selected dates. You tried to pass {len(dates)}")
        for day in dates:
            self._picker.select_date(day)
        return self

    def with_highlighted_dates(self, dates: Iterable[date | datetime]) -> "FluentInitializer":
        self._picker.highlight_dates(dates)
        return self

    def with_highlighted_date(self, day: date | datetime) -> "FluentInitializer":
        return self.with_highlighted_dates([day])

    def display_only(self) -> "FluentInitializer":
        self._picker.display_only = True
        return self

    def with_anchor(self, anchor: Anchor | None) -> "FluentInitializer":
        self._picker.engine.set_anchor(anchor)
        return self

    def ignore_validating_dates(self, ignore: bool = True) -> "FluentInitializer":
        self._picker.ignore_validating_dates = ignore
        return self

    def with_selectable_filter(self, predicate: SelectablePredicate | None) -> "FluentInitializer":
        """Rebuild the grid with a selectability predicate.

        Prefer setting CalendarPicker.selectable_filter before init(); this
        rebuild drops any selection made so far.
        """
        picker = self._picker
        grid, engine = picker._require()
        picker.selectable_filter = predicate
        rebuilt = build_grid(grid.min_date, grid.max_date, today=grid.today,
                             locale=grid.locale, selectable=predicate)
        engine.adopt(rebuilt)
        picker._grid = rebuilt
        return self
