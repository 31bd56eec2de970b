"""Selection state machine over the cells of one Grid.

The engine mutates cell flags in place; hosts re-render by reading the
same cells the grid builder produced.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable

from calendar_logic import to_day
from errors import (
    InvalidDateError,
    OutOfBoundsRejection,
    SelectionRejection,
    UnselectableRejection,
)
from grid_builder import Cell, Grid, RangeState

logger = logging.getLogger(__name__)

DateCallback = Callable[[date], None]


class SelectionMode(enum.Enum):
    #: One date. Selecting another unselects the old one.
    SINGLE = "single"
    #: Any number of dates. Selecting a selected date unselects it.
    MULTIPLE = "multiple"
    #: Two endpoints plus every selectable day between them. A new pick
    #: starts over when a range is complete or when it precedes the start.
    RANGE = "range"
    #: Each endpoint picked on its own view; the other one comes from an anchor.
    RANGE_ON_TWO_SCREENS = "range_on_two_screens"


RANGE_MODES = (SelectionMode.RANGE, SelectionMode.RANGE_ON_TWO_SCREENS)


class AnchorKind(enum.Enum):
    LOWER = "lower"
    HIGHER = "higher"


@dataclass(frozen=True)
class Anchor:
    """Endpoint fixed on another view of a two-screen range."""

    kind: AnchorKind
    date: date

    @classmethod
    def lower(cls, day: date | datetime) -> "Anchor":
        return cls(AnchorKind.LOWER, to_day(day))

    @classmethod
    def higher(cls, day: date | datetime) -> "Anchor":
        return cls(AnchorKind.HIGHER, to_day(day))

    @property
    def position(self) -> int:
        """Slot among the two endpoints."""
        if self.kind is AnchorKind.LOWER:
            return 0
        if self.kind is AnchorKind.HIGHER:
            return 1
        raise ValueError(f"Unknown anchor kind {self.kind!r}")


class SelectionEngine:
    """Applies the selection policy of the current mode to one Grid.

    Callbacks left as None mean "no notification". They fire synchronously
    from select(): one unselect per dropped pick, then one select (or
    one unselect for a MULTIPLE toggle-off, or one invalid-date call).
    """

    def __init__(
        self,
        grid: Grid,
        mode: SelectionMode = SelectionMode.SINGLE,
        on_date_selected: DateCallback | None = None,
        on_date_unselected: DateCallback | None = None,
        on_invalid_date_selected: DateCallback | None = None,
        anchor: Anchor | None = None,
    ) -> None:
        self.grid = grid
        self.mode = mode
        self.anchor = anchor
        self.on_date_selected = on_date_selected
        self.on_date_unselected = on_date_unselected
        self.on_invalid_date_selected = on_invalid_date_selected

        self.selected_cells: list[Cell] = []
        self.highlighted_cells: list[Cell] = []
        self.last_rejection: SelectionRejection | None = None
        # Picked dates in pick order; range fill cells are not picks.
        self._picks: list[date] = []

        self._policies: dict[SelectionMode, Callable[[date, Cell, bool], bool]] = {
            SelectionMode.SINGLE: self._select_single,
            SelectionMode.MULTIPLE: self._select_multiple,
            SelectionMode.RANGE: self._select_range,
            SelectionMode.RANGE_ON_TWO_SCREENS: self._select_two_screens,
        }
        self._seed()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def picks(self) -> list[date]:
        return list(self._picks)

    @property
    def selected_date(self) -> date | None:
        return self._picks[0] if self._picks else None

    @property
    def selected_dates(self) -> list[date]:
        """Every selected day (range fill included), sorted."""
        return sorted(c.date for c in self.selected_cells)

    @property
    def highlighted_dates(self) -> list[date]:
        return list(dict.fromkeys(c.date for c in self.highlighted_cells))

    # ------------------------------------------------------------------
    # Pre-conditions
    # ------------------------------------------------------------------
    def check(self, day: date) -> SelectionRejection | None:
        """Why the date cannot be picked, or None if it can."""
        grid = self.grid
        if not grid.contains(day):
            return OutOfBoundsRejection(
                day, f"{day} is outside {grid.min_date} .. {grid.max_date} (exclusive)")
        if not grid.is_date_selectable(day):
            return UnselectableRejection(day, f"{day} is not selectable")
        return None

    # ------------------------------------------------------------------
    # Picks
    # ------------------------------------------------------------------
    def select(self, day: date | datetime | None, cell: Cell | None = None,
               notify: bool = True) -> bool:
        """Apply one pick. Returns True if the date ended up selected."""
        if day is None:
            raise InvalidDateError("Selected date must be non-null.")
        day = to_day(day)
        if cell is not None and cell.date != day:
            raise InvalidDateError(f"Cell for {cell.date} cannot select {day}")

        rejection = self.check(day)
        if rejection is not None:
            self.last_rejection = rejection
            logger.debug("Rejected pick: %s", rejection)
            if notify and self.on_invalid_date_selected is not None:
                self.on_invalid_date_selected(day)
            return False
        self.last_rejection = None

        # Padding copies never take a selection; always use the in-month cell.
        target = self.grid.cell_for(day)
        if target is None or not target.is_selectable:
            logger.debug("No selectable cell for %s in this grid", day)
            return False
        if self.mode is SelectionMode.RANGE_ON_TWO_SCREENS and not self._anchor_in_grid():
            logger.warning("Anchor %s is outside the grid; pick %s ignored",
                           self.anchor, day)
            return False

        for previous in self.selected_cells:
            previous.range_state = RangeState.NONE

        try:
            policy = self._policies[self.mode]
        except KeyError:
            raise ValueError(f"Unknown selection mode {self.mode!r}") from None
        selected = policy(day, target, notify)
        logger.debug("%s pick %s -> %s", self.mode.name, day,
                     "selected" if selected else "unselected")

        if notify:
            callback = self.on_date_selected if selected else self.on_date_unselected
            if callback is not None:
                callback(day)
        return selected

    def _select_single(self, day: date, cell: Cell, notify: bool) -> bool:
        self._clear(notify)
        self._add(day, cell)
        return True

    def _select_multiple(self, day: date, cell: Cell, notify: bool) -> bool:
        for existing in self.selected_cells:
            if existing.date == day:
                existing.is_selected = False
                self.selected_cells.remove(existing)
                self._picks.remove(day)
                return False
        self._add(day, cell)
        return True

    def _select_range(self, day: date, cell: Cell, notify: bool) -> bool:
        if len(self._picks) > 1:
            # Range already complete: start a new one.
            self._clear(notify)
        elif len(self._picks) == 1 and day < self._picks[0]:
            # Moving the start back in time.
            self._clear(notify)
        self._add(day, cell)
        if len(self.selected_cells) > 1:
            self._fill_range()
        elif len(self._picks) > 1:
            # Start picked again: a one-day range ending on the same cell.
            cell.range_state = RangeState.LAST
        return True

    def _select_two_screens(self, day: date, cell: Cell, notify: bool) -> bool:
        self._clear(notify)
        self._add(day, cell)
        self._apply_anchor()
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _add(self, day: date, cell: Cell) -> None:
        if not self.selected_cells or self.selected_cells[0] is not cell:
            self.selected_cells.append(cell)
            cell.is_selected = True
        self._picks.append(day)

    def _anchor_in_grid(self) -> bool:
        return self.anchor is None or self.grid.cell_for(self.anchor.date) is not None

    def _apply_anchor(self) -> None:
        if self.anchor is None or not self.selected_cells:
            return
        anchor_cell = self.grid.cell_for(self.anchor.date)
        if anchor_cell is None or anchor_cell is self.selected_cells[0]:
            return
        self.selected_cells.insert(self.anchor.position, anchor_cell)
        anchor_cell.is_selected = True
        self._fill_range()

    def _fill_range(self) -> None:
        """Mark the two endpoints FIRST/LAST and every selectable day between."""
        start, end = sorted(self.selected_cells[:2], key=lambda c: c.date)
        self.selected_cells[:2] = [start, end]
        start.range_state = RangeState.FIRST
        end.range_state = RangeState.LAST
        for cell in self.grid.iter_cells():
            if start.date < cell.date < end.date and cell.is_selectable:
                cell.is_selected = True
                cell.range_state = RangeState.MIDDLE
                self.selected_cells.append(cell)

    def _clear(self, notify: bool) -> None:
        picked = set(self._picks)
        for cell in self.selected_cells:
            cell.is_selected = False
            cell.range_state = RangeState.NONE
            if notify and cell.date in picked and self.on_date_unselected is not None:
                self.on_date_unselected(cell.date)
        self.selected_cells.clear()
        self._picks.clear()

    def clear_selection(self, notify: bool = False) -> None:
        self._clear(notify)

    # ------------------------------------------------------------------
    # Mode / grid changes
    # ------------------------------------------------------------------
    def set_mode(self, mode: SelectionMode) -> None:
        """Switch policy. Existing selections are dropped silently."""
        if mode is self.mode:
            return
        if self.selected_cells:
            logger.debug("Mode %s -> %s drops %d selected cells",
                         self.mode.name, mode.name, len(self.selected_cells))
        self._clear(notify=False)
        self.mode = mode

    def set_anchor(self, anchor: Anchor | None) -> None:
        self.anchor = anchor

    def adopt(self, grid: Grid, keep: bool = False) -> None:
        """Switch to a rebuilt grid.

        The engine takes over whatever selection and highlight flags the new
        grid carries. keep=True (same bounds, e.g. another locale) also
        carries the current picks and highlights over to the new cells.
        """
        picks = list(self._picks)
        highlighted = self.highlighted_dates
        self.grid = grid
        self.selected_cells = []
        self.highlighted_cells = []
        self._picks = []
        self.last_rejection = None
        if not keep:
            self._seed()
            return

        for day in highlighted:
            for cell in grid.cells_for(day):
                cell.is_highlighted = True
        self._seed([day for day in picks if grid.cell_for(day) is not None])

    def _seed(self, picks: list[date] | None = None) -> None:
        """Track the selection and highlight flags already set on the grid.

        Without explicit picks every selected in-month cell becomes a pick,
        in date order; range modes keep the outermost two as endpoints.
        Range state is recomputed for the current mode.
        """
        grid = self.grid
        flagged: list[date] = []
        for cell in grid.iter_cells():
            cell.range_state = RangeState.NONE
            if cell.is_highlighted:
                self.highlighted_cells.append(cell)
            if cell.is_selected:
                cell.is_selected = False
                if cell.is_current_month:
                    flagged.append(cell.date)
        if picks is None:
            picks = flagged
            if self.mode in RANGE_MODES and len(picks) > 2:
                picks = [picks[0], picks[-1]]

        for day in picks:
            self._add(day, grid.cell_for(day))
        if self.mode in RANGE_MODES and len(self.selected_cells) > 1:
            self._fill_range()
        elif self.mode is SelectionMode.RANGE and len(self._picks) > 1:
            self.selected_cells[0].range_state = RangeState.LAST
        elif self.mode is SelectionMode.RANGE_ON_TWO_SCREENS:
            self._apply_anchor()
        if self.selected_cells or self.highlighted_cells:
            logger.debug("Seeded %d selected and %d highlighted cells from grid",
                         len(self.selected_cells), len(self.highlighted_cells))

    # ------------------------------------------------------------------
    # Highlights
    # ------------------------------------------------------------------
    def highlight(self, dates: Iterable[date | datetime | None]) -> None:
        """Flag dates as highlighted. Selection and range state are untouched."""
        days = []
        for day in dates:
            if day is None:
                raise InvalidDateError("Highlighted date must be non-null.")
            days.append(to_day(day))
        for day in days:
            if self.grid.cell_for(day) is None:
                logger.debug("Highlight %s skipped: not in grid", day)
                continue
            # Padding copies too, as build_grid flags them.
            for cell in self.grid.cells_for(day):
                cell.is_highlighted = True
                if cell not in self.highlighted_cells:
                    self.highlighted_cells.append(cell)

    def clear_highlights(self) -> None:
        for cell in self.highlighted_cells:
            cell.is_highlighted = False
        self.highlighted_cells.clear()
