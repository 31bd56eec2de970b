import calendar
from datetime import date, datetime, timedelta

import pytest

from conftest import weekdays_only
from errors import InvalidRangeError
from grid_builder import RangeState, build_grid


def _months(grid):
    return [(m.year, m.month) for m in grid]


class TestBounds:
    def test_missing_bound(self):
        with pytest.raises(InvalidRangeError):
            build_grid(None, date(2024, 1, 1))
        with pytest.raises(InvalidRangeError):
            build_grid(date(2024, 1, 1), None)

    @pytest.mark.parametrize("lo, hi", [
        (date(2024, 1, 10), date(2024, 1, 10)),
        (date(2024, 1, 10), date(2024, 1, 9)),
        # same day once time is dropped
        (datetime(2024, 1, 10, 8), datetime(2024, 1, 10, 20)),
    ])
    def test_min_not_before_max(self, lo, hi):
        with pytest.raises(InvalidRangeError):
            build_grid(lo, hi)

    def test_max_on_first_of_month_adds_no_month(self):
        grid = build_grid(date(2024, 1, 15), date(2024, 3, 1))
        assert _months(grid) == [(2024, 1), (2024, 2)]

    def test_max_after_first_includes_month(self):
        grid = build_grid(date(2024, 1, 15), date(2024, 3, 2))
        assert _months(grid) == [(2024, 1), (2024, 2), (2024, 3)]

    def test_months_across_year_boundary(self):
        grid = build_grid(date(2023, 11, 10), date(2024, 2, 10))
        assert _months(grid) == [(2023, 11), (2023, 12), (2024, 1), (2024, 2)]

    def test_multi_year_range_has_each_month_once(self):
        grid = build_grid(date(2022, 6, 1), date(2024, 6, 1))
        assert len(grid) == 24
        assert len(set(_months(grid))) == 24

    def test_time_of_day_ignored(self):
        grid = build_grid(datetime(2012, 11, 16, 17, 15), datetime(2013, 11, 16, 4, 30))
        assert grid.min_date == date(2012, 11, 16)
        assert grid.max_date == date(2013, 11, 16)
        assert grid.cell_for(date(2012, 11, 16)).is_selectable
        assert grid.cell_for(date(2013, 11, 15)).is_selectable
        assert not grid.cell_for(date(2013, 11, 16)).is_selectable
        assert not grid.cell_for(date(2012, 11, 15)).is_selectable


class TestLayout:
    def test_sunday_first(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 2, 1), locale="en_US")
        jan = grid[0]
        assert jan.weeks[0][0].date == date(2023, 12, 31)
        assert len(jan.weeks) == 5
        assert jan.weeks[-1][-1].date == date(2024, 2, 3)

    def test_monday_first(self):
        grid = build_grid(date(2024, 9, 1), date(2024, 10, 1), locale="de_DE")
        sep = grid[0]
        assert sep.weeks[0][0].date == date(2024, 8, 26)
        assert len(sep.weeks) == 6
        assert sep.weeks[-1][0].date == date(2024, 9, 30)

    def test_saturday_first(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 2, 1), locale="fa_IR")
        assert grid[0].weeks[0][0].date == date(2023, 12, 30)

    def test_december_padding_into_next_year(self):
        grid = build_grid(date(2023, 12, 1), date(2024, 1, 1), locale="en_US")
        dec = grid[0]
        assert len(grid) == 1
        assert len(dec.weeks) == 6
        last_week = dec.weeks[-1]
        assert last_week[0].date == date(2023, 12, 31)
        assert [c.is_current_month for c in last_week] == [True] + [False] * 6

    def test_rtl_keeps_chronological_order(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 2, 1), locale="he_IL")
        week = grid[0].weeks[1]
        assert [c.date for c in week] == sorted(c.date for c in week)

    @pytest.mark.parametrize("locale", ["en_US", "de_DE", "fa_IR"])
    def test_weeks_cover_every_day_once(self, locale):
        grid = build_grid(date(2023, 1, 1), date(2025, 1, 1), locale=locale)
        for month in grid:
            for week in month.weeks:
                assert len(week) == 7
                for a, b in zip(week, week[1:]):
                    assert b.date - a.date == timedelta(days=1)
            days = [c.date for c in month.current_cells()]
            expected = [date(month.year, month.month, d)
                        for d in range(1, calendar.monthrange(month.year, month.month)[1] + 1)]
            assert days == expected

    def test_month_descriptor(self, grid):
        feb = grid[1]
        assert feb.label == "February 2024"
        assert feb.month_index == 1
        assert feb.year == 2024

    def test_padding_cells_are_distinct_objects(self, grid):
        jan, feb = grid[0], grid[1]
        padding = [c for c in jan.weeks[-1] if c.date == date(2024, 2, 1)][0]
        in_month = grid.cell_for(date(2024, 2, 1))
        assert padding is not in_month
        assert padding != in_month
        assert not padding.is_current_month
        assert not padding.is_selectable
        assert in_month in feb.current_cells()
        assert grid.month_position(date(2024, 2, 1)) == 1
        assert grid.cells_for(date(2024, 2, 1)) == [padding, in_month]


class TestFlags:
    def test_selectable_respects_bounds(self):
        grid = build_grid(date(2024, 1, 15), date(2024, 1, 20))
        assert not grid.cell_for(date(2024, 1, 14)).is_selectable
        assert grid.cell_for(date(2024, 1, 15)).is_selectable
        assert grid.cell_for(date(2024, 1, 19)).is_selectable
        assert not grid.cell_for(date(2024, 1, 20)).is_selectable

    def test_predicate(self, weekday_grid):
        assert not weekday_grid.cell_for(date(2024, 1, 20)).is_selectable
        assert weekday_grid.cell_for(date(2024, 1, 19)).is_selectable

    def test_predicate_called_for_current_month_cells_only(self):
        seen = []
        build_grid(date(2024, 1, 1), date(2024, 2, 1),
                   selectable=lambda d: seen.append(d) or True)
        assert len(seen) == 31
        assert all(d.month == 1 for d in seen)

    def test_today(self, grid):
        today = [c for c in grid.iter_cells() if c.is_today]
        assert [c.date for c in today] == [date(2024, 1, 15)]

    def test_selected_and_range_state(self):
        grid = build_grid(
            date(2024, 1, 1), date(2024, 3, 1),
            selected_dates=[date(2024, 1, 10), date(2024, 1, 5), date(2024, 1, 20)],
        )
        cell = grid.cell_for
        assert cell(date(2024, 1, 5)).range_state is RangeState.FIRST
        assert cell(date(2024, 1, 20)).range_state is RangeState.LAST
        assert cell(date(2024, 1, 10)).range_state is RangeState.MIDDLE
        assert cell(date(2024, 1, 12)).range_state is RangeState.MIDDLE
        assert cell(date(2024, 1, 4)).range_state is RangeState.NONE
        assert cell(date(2024, 1, 21)).range_state is RangeState.NONE
        assert [c.date for c in grid.iter_cells() if c.is_selected] == [
            date(2024, 1, 5), date(2024, 1, 10), date(2024, 1, 20)]

    def test_single_selected_date_has_no_range(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 3, 1),
                          selected_dates=[date(2024, 1, 5)])
        assert all(c.range_state is RangeState.NONE for c in grid.iter_cells())
        assert grid.cell_for(date(2024, 1, 5)).is_selected

    def test_selected_padding_copy_is_not_selected(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 3, 1),
                          selected_dates=[date(2024, 2, 1)])
        flags = [c.is_selected for c in grid.iter_cells() if c.date == date(2024, 2, 1)]
        assert flags == [False, True]

    def test_highlighted(self):
        grid = build_grid(date(2024, 1, 1), date(2024, 3, 1),
                          highlighted_dates=[datetime(2024, 1, 9, 13, 0)])
        assert grid.cell_for(date(2024, 1, 9)).is_highlighted
        assert not grid.cell_for(date(2024, 1, 9)).is_selected

    def test_rebuild_is_idempotent(self):
        def flags(g):
            return [(c.date, c.value, c.is_current_month, c.is_selectable, c.is_today,
                     c.is_selected, c.is_highlighted, c.range_state)
                    for c in g.iter_cells()]

        kwargs = dict(today=date(2024, 1, 15), locale="de_DE", selectable=weekdays_only)
        a = build_grid(date(2024, 1, 1), date(2024, 6, 1), **kwargs)
        b = build_grid(date(2024, 1, 1), date(2024, 6, 1), **kwargs)
        assert flags(a) == flags(b)
        assert a.cell_for(date(2024, 2, 2)) is not b.cell_for(date(2024, 2, 2))
