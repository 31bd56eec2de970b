from datetime import date

import pytest

from grid_builder import build_grid


def weekdays_only(day: date) -> bool:
    return day.weekday() < 5


@pytest.fixture
def grid():
    """Jan + Feb 2024, Sunday-first, today = 2024-01-15."""
    return build_grid(date(2024, 1, 1), date(2024, 3, 1), today=date(2024, 1, 15),
                      locale="en_US")


@pytest.fixture
def weekday_grid():
    return build_grid(date(2024, 1, 1), date(2024, 3, 1), today=date(2024, 1, 15),
                      locale="en_US", selectable=weekdays_only)


class Recorder:
    """Collects callback invocations as (kind, date) tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, date]] = []

    def selected(self, day: date) -> None:
        self.events.append(("selected", day))

    def unselected(self, day: date) -> None:
        self.events.append(("unselected", day))

    def invalid(self, day: date) -> None:
        self.events.append(("invalid", day))


@pytest.fixture
def recorder():
    return Recorder()
