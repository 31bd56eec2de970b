"""Error taxonomy for grid building and selection."""


class CalendarError(Exception):
    """Base class for picker errors."""


class InvalidRangeError(CalendarError, ValueError):
    """minDate/maxDate missing or not strictly ordered."""


class InvalidDateError(CalendarError, ValueError):
    """A date-accepting operation got None or a date it cannot accept."""


class SelectionRejection(CalendarError):
    """Soft failure of a pick. Recorded and reported, never raised by the engine."""

    def __init__(self, day, message: str) -> None:
        super().__init__(message)
        self.date = day


class OutOfBoundsRejection(SelectionRejection):
    """Pick outside [min_date, max_date)."""


class UnselectableRejection(SelectionRejection):
    """Pick refused by the selectable predicate."""
