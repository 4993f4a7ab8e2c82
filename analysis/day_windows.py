"""Calendar-day window helpers for balance charts.

Balance charts default to a trailing 14-day window ending "today". This module
provides pure helpers (no Django imports) to build, validate and enumerate those
windows deterministically.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo


DEFAULT_WINDOW_DAYS = 14


class InvalidWindow(ValueError):
    """Raised when a window would have zero or negative length."""

    def __init__(self, message: str, *, start: date | None = None, end: date | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description of the problem.
            start: Offending window start, when known.
            end: Offending window end, when known.
        """

        super().__init__(message)
        self.start = start
        self.end = end


@dataclass(frozen=True, slots=True)
class DayWindow:
    """An inclusive, contiguous range of calendar days.

    Attributes:
        start: Inclusive window start date.
        end: Inclusive window end date.
    """

    start: date
    end: date

    @property
    def day_count(self) -> int:
        """Number of calendar days covered (0 when the window is inverted)."""

        return max((self.end - self.start).days + 1, 0)

    def days(self) -> Iterator[date]:
        """Yield every day from `start` to `end` inclusive, ascending."""

        for offset in range(self.day_count):
            yield self.start + timedelta(days=offset)


def validate_window(window: DayWindow) -> DayWindow:
    """Reject windows whose start falls after their end.

    Args:
        window: Window to check.

    Returns:
        The same window, for chaining.

    Raises:
        InvalidWindow: When `window.start > window.end`.
    """

    if window.start > window.end:
        raise InvalidWindow(
            f"Window start {window.start.isoformat()} is after end {window.end.isoformat()}.",
            start=window.start,
            end=window.end,
        )
    return window


def trailing_window(*, end: date, window_days: int = DEFAULT_WINDOW_DAYS) -> DayWindow:
    """Return the `window_days`-long window that ends on `end` (inclusive).

    Args:
        end: Last day of the window.
        window_days: Window size in days (defaults to 14).

    Returns:
        DayWindow covering exactly `window_days` days.
    """

    if window_days <= 0:
        raise InvalidWindow(f"window_days must be positive, got {window_days}.")
    return DayWindow(start=end - timedelta(days=window_days - 1), end=end)


def window_ending_at(
    anchor: datetime,
    *,
    window_days: int = DEFAULT_WINDOW_DAYS,
    tz: tzinfo = timezone.utc,
) -> DayWindow:
    """Return the trailing window ending on the calendar day of `anchor`.

    Args:
        anchor: Timezone-aware instant, typically "now".
        window_days: Window size in days (defaults to 14).
        tz: Time zone used to decide which calendar day `anchor` falls on.

    Returns:
        DayWindow whose `end` is `anchor`'s date in `tz`.
    """

    if anchor.tzinfo is None:
        raise ValueError("anchor must be timezone-aware.")
    return trailing_window(end=anchor.astimezone(tz).date(), window_days=window_days)


def window_between(
    *, start: date | None, end: date | None, window_days: int = DEFAULT_WINDOW_DAYS
) -> DayWindow:
    """Build an explicit window from caller-supplied bounds.

    A complete pair of bounds is used as-is (after validation). With only one
    bound, the other is extended by `window_days` so the window keeps its
    configured length.

    Args:
        start: Optional inclusive start date.
        end: Optional inclusive end date.
        window_days: Length used when one bound is missing.

    Returns:
        Validated DayWindow.

    Raises:
        ValueError: If neither bound is given.
        InvalidWindow: If the bounds are inverted or `window_days` is not positive.
    """

    if start is not None and end is not None:
        return validate_window(DayWindow(start=start, end=end))
    if end is not None:
        return trailing_window(end=end, window_days=window_days)
    if start is not None:
        if window_days <= 0:
            raise InvalidWindow(f"window_days must be positive, got {window_days}.")
        return DayWindow(start=start, end=start + timedelta(days=window_days - 1))
    raise ValueError("At least one of start/end must be provided.")
