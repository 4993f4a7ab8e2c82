"""Unit tests for calendar-day window helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from analysis.day_windows import (
    DayWindow,
    InvalidWindow,
    trailing_window,
    validate_window,
    window_between,
    window_ending_at,
)

pytestmark = pytest.mark.unit


def test_trailing_window_defaults_to_fourteen_days() -> None:
    """The default window covers 14 days ending on the given day."""

    window = trailing_window(end=date(2025, 12, 14))
    assert window == DayWindow(start=date(2025, 12, 1), end=date(2025, 12, 14))
    assert window.day_count == 14


def test_trailing_window_single_day() -> None:
    """A one-day window starts and ends on the same day."""

    window = trailing_window(end=date(2025, 12, 14), window_days=1)
    assert window.start == window.end == date(2025, 12, 14)


def test_trailing_window_rejects_non_positive_length() -> None:
    """Zero-length windows are rejected rather than producing an empty series."""

    with pytest.raises(InvalidWindow, match="window_days"):
        trailing_window(end=date(2025, 12, 14), window_days=0)


def test_window_ending_at_uses_the_anchor_day_in_the_given_zone() -> None:
    """Late-evening UTC is already the next day two hours east."""

    anchor = datetime(2025, 12, 14, 23, 30, tzinfo=timezone.utc)
    assert window_ending_at(anchor, window_days=3).end == date(2025, 12, 14)

    plus_two = timezone(timedelta(hours=2))
    window = window_ending_at(anchor, window_days=3, tz=plus_two)
    assert window == DayWindow(start=date(2025, 12, 13), end=date(2025, 12, 15))


def test_window_ending_at_rejects_naive_anchor() -> None:
    """Anchors without a time zone are ambiguous."""

    with pytest.raises(ValueError, match="timezone-aware"):
        window_ending_at(datetime(2025, 12, 14, 12, 0))


def test_days_enumerate_across_year_boundary() -> None:
    """Day enumeration is inclusive and crosses month/year boundaries."""

    window = DayWindow(start=date(2025, 12, 30), end=date(2026, 1, 2))
    assert list(window.days()) == [
        date(2025, 12, 30),
        date(2025, 12, 31),
        date(2026, 1, 1),
        date(2026, 1, 2),
    ]


def test_validate_window_rejects_inverted_bounds() -> None:
    """A start after the end raises InvalidWindow carrying both bounds."""

    window = DayWindow(start=date(2025, 12, 3), end=date(2025, 12, 1))
    assert window.day_count == 0
    with pytest.raises(InvalidWindow) as excinfo:
        validate_window(window)
    assert excinfo.value.start == date(2025, 12, 3)
    assert excinfo.value.end == date(2025, 12, 1)
    assert isinstance(excinfo.value, ValueError)


def test_window_between_requires_one_side() -> None:
    """An explicit window needs at least one bound."""

    with pytest.raises(ValueError, match="start/end"):
        window_between(start=None, end=None)


def test_window_between_fills_missing_side() -> None:
    """The missing bound is filled is missing based on the window size."""

    assert window_between(start=date(2025, 12, 1), end=None, window_days=7) == DayWindow(
        start=date(2025, 12, 1), end=date(2025, 12, 7)
    )
    assert window_between(start=None, end=date(2025, 12, 7), window_days=7) == DayWindow(
        start=date(2025, 12, 1), end=date(2025, 12, 7)
    )


def test_window_between_rejects_inverted_bounds() -> None:
    """Explicit bounds are still validated."""

    with pytest.raises(InvalidWindow):
        window_between(start=date(2025, 12, 7), end=date(2025, 12, 1))
