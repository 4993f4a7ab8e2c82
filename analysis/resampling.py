"""Resample sparse balance events into a dense daily series.

Two variants are supported:
- fixed window: one value per calendar day of a `DayWindow`, carrying the last
  known balance forward (including a balance known only from before the window);
- full history: one value per distinct event day, with no synthetic days.

Days are bucketed in a single explicit time zone (`tz`, UTC by default) so that
results do not depend on the host locale.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timezone, tzinfo

from .balance_events import validate_events
from .day_windows import DayWindow, validate_window
from .dto import Balance, BalanceEvent, DenseSeries


def calendar_day(timestamp: datetime, *, tz: tzinfo = timezone.utc) -> date:
    """Return the calendar day that `timestamp` falls on in `tz`."""

    return timestamp.astimezone(tz).date()


def resample(
    events: Iterable[BalanceEvent],
    window: DayWindow | None = None,
    *,
    tz: tzinfo = timezone.utc,
) -> DenseSeries:
    """Resample events, selecting the variant by whether a window is supplied.

    Args:
        events: Balance events in any order.
        window: Inclusive day window for the fixed-window variant, or None for
            the full-history variant.
        tz: Time zone used for day bucketing.

    Returns:
        DenseSeries for the selected variant.
    """

    if window is None:
        return resample_history(events, tz=tz)
    return resample_window(events, window, tz=tz)


def resample_window(
    events: Iterable[BalanceEvent],
    window: DayWindow,
    *,
    tz: tzinfo = timezone.utc,
) -> DenseSeries:
    """Produce one forward-filled balance per day of `window`.

    Args:
        events: Balance events in any order; may be empty, contain same-day
            entries, or fall outside the window.
        window: Inclusive calendar-day window.
        tz: Time zone used for day bucketing.

    Returns:
        DenseSeries with `window.day_count` labels and values. Days without an
        event repeat the previous day's value; leading days use the seed balance
        (the latest balance before the window, or 0).

    Raises:
        InvalidWindow: If `window.start > window.end`.
        MalformedEvent: If any event is unusable.
    """

    validate_window(window)
    ordered = _chronological(events)
    by_day = latest_balance_by_day(ordered, tz=tz, presorted=True)

    current = seed_balance(ordered, before=window.start, tz=tz, presorted=True)
    labels: list[str] = []
    values: list[Balance] = []
    for day in window.days():
        current = by_day.get(day, current)
        labels.append(day.isoformat())
        values.append(current)
    return DenseSeries(labels=tuple(labels), values=tuple(values))


def resample_history(events: Iterable[BalanceEvent], *, tz: tzinfo = timezone.utc) -> DenseSeries:
    """Replay events day by day without window alignment or gap filling.

    Args:
        events: Balance events in any order.
        tz: Time zone used for day bucketing.

    Returns:
        DenseSeries with one entry per distinct event day, ascending, each
        holding that day's latest balance.
    """

    by_day = latest_balance_by_day(events, tz=tz)
    return DenseSeries(
        labels=tuple(day.isoformat() for day in by_day),
        values=tuple(by_day.values()),
    )


def latest_balance_by_day(
    events: Iterable[BalanceEvent],
    *,
    tz: tzinfo = timezone.utc,
    presorted: bool = False,
) -> dict[date, Balance]:
    """Map each calendar day to the balance of its chronologically last event.

    Args:
        events: Balance events.
        tz: Time zone used for day bucketing.
        presorted: Skip validation and sorting when `events` is already the
            output of `_chronological`.

    Returns:
        Mapping ordered by ascending day. Among events sharing a timestamp the
        one appearing later in the input wins.
    """

    ordered = events if presorted else _chronological(events)
    latest: dict[date, Balance] = {}
    for event in ordered:
        latest[calendar_day(event.timestamp, tz=tz)] = event.balance
    return dict(sorted(latest.items(), key=lambda kv: kv[0]))


def seed_balance(
    events: Iterable[BalanceEvent],
    *,
    before: date,
    tz: tzinfo = timezone.utc,
    presorted: bool = False,
) -> Balance:
    """Return the latest balance observed on a day strictly before `before`.

    Args:
        events: Balance events.
        before: First day that is no longer part of the seed range.
        tz: Time zone used for day bucketing.
        presorted: Skip validation and sorting when `events` is already the
            output of `_chronological`.

    Returns:
        The seed balance, or 0 when no event precedes `before`.
    """

    ordered = events if presorted else _chronological(events)
    seed: Balance = 0
    for event in ordered:
        if calendar_day(event.timestamp, tz=tz) >= before:
            break
        seed = event.balance
    return seed


def _chronological(events: Iterable[BalanceEvent]) -> list[BalanceEvent]:
    """Validate events and return a new list stably sorted by timestamp."""

    return sorted(validate_events(events), key=lambda event: event.timestamp)
