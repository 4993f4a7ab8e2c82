"""Service-layer functions for the core app.

Services in `core` coordinate Django configuration concerns (settings, the
project time zone, "now") with the pure parsing/resampling modules.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from django.conf import settings
from django.utils import timezone

from analysis.balance_events import MalformedEvent, events_from_payload
from analysis.day_windows import DayWindow, window_between, window_ending_at
from analysis.dto import DenseSeries
from analysis.resampling import resample

logger = logging.getLogger(__name__)


def resolve_balance_window(
    *,
    window_days: int | None = None,
    anchor_end: datetime | None = None,
    start: date | None = None,
    end: date | None = None,
) -> DayWindow:
    """Resolve the day window used for fixed-window balance charts.

    Args:
        window_days: Optional window length; defaults to
            `settings.BALANCE_SERIES_WINDOW_DAYS`.
        anchor_end: Optional instant whose calendar day ends the window;
            defaults to `timezone.now()`. Naive values are interpreted in the
            project time zone.
        start: Optional explicit first day of the window.
        end: Optional explicit last day of the window.

    Returns:
        The explicit window when `start`/`end` are given, otherwise the
        trailing window ending on the anchor's day in the project time zone.

    Raises:
        ValueError: If `anchor_end` is combined with explicit bounds.
        InvalidWindow: If `window_days` is less than 1 or the bounds are inverted.
    """

    tz = timezone.get_default_timezone()
    if window_days is None:
        window_days = settings.BALANCE_SERIES_WINDOW_DAYS
    if start is not None or end is not None:
        if anchor_end is not None:
            raise ValueError("anchor_end cannot be combined with start or end.")
        return window_between(start=start, end=end, window_days=window_days)
    if anchor_end is None:
        anchor_end = timezone.now()
    elif timezone.is_naive(anchor_end):
        anchor_end = timezone.make_aware(anchor_end, tz)
    return window_ending_at(anchor_end, window_days=window_days, tz=tz)


def build_balance_series(
    payload: object,
    *,
    window_days: int | None = None,
    anchor_end: datetime | None = None,
    start: date | None = None,
    end: date | None = None,
    full_history: bool = False,
) -> DenseSeries:
    """Parse an Event Source payload and resample it into a dense daily series.

    Args:
        payload: Decoded upstream JSON (`{"points_history": [...]}` or a list).
        window_days: Optional fixed-window length (see `resolve_balance_window`).
        anchor_end: Optional fixed-window end anchor.
        start: Optional explicit window start day.
        end: Optional explicit window end day.
        full_history: Use the full-history variant instead of a fixed window.

    Returns:
        DenseSeries ready to be handed to a renderer.

    Raises:
        ValueError: If `full_history` is combined with window options.
        MalformedEvent: If the payload or one of its records is unusable.
        InvalidWindow: If the window options are invalid.
    """

    window_options = (window_days, anchor_end, start, end)
    if full_history and any(option is not None for option in window_options):
        raise ValueError("full_history cannot be combined with window options.")

    tz = timezone.get_default_timezone()
    try:
        events = events_from_payload(payload, tz=tz)
    except MalformedEvent as exc:
        logger.warning("Rejected balance payload: %s", exc)
        raise

    window = None
    if not full_history:
        window = resolve_balance_window(window_days=window_days, anchor_end=anchor_end, start=start, end=end)
    if window is None:
        logger.debug("Resampling %d balance events over full history (tz=%s)", len(events), tz)
    else:
        logger.debug(
            "Resampling %d balance events over %s..%s (tz=%s)",
            len(events),
            window.start.isoformat(),
            window.end.isoformat(),
            tz,
        )
    return resample(events, window, tz=tz)
