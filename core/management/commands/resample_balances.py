"""Resample an Event Source balance payload into a dense daily series."""

from __future__ import annotations

import json
import sys
from decimal import Decimal
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date, parse_datetime

from analysis.balance_events import MalformedEvent
from analysis.day_windows import InvalidWindow
from core.services import build_balance_series


class Command(BaseCommand):
    """Print `{"labels": [...], "values": [...]}` for a balance history payload."""

    help = "Resample a balance history JSON payload into one value per calendar day."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument(
            "path",
            nargs="?",
            default="-",
            help="Path to the JSON payload, or '-' to read stdin (default).",
        )
        parser.add_argument(
            "--window-days",
            type=int,
            default=None,
            help="Window length in days (default: BALANCE_SERIES_WINDOW_DAYS).",
        )
        parser.add_argument(
            "--anchor-end",
            default=None,
            help="ISO-8601 instant whose day ends the window (default: now).",
        )
        parser.add_argument(
            "--start",
            default=None,
            help="Explicit first day of the window (YYYY-MM-DD).",
        )
        parser.add_argument(
            "--end",
            default=None,
            help="Explicit last day of the window (YYYY-MM-DD).",
        )
        parser.add_argument(
            "--full-history",
            action="store_true",
            help="Emit every event day instead of a fixed window.",
        )
        parser.add_argument(
            "--indent",
            type=int,
            default=None,
            help="Optional JSON indentation.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        full_history: bool = options["full_history"]
        window_days: int | None = options["window_days"]
        raw_anchor: str | None = options["anchor_end"]
        raw_start: str | None = options["start"]
        raw_end: str | None = options["end"]

        window_flags = (window_days, raw_anchor, raw_start, raw_end)
        if full_history and any(flag is not None for flag in window_flags):
            raise CommandError("Use either --full-history or window options, not both.")
        if raw_anchor is not None and (raw_start is not None or raw_end is not None):
            raise CommandError("Use either --anchor-end or --start/--end, not both.")

        anchor_end = None
        if raw_anchor is not None:
            anchor_end = _parse_or_fail(parse_datetime, raw_anchor, flag="--anchor-end")
        start = None if raw_start is None else _parse_or_fail(parse_date, raw_start, flag="--start")
        end = None if raw_end is None else _parse_or_fail(parse_date, raw_end, flag="--end")

        payload = self._load_payload(options["path"])
        try:
            series = build_balance_series(
                payload,
                window_days=window_days,
                anchor_end=anchor_end,
                start=start,
                end=end,
                full_history=full_history,
            )
        except (MalformedEvent, InvalidWindow) as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(json.dumps(series.to_dict(), indent=options["indent"], default=_json_default))
        return None

    def _load_payload(self, path: str) -> object:
        """Read and decode the JSON payload from `path` or stdin.

        Fractional balances are decoded as Decimal so they stay exact.
        """

        try:
            if path == "-":
                return json.load(sys.stdin, parse_float=Decimal)
            with Path(path).open(encoding="utf-8") as handle:
                return json.load(handle, parse_float=Decimal)
        except OSError as exc:
            raise CommandError(f"Could not read {path!r}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise CommandError(f"Invalid JSON in {path!r}: {exc}") from exc


def _parse_or_fail(parser, raw: str, *, flag: str):
    """Parse a date/datetime option with Django's parser or raise CommandError."""

    try:
        parsed = parser(raw)
    except ValueError:
        parsed = None
    if parsed is None:
        raise CommandError(f"Invalid {flag} value: {raw!r}.")
    return parsed


def _json_default(value: object) -> object:
    """Encode Decimal balances as JSON numbers."""

    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
