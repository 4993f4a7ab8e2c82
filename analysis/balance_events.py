"""Parsing and validation of balance events.

The Event Source hands over the decoded upstream JSON payload. This module turns
that payload into `BalanceEvent` DTOs and is allowed to fail fast: a record
that lacks a usable timestamp or balance raises `MalformedEvent` rather than
being skipped or coerced.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone, tzinfo
from decimal import Decimal
from typing import Protocol

from .dto import Balance, BalanceEvent


TIMESTAMP_FIELD = "created_at"
BALANCE_FIELD = "running_balance"
HISTORY_FIELD = "points_history"


class MalformedEvent(ValueError):
    """Raised when an event record lacks a usable timestamp or balance."""

    def __init__(self, message: str, *, index: int | None, field: str | None, record: object) -> None:
        """Initialize the error.

        Args:
            message: Description of what is wrong with the record.
            index: Position of the record in its input sequence, if any.
            field: Name of the offending field, if a single field is at fault.
            record: The raw record as received.
        """

        location = "payload" if index is None else f"event #{index}"
        super().__init__(f"Malformed {location}: {message} (record={record!r})")
        self.index = index
        self.field = field
        self.record = record


class _BalanceEventLike(Protocol):
    """Protocol for event objects accepted by the resampler (duck-typed)."""

    timestamp: datetime
    balance: Balance


def events_from_payload(payload: object, *, tz: tzinfo = timezone.utc) -> tuple[BalanceEvent, ...]:
    """Extract balance events from a decoded Event Source payload.

    Args:
        payload: Either a mapping with a `points_history` list, or the list of
            records itself.
        tz: Time zone used to interpret naive timestamps.

    Returns:
        Parsed events in input order. A mapping without `points_history` (or
        with `null`) yields no events.
    """

    if isinstance(payload, Mapping):
        records = payload.get(HISTORY_FIELD)
        if records is None:
            return ()
    else:
        records = payload

    if isinstance(records, (str, bytes, Mapping)) or not isinstance(records, Iterable):
        raise MalformedEvent(
            f"expected a list of events, got {type(records).__name__}",
            index=None,
            field=HISTORY_FIELD,
            record=payload,
        )
    return parse_balance_events(records, tz=tz)


def parse_balance_events(records: Iterable[object], *, tz: tzinfo = timezone.utc) -> tuple[BalanceEvent, ...]:
    """Parse raw records into `BalanceEvent`s, failing on the first bad record."""

    return tuple(parse_balance_event(record, index=index, tz=tz) for index, record in enumerate(records))


def parse_balance_event(record: object, *, index: int | None = None, tz: tzinfo = timezone.utc) -> BalanceEvent:
    """Parse one raw Event Source record.

    Args:
        record: Mapping with `created_at` and `running_balance` keys.
        index: Position of the record, reported in errors.
        tz: Time zone used to interpret naive timestamps.

    Returns:
        BalanceEvent with a timezone-aware timestamp.

    Raises:
        MalformedEvent: If the record is not a mapping, a field is missing, or a
            value cannot be used.
    """

    if not isinstance(record, Mapping):
        raise MalformedEvent(
            f"expected an object, got {type(record).__name__}", index=index, field=None, record=record
        )
    for name in (TIMESTAMP_FIELD, BALANCE_FIELD):
        if name not in record:
            raise MalformedEvent(f"missing {name!r}", index=index, field=name, record=record)

    timestamp = _parse_timestamp(record[TIMESTAMP_FIELD], tz=tz)
    if timestamp is None:
        raise MalformedEvent(
            f"unparsable {TIMESTAMP_FIELD!r}", index=index, field=TIMESTAMP_FIELD, record=record
        )
    balance = record[BALANCE_FIELD]
    if not _is_balance(balance):
        raise MalformedEvent(f"unusable {BALANCE_FIELD!r}", index=index, field=BALANCE_FIELD, record=record)
    return BalanceEvent(timestamp=timestamp, balance=balance)


def validate_events(events: Iterable[_BalanceEventLike]) -> tuple[BalanceEvent, ...]:
    """Check already-built events and return them as a fresh tuple.

    Args:
        events: Objects exposing `timestamp` and `balance`.

    Returns:
        A new tuple of BalanceEvent; the input is never modified.

    Raises:
        MalformedEvent: If any event has a naive or non-datetime timestamp, or a
            balance that is not a finite real number.
    """

    validated: list[BalanceEvent] = []
    for index, event in enumerate(events):
        timestamp = getattr(event, "timestamp", None)
        if not isinstance(timestamp, datetime) or timestamp.tzinfo is None:
            raise MalformedEvent(
                "timestamp must be a timezone-aware datetime", index=index, field="timestamp", record=event
            )
        balance = getattr(event, "balance", None)
        if not _is_balance(balance):
            raise MalformedEvent(
                "balance must be a finite real number", index=index, field="balance", record=event
            )
        if isinstance(event, BalanceEvent):
            validated.append(event)
        else:
            validated.append(BalanceEvent(timestamp=timestamp, balance=balance))
    return tuple(validated)


def _parse_timestamp(value: object, *, tz: tzinfo) -> datetime | None:
    """Coerce an ISO-8601 string, datetime or epoch-milliseconds value."""

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _is_balance(value: object) -> bool:
    """Return True for finite int/float/Decimal values (booleans excluded)."""

    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False
