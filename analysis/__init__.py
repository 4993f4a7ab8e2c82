"""Pure analysis package for balanceTrend.

This package contains deterministic, testable computations that operate on
in-memory inputs and return DTOs. It must not import Django or perform any
I/O.
"""

from .balance_events import MalformedEvent, events_from_payload
from .day_windows import DayWindow, InvalidWindow
from .dto import BalanceEvent, DenseSeries
from .resampling import resample

__all__ = [
    "BalanceEvent",
    "DayWindow",
    "DenseSeries",
    "InvalidWindow",
    "MalformedEvent",
    "events_from_payload",
    "resample",
]
