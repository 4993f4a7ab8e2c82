"""DTO types shared by the balance resampling helpers.

DTOs are plain data containers used to move balance history between the Event
Source, the resampler and whatever renders the result. They intentionally avoid
any Django/ORM dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Union

Balance = Union[int, float, Decimal]


@dataclass(frozen=True, slots=True)
class BalanceEvent:
    """One observed balance snapshot for a subject.

    Attributes:
        timestamp: Timezone-aware instant at which the balance was observed.
        balance: Running balance at `timestamp`. May be negative or fractional.
    """

    timestamp: datetime
    balance: Balance


@dataclass(frozen=True, slots=True)
class DenseSeries:
    """A chart-ready series with one value per label.

    Attributes:
        labels: ISO-8601 calendar dates (`YYYY-MM-DD`), ascending.
        values: Balance per label; `values[i]` belongs to `labels[i]`.
    """

    labels: tuple[str, ...] = ()
    values: tuple[Balance, ...] = ()

    def __post_init__(self) -> None:
        """Reject label/value sequences of different lengths."""

        if len(self.labels) != len(self.values):
            raise ValueError(
                f"DenseSeries requires equal-length labels and values, got {len(self.labels)} and {len(self.values)}."
            )

    def __len__(self) -> int:
        """Return the number of labelled days."""

        return len(self.labels)

    def to_dict(self) -> dict[str, list]:
        """Return a JSON-friendly `{"labels": [...], "values": [...]}` mapping."""

        return {"labels": list(self.labels), "values": list(self.values)}
