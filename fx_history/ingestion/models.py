"""Data models shared across ingestion modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(slots=True, frozen=True)
class RateObservation:
    """A single day's rate: units of the base currency per foreign unit."""

    rate_date: date
    rate: float
