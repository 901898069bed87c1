"""Date parsing helpers and the closed date range container."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

import pandas as pd


@dataclass(frozen=True)
class DateRange:
    """Container representing a closed date range."""

    start: date
    end: date

    def __contains__(self, day: object) -> bool:
        if not isinstance(day, date):
            return False
        return self.start <= parse_date(day) <= self.end


def parse_date(value: str | date | datetime | pd.Timestamp) -> date:
    """Parse an ISO string, ``datetime`` or ``Timestamp`` into a :class:`date`."""

    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip(), "%Y-%m-%d").date()
