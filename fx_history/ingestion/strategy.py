"""Abstractions for pluggable rate sources."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    import pandas as pd

    from fx_history.currency import Currency


class RateSource(Protocol):
    """Contract for fetching daily rates of one currency against the base.

    Implementations return a raw series (``date``/``value`` columns) whose
    values are already expressed as base units per foreign unit. Observations
    start at ``from_date`` (inclusive) or cover the full history when it is
    omitted. Transport and parsing failures surface as
    :class:`~fx_history.errors.SourceUnavailableError`.
    """

    def fetch(self, currency: "Currency | str", from_date: date | None = None) -> "pd.DataFrame":
        ...  # pragma: no cover - protocol definition


__all__ = ["RateSource"]
