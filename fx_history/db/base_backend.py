"""Cache strategy interface for persisted raw rate series."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

import pandas as pd

from fx_history.currency import BASE_CURRENCY, Currency, pair_key
from fx_history.ingestion.strategy import RateSource
from fx_history.utils.logger import get_logger
from fx_history.utils.series import Extremum, extreme_date, merge_series, normalise_series

LOGGER = get_logger(__name__)


class RateCache(ABC):
    """Common interface implemented by every cache backend.

    Caches only ever hold raw (un-filled) series, one per ``(foreign, base)``
    pair.
    """

    @abstractmethod
    def load(self, currency: Currency | str) -> pd.DataFrame:
        """Return the persisted raw series or raise :class:`CacheMissError`."""

    @abstractmethod
    def _write(self, key: str, series: pd.DataFrame) -> None:
        """Replace whatever is stored under ``key`` with ``series``."""

    def save(self, currency: Currency | str, series: pd.DataFrame) -> bool:
        """Persist ``series``; empty series are skipped so existing data survives."""

        key = pair_key(currency, BASE_CURRENCY)
        clean = normalise_series(series)
        if clean.empty:
            LOGGER.info("Nothing to save for %s; keeping the existing cache", key)
            return False
        self._write(key, clean)
        LOGGER.info("Saved %s rows for %s", len(clean), key)
        return True

    def refresh(
        self,
        currency: Currency | str,
        cached: pd.DataFrame,
        source: RateSource,
        *,
        today: date | None = None,
    ) -> pd.DataFrame:
        """Top up ``cached`` from ``source`` when it ends before ``today``.

        The fetch starts at the cached maximum date itself; a re-delivered
        observation replaces the cached one during the merge.
        """

        key = pair_key(currency, BASE_CURRENCY)
        current = today or date.today()
        cached_max = extreme_date(cached, Extremum.MAX)
        if cached_max >= current:
            LOGGER.info("%s cache is current (last rate %s)", key, cached_max)
            return cached
        LOGGER.info("%s cache is stale (last rate %s); fetching newer rates", key, cached_max)
        fresh = source.fetch(currency, from_date=cached_max)
        return merge_series(cached, fresh)

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""


__all__ = ["RateCache"]
