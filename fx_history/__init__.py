"""Public interface for the fx_history package."""

from __future__ import annotations

from importlib import metadata as importlib_metadata
from typing import Any

from fx_history.config import CacheBackend, CacheConnectionInfo, build_cache
from fx_history.currency import BASE_CURRENCY, Currency, pair_key
from fx_history.db.base_backend import RateCache
from fx_history.db.csv_backend import CSVRateCache
from fx_history.engine import ExchangeEngine, Lookup
from fx_history.errors import (
    CacheMissError,
    DataIntegrityError,
    DateOutOfRangeError,
    FxHistoryError,
    MissingDateError,
    SourceUnavailableError,
    UnsupportedPairError,
)
from fx_history.ingestion.models import RateObservation
from fx_history.utils.series import Extremum, expand, extreme_date

__all__ = [
    "__version__",
    "BASE_CURRENCY",
    "CSVRateCache",
    "CacheBackend",
    "CacheConnectionInfo",
    "CacheMissError",
    "Currency",
    "DataIntegrityError",
    "DateOutOfRangeError",
    "ECBRateSource",
    "ExchangeEngine",
    "Extremum",
    "FxHistoryError",
    "Lookup",
    "MissingDateError",
    "RateCache",
    "RateObservation",
    "SQLRateCache",
    "SourceUnavailableError",
    "UnsupportedPairError",
    "build_cache",
    "convert_ledger",
    "expand",
    "extreme_date",
    "pair_key",
    "populate_rates",
]

try:
    __version__ = importlib_metadata.version("fx-history")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


def populate_rates(*args, **kwargs):
    from fx_history.seeds.populate_rates import populate_rates as _populate_rates

    return _populate_rates(*args, **kwargs)


def convert_ledger(*args, **kwargs):
    from fx_history.seeds.convert_ledger import convert_ledger as _convert_ledger

    return _convert_ledger(*args, **kwargs)


def __getattr__(name: str) -> Any:
    """Lazily import network and SQL helpers so importing the package stays light."""

    if name == "ECBRateSource":
        from fx_history.ingestion.ecb import ECBRateSource as _source

        return _source
    if name == "SQLRateCache":
        from fx_history.db.relational_backend import SQLRateCache as _cache

        return _cache
    raise AttributeError(f"module 'fx_history' has no attribute {name}")
