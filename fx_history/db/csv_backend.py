"""CSV cache backend: one human-readable file per currency pair."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pandas as pd

from fx_history.currency import BASE_CURRENCY, Currency, pair_key
from fx_history.db import CACHE_FILE_TEMPLATE, DEFAULT_CACHE_DIR
from fx_history.db.base_backend import RateCache
from fx_history.errors import CacheMissError, DataIntegrityError
from fx_history.utils.series import SERIES_COLUMNS, normalise_series


class CSVRateCache(RateCache):
    """Store raw series as ``date,value`` CSV files inside ``directory``."""

    def __init__(self, directory: str | Path = DEFAULT_CACHE_DIR) -> None:
        self.directory = Path(directory)

    def path_for(self, currency: Currency | str) -> Path:
        return self.directory / CACHE_FILE_TEMPLATE.format(key=pair_key(currency, BASE_CURRENCY))

    def load(self, currency: Currency | str) -> pd.DataFrame:
        path = self.path_for(currency)
        if not path.exists():
            raise CacheMissError(f"No cached rates at {path}")
        try:
            frame = pd.read_csv(path)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise DataIntegrityError(f"Cached rates at {path} are unreadable: {exc}") from exc
        header = [str(column).strip() for column in frame.columns]
        if header[: len(SERIES_COLUMNS)] != list(SERIES_COLUMNS):
            raise DataIntegrityError(f"Unexpected header {header} in {path}")
        return normalise_series(frame)

    def _write(self, key: str, series: pd.DataFrame) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / CACHE_FILE_TEMPLATE.format(key=key)
        # Readers must never observe a partially written file.
        handle, temp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".csv", dir=self.directory)
        try:
            with os.fdopen(handle, "w", newline="", encoding="utf-8") as stream:
                series.to_csv(
                    stream, index=False, columns=list(SERIES_COLUMNS), date_format="%Y-%m-%d"
                )
            os.replace(temp_name, target)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise


__all__ = ["CSVRateCache"]
