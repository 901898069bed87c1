"""Requests-based client for the ECB data API reference rates."""

from __future__ import annotations

import io
import logging
from datetime import date
from typing import Optional

import pandas as pd
import requests
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from fx_history.currency import BASE_CURRENCY, Currency
from fx_history.errors import SourceUnavailableError
from fx_history.utils.ecb import (
    ECB_DATA_API_URL,
    ECB_DATE_COLUMN,
    ECB_VALUE_COLUMN,
    enforce_feed_convention,
    series_url,
)
from fx_history.utils.logger import get_logger
from fx_history.utils.series import DATE_COLUMN, VALUE_COLUMN, empty_series, normalise_series

LOGGER = get_logger(__name__)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(exc, requests.HTTPError) and exc.response is not None:
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


class ECBRateSource:
    """Download daily ECB reference rates and express them in base-currency terms.

    The ECB quotes every series as foreign units per one euro; values are
    inverted on the way in so one unit of the foreign currency maps to its
    price in euros.
    """

    def __init__(
        self,
        *,
        base_url: str = ECB_DATA_API_URL,
        timeout: float = 30.0,
        max_attempts: int = 3,
        backoff_seconds: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.base_url = base_url
        self.base = BASE_CURRENCY
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.session = session or self._build_session()

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "User-Agent": "fx-history/0.1 (+https://data.ecb.europa.eu)",
                "Accept": "text/csv",
            }
        )
        return session

    def fetch(self, currency: Currency | str, from_date: date | None = None) -> pd.DataFrame:
        """Return the raw series of ``currency`` starting at ``from_date`` (inclusive)."""

        code = Currency.parse(currency)
        if code is self.base:
            raise ValueError(f"{code} is the base currency and has no exchange rate series")

        url = series_url(code.value, self.base.value, base_url=self.base_url)
        params = {"format": "csvdata", "detail": "dataonly"}
        if from_date is not None:
            params["startPeriod"] = from_date.isoformat()

        LOGGER.info(
            "Fetching %s/%s reference rates from %s",
            code,
            self.base,
            from_date.isoformat() if from_date else "the start of the series",
        )
        response = self._get(url, params)
        if response is None:
            LOGGER.info("ECB has no %s observations in the requested window", code)
            return empty_series()
        series = self._parse(response.text, code)
        LOGGER.info("Received %s %s observations", len(series), code)
        return series

    def _get(self, url: str, params: dict[str, str]) -> requests.Response | None:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=30),
            retry=retry_if_exception(_is_transient),
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    response = self.session.get(url, params=params, timeout=self.timeout)
                    # The data API answers 404 when a window holds no observations.
                    if response.status_code == 404:
                        return None
                    response.raise_for_status()
                    return response
        except requests.RequestException as exc:
            raise SourceUnavailableError(f"ECB data API request to {url} failed: {exc}") from exc
        return None  # pragma: no cover - Retrying either returns or raises

    def _parse(self, text: str, code: Currency) -> pd.DataFrame:
        if not text.strip():
            return empty_series()
        try:
            raw = pd.read_csv(io.StringIO(text))
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise SourceUnavailableError(f"Unreadable ECB response for {code}: {exc}") from exc

        missing = [column for column in (ECB_DATE_COLUMN, ECB_VALUE_COLUMN) if column not in raw]
        if missing:
            raise SourceUnavailableError(
                f"ECB response for {code} lacks column(s): {', '.join(missing)}"
            )
        enforce_feed_convention(raw, code.value, self.base.value)

        frame = pd.DataFrame(
            {
                DATE_COLUMN: raw[ECB_DATE_COLUMN],
                VALUE_COLUMN: 1.0 / pd.to_numeric(raw[ECB_VALUE_COLUMN], errors="coerce"),
            }
        )
        return normalise_series(frame)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ECBRateSource":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # pragma: no cover - trivial
        self.close()


__all__ = ["ECBRateSource"]
