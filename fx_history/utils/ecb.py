"""ECB-specific constants and the feed unit convention check."""

from __future__ import annotations

import pandas as pd

from fx_history.errors import FeedConventionError

ECB_DATA_API_URL = "https://data-api.ecb.europa.eu/service/data"
ECB_EXR_FLOW = "EXR"
# Daily frequency, spot rate, average (reference) variation.
ECB_SERIES_KEY_TEMPLATE = "D.{currency}.{base}.SP00.A"

ECB_DATE_COLUMN = "TIME_PERIOD"
ECB_VALUE_COLUMN = "OBS_VALUE"
ECB_CURRENCY_COLUMN = "CURRENCY"
ECB_DENOMINATOR_COLUMN = "CURRENCY_DENOM"


def series_url(currency: str, base: str, *, base_url: str = ECB_DATA_API_URL) -> str:
    """Return the EXR endpoint for the daily ``currency``/``base`` reference rate."""

    key = ECB_SERIES_KEY_TEMPLATE.format(currency=currency, base=base)
    return f"{base_url.rstrip('/')}/{ECB_EXR_FLOW}/{key}"


def enforce_feed_convention(frame: pd.DataFrame, currency: str, base: str) -> None:
    """Ensure ``frame`` quotes ``currency`` units per one unit of ``base``.

    The series dimensions are only checked when the response carries them;
    values must always be strictly positive since they get inverted.
    """

    if ECB_CURRENCY_COLUMN in frame.columns:
        quoted = set(frame[ECB_CURRENCY_COLUMN].dropna().astype(str).str.upper())
        if quoted - {currency}:
            raise FeedConventionError(
                f"Feed returned rates for {sorted(quoted)} while {currency} was requested"
            )
    if ECB_DENOMINATOR_COLUMN in frame.columns:
        denominators = set(frame[ECB_DENOMINATOR_COLUMN].dropna().astype(str).str.upper())
        if denominators - {base}:
            raise FeedConventionError(
                f"Feed quotes {currency} against {sorted(denominators)} instead of {base}"
            )
    values = pd.to_numeric(frame[ECB_VALUE_COLUMN], errors="coerce").dropna()
    if (values <= 0).any():
        raise FeedConventionError(f"Feed returned non-positive rates for {currency}")


__all__ = [
    "ECB_DATA_API_URL",
    "ECB_DATE_COLUMN",
    "ECB_VALUE_COLUMN",
    "enforce_feed_convention",
    "series_url",
]
