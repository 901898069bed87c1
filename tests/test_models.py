from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from fx_history.currency import Currency, foreign_currencies, pair_key
from fx_history.errors import FeedConventionError, UnknownCurrencyError
from fx_history.ingestion.models import RateObservation
from fx_history.utils.ecb import enforce_feed_convention, series_url


def test_observation_is_immutable() -> None:
    observation = RateObservation(rate_date=date(2024, 1, 2), rate=0.9)

    with pytest.raises(AttributeError):
        observation.rate = 1.0  # type: ignore[misc]


def test_currency_parsing_and_pair_keys() -> None:
    assert Currency.parse(" usd ") is Currency.USD
    assert pair_key("gbp", Currency.EUR) == "GBPEUR"
    assert Currency.EUR not in foreign_currencies()
    with pytest.raises(UnknownCurrencyError):
        Currency.parse("ABC")
    with pytest.raises(UnknownCurrencyError):
        Currency.parse(42)  # type: ignore[arg-type]


def test_series_url_uses_daily_reference_key() -> None:
    url = series_url("JPY", "EUR", base_url="https://example.test/data/")

    assert url == "https://example.test/data/EXR/D.JPY.EUR.SP00.A"


def test_feed_convention_accepts_matching_frame() -> None:
    frame = pd.DataFrame(
        {"CURRENCY": ["USD"], "CURRENCY_DENOM": ["EUR"], "OBS_VALUE": [1.09]}
    )

    enforce_feed_convention(frame, "USD", "EUR")


def test_feed_convention_rejects_other_currency() -> None:
    frame = pd.DataFrame(
        {"CURRENCY": ["USD", "GBP"], "CURRENCY_DENOM": ["EUR", "EUR"], "OBS_VALUE": [1.09, 0.86]}
    )

    with pytest.raises(FeedConventionError):
        enforce_feed_convention(frame, "USD", "EUR")
