"""Tests for the ECB data API client (HTTP is stubbed)."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest
import requests

from fx_history.currency import Currency
from fx_history.errors import FeedConventionError, SourceUnavailableError
from fx_history.ingestion.ecb import ECBRateSource

USD_CSV = """KEY,FREQ,CURRENCY,CURRENCY_DENOM,EXR_TYPE,EXR_SUFFIX,TIME_PERIOD,OBS_VALUE
EXR.D.USD.EUR.SP00.A,D,USD,EUR,SP00,A,2024-01-02,1.0956
EXR.D.USD.EUR.SP00.A,D,USD,EUR,SP00,A,2024-01-03,1.0919
EXR.D.USD.EUR.SP00.A,D,USD,EUR,SP00,A,2024-01-05,1.0921
"""


class _FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "") -> None:
        self.status_code = status_code
        self.text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class _FakeSession:
    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, dict[str, str], float]] = []

    def get(self, url: str, params: dict[str, str] | None = None, timeout: float | None = None):
        self.calls.append((url, dict(params or {}), timeout))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        return None


def _source(session: _FakeSession, **kwargs: Any) -> ECBRateSource:
    return ECBRateSource(session=session, backoff_seconds=0, **kwargs)  # type: ignore[arg-type]


def test_fetch_inverts_feed_values_into_base_terms() -> None:
    session = _FakeSession(_FakeResponse(text=USD_CSV))

    series = _source(session).fetch(Currency.USD)

    assert list(series.columns) == ["date", "value"]
    assert [stamp.date() for stamp in series["date"]] == [
        date(2024, 1, 2),
        date(2024, 1, 3),
        date(2024, 1, 5),
    ]
    assert series["value"].tolist() == pytest.approx([1 / 1.0956, 1 / 1.0919, 1 / 1.0921])


def test_fetch_builds_series_request() -> None:
    session = _FakeSession(_FakeResponse(text=USD_CSV), _FakeResponse(text=USD_CSV))
    source = _source(session, timeout=12.5)

    source.fetch("usd")
    source.fetch(Currency.USD, from_date=date(2024, 1, 2))

    full_url, full_params, timeout = session.calls[0]
    assert full_url.endswith("/EXR/D.USD.EUR.SP00.A")
    assert full_params == {"format": "csvdata", "detail": "dataonly"}
    assert timeout == 12.5
    _, incremental_params, _ = session.calls[1]
    assert incremental_params["startPeriod"] == "2024-01-02"


def test_fetch_treats_not_found_as_empty_window() -> None:
    session = _FakeSession(_FakeResponse(status_code=404, text="No results found."))

    series = _source(session).fetch(Currency.GBP, from_date=date(2024, 1, 6))

    assert series.empty
    assert list(series.columns) == ["date", "value"]


def test_fetch_retries_transient_failures() -> None:
    session = _FakeSession(requests.ConnectionError("reset"), _FakeResponse(text=USD_CSV))

    series = _source(session, max_attempts=2).fetch(Currency.USD)

    assert len(series) == 3
    assert len(session.calls) == 2


def test_fetch_retries_server_errors() -> None:
    session = _FakeSession(_FakeResponse(status_code=503), _FakeResponse(text=USD_CSV))

    series = _source(session, max_attempts=3).fetch(Currency.USD)

    assert len(series) == 3
    assert len(session.calls) == 2


def test_fetch_raises_source_unavailable_after_retries() -> None:
    session = _FakeSession(requests.Timeout("slow"), requests.Timeout("slow"))

    with pytest.raises(SourceUnavailableError):
        _source(session, max_attempts=2).fetch(Currency.USD)
    assert len(session.calls) == 2


def test_fetch_does_not_retry_client_errors() -> None:
    session = _FakeSession(_FakeResponse(status_code=400), _FakeResponse(text=USD_CSV))

    with pytest.raises(SourceUnavailableError):
        _source(session, max_attempts=3).fetch(Currency.USD)
    assert len(session.calls) == 1


def test_fetch_rejects_unexpected_body() -> None:
    session = _FakeSession(_FakeResponse(text="<html><body>maintenance</body></html>\n"))

    with pytest.raises(SourceUnavailableError):
        _source(session).fetch(Currency.USD)


def test_fetch_rejects_wrong_denominator() -> None:
    body = USD_CSV.replace(",USD,EUR,", ",USD,GBP,")
    session = _FakeSession(_FakeResponse(text=body))

    with pytest.raises(FeedConventionError):
        _source(session).fetch(Currency.USD)


def test_fetch_rejects_non_positive_rates() -> None:
    body = USD_CSV.replace("1.0919", "-1.0919")
    session = _FakeSession(_FakeResponse(text=body))

    with pytest.raises(FeedConventionError):
        _source(session).fetch(Currency.USD)


def test_fetch_refuses_base_currency() -> None:
    with pytest.raises(ValueError):
        _source(_FakeSession()).fetch(Currency.EUR)


def test_source_requires_at_least_one_attempt() -> None:
    with pytest.raises(ValueError):
        ECBRateSource(session=_FakeSession(), max_attempts=0)  # type: ignore[arg-type]
