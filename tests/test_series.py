"""Tests for gap filling and series helpers."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from fx_history.errors import (
    DataIntegrityError,
    EmptyColumnError,
    EmptySeriesError,
    MissingColumnError,
)
from fx_history.utils.series import (
    Extremum,
    empty_series,
    expand,
    extreme_date,
    is_stale,
    merge_series,
    normalise_series,
)


def _series(rows: list[tuple[date, float | None]]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "date": [pd.Timestamp(day) for day, _ in rows],
            "value": [value for _, value in rows],
        }
    )


def _dates(frame: pd.DataFrame) -> list[date]:
    return [stamp.date() for stamp in frame["date"]]


def test_expand_forward_fills_missing_days() -> None:
    raw = _series([(date(2024, 1, 1), 1.10), (date(2024, 1, 5), 1.20)])

    expanded = expand(raw, add_today=False)

    assert _dates(expanded) == [date(2024, 1, day) for day in range(1, 6)]
    assert expanded["value"].tolist() == [1.10, 1.10, 1.10, 1.10, 1.20]


def test_expand_covers_every_calendar_day_once() -> None:
    raw = _series(
        [
            (date(2024, 2, 27), 1.0),
            (date(2024, 3, 1), 1.1),
            (date(2024, 3, 4), 1.2),
            (date(2024, 3, 15), 1.3),
        ]
    )

    expanded = expand(raw, add_today=False)

    assert len(expanded) == (date(2024, 3, 15) - date(2024, 2, 27)).days + 1
    assert expanded["date"].is_unique
    assert expanded["date"].diff().dropna().eq(pd.Timedelta(days=1)).all()
    assert expanded["value"].notna().all()


def test_expand_preserves_observed_rows() -> None:
    raw = _series([(date(2024, 1, 1), 1.0), (date(2024, 1, 3), 3.0), (date(2024, 1, 4), 4.0)])

    expanded = expand(raw, add_today=False).set_index("date")["value"]

    assert expanded[pd.Timestamp(2024, 1, 3)] == 3.0
    assert expanded[pd.Timestamp(2024, 1, 4)] == 4.0


def test_expand_is_idempotent_without_today() -> None:
    raw = _series([(date(2024, 1, 1), 1.10), (date(2024, 1, 4), 1.15), (date(2024, 1, 9), 1.2)])

    once = expand(raw, add_today=False)
    twice = expand(once, add_today=False)

    pd.testing.assert_frame_equal(once, twice)


def test_expand_adds_today_and_carries_last_rate() -> None:
    raw = _series([(date(2024, 1, 1), 1.10), (date(2024, 1, 3), 1.30)])

    expanded = expand(raw, add_today=True, today=date(2024, 1, 6))

    assert _dates(expanded)[-1] == date(2024, 1, 6)
    assert expanded["value"].tolist() == [1.10, 1.10, 1.30, 1.30, 1.30, 1.30]


def test_expand_with_today_twice_equals_once() -> None:
    raw = _series([(date(2024, 1, 1), 1.10), (date(2024, 1, 3), 1.30)])
    today = date(2024, 1, 6)

    once = expand(raw, add_today=True, today=today)
    twice = expand(once, add_today=True, today=today)

    pd.testing.assert_frame_equal(once, twice)


def test_expand_does_not_add_today_when_series_is_current() -> None:
    raw = _series([(date(2024, 1, 1), 1.10), (date(2024, 1, 3), 1.30)])

    expanded = expand(raw, add_today=True, today=date(2024, 1, 3))

    assert _dates(expanded)[-1] == date(2024, 1, 3)
    assert len(expanded) == 3


def test_expand_keeps_observed_value_for_duplicated_dates() -> None:
    raw = _series([(date(2024, 1, 1), 1.0), (date(2024, 1, 2), 2.0), (date(2024, 1, 2), 2.5)])

    expanded = expand(raw, add_today=False)

    assert expanded["value"].tolist() == [1.0, 2.5]


def test_expand_rejects_empty_series() -> None:
    with pytest.raises(EmptySeriesError):
        expand(empty_series(), add_today=True, today=date(2024, 1, 1))


def test_expand_rejects_series_without_valid_dates() -> None:
    raw = pd.DataFrame({"date": [None, None], "value": [1.0, 2.0]})

    with pytest.raises(EmptySeriesError):
        expand(raw, add_today=False)


def test_expand_rejects_leading_null_rate() -> None:
    raw = _series([(date(2024, 1, 1), None), (date(2024, 1, 2), 1.0)])

    with pytest.raises(DataIntegrityError):
        expand(raw, add_today=False)


def test_expand_requires_series_columns() -> None:
    with pytest.raises(MissingColumnError):
        expand(pd.DataFrame({"date": [pd.Timestamp(2024, 1, 1)]}), add_today=False)


def test_extreme_date_returns_min_and_max() -> None:
    raw = _series([(date(2024, 1, 5), 1.0), (date(2024, 1, 1), 1.1), (date(2024, 1, 3), 1.2)])

    assert extreme_date(raw, Extremum.MIN) == date(2024, 1, 1)
    assert extreme_date(raw, Extremum.MAX) == date(2024, 1, 5)


def test_extreme_date_rejects_empty_column() -> None:
    with pytest.raises(EmptyColumnError):
        extreme_date(empty_series(), Extremum.MAX)


def test_extreme_date_requires_date_column() -> None:
    with pytest.raises(MissingColumnError):
        extreme_date(pd.DataFrame({"value": [1.0]}), Extremum.MIN)


def test_is_stale_compares_against_today() -> None:
    raw = _series([(date(2024, 1, 1), 1.0), (date(2024, 1, 5), 1.1)])

    assert is_stale(raw, date(2024, 1, 6))
    assert not is_stale(raw, date(2024, 1, 5))
    assert not is_stale(raw, date(2024, 1, 4))


def test_normalise_series_sorts_and_drops_nulls() -> None:
    raw = pd.DataFrame(
        {
            "date": ["2024-01-03", "2024-01-01", None, "2024-01-02"],
            "value": [3.0, 1.0, 9.0, None],
        }
    )

    clean = normalise_series(raw)

    assert _dates(clean) == [date(2024, 1, 1), date(2024, 1, 3)]
    assert clean["value"].tolist() == [1.0, 3.0]


def test_merge_series_prefers_fresh_value_for_repeated_date() -> None:
    cached = _series([(date(2024, 1, 1), 1.0), (date(2024, 1, 2), 2.0)])
    fresh = _series([(date(2024, 1, 2), 2.5), (date(2024, 1, 3), 3.0)])

    merged = merge_series(cached, fresh)

    assert _dates(merged) == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
    assert merged["value"].tolist() == [1.0, 2.5, 3.0]


def test_merge_series_with_empty_fetch_keeps_cached_rows() -> None:
    cached = _series([(date(2024, 1, 1), 1.0), (date(2024, 1, 2), 2.0)])

    merged = merge_series(cached, empty_series())

    pd.testing.assert_frame_equal(merged, normalise_series(cached))
