"""Daily rate series helpers: normalisation, merging and gap filling.

A series is a :class:`pandas.DataFrame` with a ``date`` column (midnight
``datetime64``) and a ``value`` column (``float64``) holding how many units of
the base currency one unit of the foreign currency buys on that day.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

import pandas as pd

from fx_history.errors import (
    DataIntegrityError,
    EmptyColumnError,
    EmptySeriesError,
    MissingColumnError,
)

DATE_COLUMN = "date"
VALUE_COLUMN = "value"
SERIES_COLUMNS = (DATE_COLUMN, VALUE_COLUMN)


class Extremum(Enum):
    """Which end of a series' date span to report."""

    MIN = "min"
    MAX = "max"


def empty_series() -> pd.DataFrame:
    """Return a series with the expected columns and no rows."""

    return pd.DataFrame(
        {
            DATE_COLUMN: pd.Series(dtype="datetime64[ns]"),
            VALUE_COLUMN: pd.Series(dtype="float64"),
        }
    )


def _coerce(frame: pd.DataFrame) -> pd.DataFrame:
    missing = [column for column in SERIES_COLUMNS if column not in frame.columns]
    if missing:
        raise MissingColumnError(f"Series is missing column(s): {', '.join(missing)}")
    working = frame.loc[:, list(SERIES_COLUMNS)].copy()
    working[DATE_COLUMN] = (
        pd.to_datetime(working[DATE_COLUMN], errors="coerce")
        .dt.normalize()
        .astype("datetime64[ns]")
    )
    working[VALUE_COLUMN] = pd.to_numeric(working[VALUE_COLUMN], errors="coerce").astype(
        "float64"
    )
    return working


def normalise_series(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a clean raw series: typed, sorted, no nulls, one row per date.

    When a date appears more than once the later row wins.
    """

    working = _coerce(frame).dropna(subset=list(SERIES_COLUMNS))
    working = working.sort_values(DATE_COLUMN, kind="stable")
    working = working.drop_duplicates(subset=DATE_COLUMN, keep="last")
    return working.reset_index(drop=True)


def merge_series(cached: pd.DataFrame, fresh: pd.DataFrame) -> pd.DataFrame:
    """Append ``fresh`` observations to ``cached`` and normalise the result."""

    frames = [_coerce(frame) for frame in (cached, fresh) if not frame.empty]
    if not frames:
        return empty_series()
    return normalise_series(pd.concat(frames, ignore_index=True))


def extreme_date(series: pd.DataFrame, which: Extremum) -> date:
    """Return the earliest or latest date present in ``series``."""

    if DATE_COLUMN not in series.columns:
        raise MissingColumnError(f"Series is missing column(s): {DATE_COLUMN}")
    dates = pd.to_datetime(series[DATE_COLUMN], errors="coerce").dropna()
    if dates.empty:
        raise EmptyColumnError("Column is empty or contains no valid dates!")
    stamp = dates.min() if which is Extremum.MIN else dates.max()
    return stamp.date()


def is_stale(series: pd.DataFrame, today: date | None = None) -> bool:
    """Return True when the series ends strictly before ``today``."""

    return extreme_date(series, Extremum.MAX) < (today or date.today())


def expand(raw: pd.DataFrame, add_today: bool, *, today: date | None = None) -> pd.DataFrame:
    """Resample ``raw`` to one row per calendar day, forward-filling gaps.

    With ``add_today`` a null row dated ``today`` is appended first when the
    series ends before it, so the result always covers the current day.
    """

    frame = _coerce(raw).dropna(subset=[DATE_COLUMN])
    if frame.empty:
        raise EmptySeriesError("Cannot expand a series without any dated rows")

    if add_today:
        current = pd.Timestamp(today or date.today())
        if frame[DATE_COLUMN].max() < current:
            extra = pd.DataFrame({DATE_COLUMN: [current], VALUE_COLUMN: [float("nan")]})
            extra[DATE_COLUMN] = extra[DATE_COLUMN].astype("datetime64[ns]")
            frame = pd.concat([frame, extra], ignore_index=True)

    # ``last`` skips nulls, so a duplicated date keeps its observed value.
    daily = frame.groupby(DATE_COLUMN, sort=True)[VALUE_COLUMN].last().asfreq("D")
    if pd.isna(daily.iloc[0]):
        raise DataIntegrityError(
            f"First row ({daily.index[0].date().isoformat()}) has no rate to carry forward"
        )
    daily = daily.ffill()

    result = daily.rename_axis(DATE_COLUMN).reset_index()
    result[DATE_COLUMN] = result[DATE_COLUMN].astype("datetime64[ns]")
    result[VALUE_COLUMN] = result[VALUE_COLUMN].astype("float64")
    return result


__all__ = [
    "DATE_COLUMN",
    "SERIES_COLUMNS",
    "VALUE_COLUMN",
    "Extremum",
    "empty_series",
    "expand",
    "extreme_date",
    "is_stale",
    "merge_series",
    "normalise_series",
]
