"""SQLAlchemy powered cache backend (SQLite, Postgres, MySQL)."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import pandas as pd
from sqlalchemy import Date, Float, String, bindparam, create_engine, text

from fx_history.currency import BASE_CURRENCY, Currency, pair_key
from fx_history.db.base_backend import RateCache
from fx_history.errors import CacheMissError
from fx_history.ingestion.models import RateObservation
from fx_history.utils.logger import get_logger
from fx_history.utils.series import DATE_COLUMN, VALUE_COLUMN, normalise_series

if TYPE_CHECKING:  # pragma: no cover - type checker helper
    from sqlalchemy.engine import Engine
else:  # pragma: no cover - fallback type used at runtime
    Engine = Any

LOGGER = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS exchange_rates (
    pair_key VARCHAR(6) NOT NULL,
    rate_date DATE NOT NULL,
    rate DOUBLE PRECISION NOT NULL,
    PRIMARY KEY(pair_key, rate_date)
);
"""

SELECT_SQL = (
    "SELECT rate_date, rate FROM exchange_rates WHERE pair_key = :pair_key ORDER BY rate_date"
)
DELETE_SQL = "DELETE FROM exchange_rates WHERE pair_key = :pair_key"
INSERT_SQL = """
INSERT INTO exchange_rates(pair_key, rate_date, rate)
VALUES(:pair_key, :rate_date, :rate)
"""


class SQLRateCache(RateCache):
    """Cache backend storing every pair in a single ``exchange_rates`` table."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None
        self._schema_ready = False

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True)
        return self._engine_instance

    def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        with self._get_engine().begin() as connection:
            LOGGER.info("Ensuring exchange_rates schema exists")
            connection.execute(text(SCHEMA_SQL))
        self._schema_ready = True

    def load(self, currency: Currency | str) -> pd.DataFrame:
        key = pair_key(currency, BASE_CURRENCY)
        observations = self.fetch_observations(key)
        if not observations:
            raise CacheMissError(f"No cached rates for {key} in {self.url}")
        frame = pd.DataFrame(
            {
                DATE_COLUMN: [row.rate_date for row in observations],
                VALUE_COLUMN: [row.rate for row in observations],
            }
        )
        return normalise_series(frame)

    def fetch_observations(self, key: str) -> list[RateObservation]:
        """Return the stored observations of ``key`` ordered by date."""

        self.ensure_schema()
        with self._get_engine().connect() as connection:
            query = text(SELECT_SQL).columns(rate_date=Date, rate=Float)
            rows = connection.execute(query, {"pair_key": key})
            return [
                RateObservation(
                    rate_date=_normalise_rate_date(row._mapping["rate_date"]),
                    rate=float(row._mapping["rate"]),
                )
                for row in rows
            ]

    def _write(self, key: str, series: pd.DataFrame) -> None:
        self.ensure_schema()
        params = [
            {"pair_key": key, "rate_date": stamp.date(), "rate": float(value)}
            for stamp, value in zip(series[DATE_COLUMN], series[VALUE_COLUMN])
        ]
        with self._get_engine().begin() as connection:
            connection.execute(text(DELETE_SQL), {"pair_key": key})
            insert = text(INSERT_SQL).bindparams(
                bindparam("pair_key", type_=String),
                bindparam("rate_date", type_=Date),
                bindparam("rate", type_=Float),
            )
            connection.execute(insert, params)

    def close(self) -> None:  # pragma: no cover - trivial resource cleanup
        if self._engine_instance is not None:
            self._engine_instance.dispose()


def _normalise_rate_date(value: object) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    return date.fromisoformat(str(value))


__all__ = ["SQLRateCache"]
