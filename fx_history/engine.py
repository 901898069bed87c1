"""Historical exchange rate engine: cached daily series and conversions."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Mapping

import pandas as pd

from fx_history.config import CacheConnectionInfo, build_cache
from fx_history.currency import BASE_CURRENCY, Currency, foreign_currencies, pair_key
from fx_history.db.base_backend import RateCache
from fx_history.errors import (
    CacheMissError,
    DataIntegrityError,
    DateOutOfRangeError,
    MissingColumnError,
    MissingDateError,
    SourceUnavailableError,
    UnsupportedPairError,
)
from fx_history.ingestion.models import RateObservation
from fx_history.utils.date_range import DateRange, parse_date
from fx_history.utils.logger import get_logger
from fx_history.utils.series import (
    DATE_COLUMN,
    VALUE_COLUMN,
    Extremum,
    expand,
    extreme_date,
    normalise_series,
)

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from fx_history.ingestion.strategy import RateSource

LOGGER = get_logger(__name__)

LEDGER_COLUMNS = ("date", "currency", "value")

DayLike = date | datetime | pd.Timestamp | str


class Lookup(Enum):
    """How a rate between two currencies is resolved."""

    IDENTITY = "identity"
    DIRECT = "direct"
    INVERSE = "inverse"
    TRIANGULATE = "triangulate"


class ExchangeEngine:
    """Daily exchange rates of every foreign currency against the base currency.

    Each pair keeps its raw series (as persisted) and the gap-filled series
    used for lookups. Build one engine at startup with :meth:`init`, share it
    with reporting code, and call :meth:`reload` when fresh rates are wanted.
    """

    __slots__ = (
        "base",
        "cache",
        "source",
        "today",
        "allow_stale",
        "_raw",
        "_expanded",
        "_lookup",
        "_spans",
    )

    def __init__(
        self,
        raw_series: Mapping[Currency | str, pd.DataFrame],
        *,
        cache: RateCache | None = None,
        source: "RateSource | None" = None,
        today: date | None = None,
        allow_stale: bool = False,
    ) -> None:
        """Build an engine from already loaded raw series.

        ``raw_series`` is keyed by pair key (``"USDEUR"``) or by the foreign
        currency alone, in which case the pair is taken against the base
        currency. Every series is expanded up to ``today``.
        """

        self.base = BASE_CURRENCY
        self.cache = cache
        self.source = source
        self.today = today or date.today()
        self.allow_stale = allow_stale
        self._raw: dict[str, pd.DataFrame] = {}
        self._expanded: dict[str, pd.DataFrame] = {}
        self._lookup: dict[str, pd.Series] = {}
        self._spans: dict[str, DateRange] = {}
        for name, series in raw_series.items():
            key = self._key_for(name)
            raw = normalise_series(series)
            expanded = expand(raw, add_today=True, today=self.today)
            self._raw[key] = raw
            self._expanded[key] = expanded
            self._lookup[key] = expanded.set_index(DATE_COLUMN)[VALUE_COLUMN]
            self._spans[key] = DateRange(
                start=extreme_date(expanded, Extremum.MIN),
                end=extreme_date(expanded, Extremum.MAX),
            )

    @classmethod
    def init(
        cls,
        cache: RateCache | CacheConnectionInfo | str | Path | None = None,
        source: "RateSource | None" = None,
        *,
        currencies: Iterable[Currency | str] | None = None,
        today: date | None = None,
        allow_stale: bool = False,
    ) -> "ExchangeEngine":
        """Load, refresh, expand and persist the series of every foreign currency."""

        store = build_cache(cache)
        if source is None:
            from fx_history.ingestion.ecb import ECBRateSource

            source = ECBRateSource()
        current = today or date.today()
        targets = (
            [Currency.parse(currency) for currency in currencies]
            if currencies is not None
            else list(foreign_currencies())
        )

        raw_series: dict[str, pd.DataFrame] = {}
        for currency in targets:
            if currency is BASE_CURRENCY:
                continue
            raw_series[pair_key(currency, BASE_CURRENCY)] = cls._load_or_fetch(
                store, source, currency, current, allow_stale
            )

        engine = cls(
            raw_series, cache=store, source=source, today=current, allow_stale=allow_stale
        )
        engine.save()
        return engine

    @staticmethod
    def _load_or_fetch(
        store: RateCache,
        source: "RateSource",
        currency: Currency,
        today: date,
        allow_stale: bool,
    ) -> pd.DataFrame:
        key = pair_key(currency, BASE_CURRENCY)
        cached: pd.DataFrame | None = None
        try:
            cached = store.load(currency)
        except CacheMissError:
            LOGGER.info("No cached rates for %s; downloading the full history", key)
        except DataIntegrityError as exc:
            LOGGER.warning(
                "Cached %s rates are unusable (%s); downloading the full history", key, exc
            )
        else:
            try:
                return store.refresh(currency, cached, source, today=today)
            except (SourceUnavailableError, DataIntegrityError) as exc:
                LOGGER.warning(
                    "Refreshing %s failed (%s); retrying with a full download", key, exc
                )

        try:
            return source.fetch(currency)
        except SourceUnavailableError:
            if not allow_stale or cached is None or cached.empty:
                raise
            LOGGER.warning(
                "ECB unavailable; using cached %s rates up to %s",
                key,
                extreme_date(cached, Extremum.MAX),
            )
            return cached

    def reload(self, *, today: date | None = None) -> None:
        """Re-read the cache, refresh stale pairs and replace the in-memory series."""

        if self.cache is None or self.source is None:
            raise RuntimeError("reload() requires an engine built with ExchangeEngine.init()")
        fresh = type(self).init(
            self.cache,
            self.source,
            currencies=self.currencies,
            today=today,
            allow_stale=self.allow_stale,
        )
        for slot in self.__slots__:
            setattr(self, slot, getattr(fresh, slot))

    def save(self) -> int:
        """Persist every raw series; returns how many pairs were written."""

        if self.cache is None:
            raise RuntimeError("No cache configured for this engine")
        written = 0
        for key, raw in self._raw.items():
            if self.cache.save(key[:3], raw):
                written += 1
        return written

    @property
    def currencies(self) -> tuple[Currency, ...]:
        """Foreign currencies with a cached series."""

        return tuple(Currency.parse(key[:3]) for key in self._raw)

    def coverage(self, currency: Currency | str) -> DateRange:
        """Return the span of dates answerable for ``currency`` against the base."""

        return self._spans[self._require_key(currency)]

    def raw_series(self, currency: Currency | str) -> pd.DataFrame:
        return self._raw[self._require_key(currency)].copy()

    def expanded_series(self, currency: Currency | str) -> pd.DataFrame:
        return self._expanded[self._require_key(currency)].copy()

    def observations(self, currency: Currency | str) -> list[RateObservation]:
        raw = self._raw[self._require_key(currency)]
        return [
            RateObservation(rate_date=stamp.date(), rate=float(value))
            for stamp, value in zip(raw[DATE_COLUMN], raw[VALUE_COLUMN])
        ]

    def rate(
        self, currency_from: Currency | str, currency_to: Currency | str, day: DayLike
    ) -> float:
        """Return how many ``currency_to`` units one ``currency_from`` unit bought on ``day``."""

        source = Currency.parse(currency_from)
        target = Currency.parse(currency_to)
        when = parse_date(day)
        if self._classify(source, target) is Lookup.TRIANGULATE:
            return self._leg(source, self.base, when) * self._leg(self.base, target, when)
        return self._leg(source, target, when)

    def convert_table(self, currency_to: Currency | str, frame: pd.DataFrame) -> pd.DataFrame:
        """Convert a ledger table (``date``, ``currency``, ``value``) into ``currency_to``.

        Rows keep their order and index; the ``currency`` column is dropped
        since every value is now expressed in ``currency_to``. Any invalid row
        fails the whole conversion and leaves ``frame`` untouched.
        """

        missing = [column for column in LEDGER_COLUMNS if column not in frame.columns]
        if missing:
            raise MissingColumnError(f"Ledger is missing column(s): {', '.join(missing)}")
        target = Currency.parse(currency_to)

        rates: list[float] = []
        for position, (day, code) in enumerate(zip(frame["date"], frame["currency"])):
            if day is None or pd.isna(day):
                raise DataIntegrityError(f"Ledger row {position} has no date")
            if code is None or pd.isna(code):
                raise DataIntegrityError(f"Ledger row {position} has no currency")
            rates.append(self.rate(code, target, day))

        converted = frame.drop(columns=["currency"])
        converted["value"] = pd.to_numeric(frame["value"], errors="raise") * pd.Series(
            rates, index=frame.index, dtype="float64"
        )
        return converted

    def _classify(self, source: Currency, target: Currency) -> Lookup:
        if source is target:
            return Lookup.IDENTITY
        if pair_key(source, target) in self._lookup:
            return Lookup.DIRECT
        if pair_key(target, source) in self._lookup:
            return Lookup.INVERSE
        return Lookup.TRIANGULATE

    def _leg(self, source: Currency, target: Currency, when: date) -> float:
        kind = self._classify(source, target)
        if kind is Lookup.IDENTITY:
            return 1.0
        if kind is Lookup.DIRECT:
            return self._stored_rate(pair_key(source, target), when)
        if kind is Lookup.INVERSE:
            return 1.0 / self._stored_rate(pair_key(target, source), when)
        raise UnsupportedPairError(f"No exchange rate series for {source}/{target}")

    def _stored_rate(self, key: str, when: date) -> float:
        span = self._spans[key]
        if when not in span:
            raise DateOutOfRangeError(key, when, span.start, span.end)
        value = self._lookup[key].get(pd.Timestamp(when))
        if value is None or pd.isna(value):
            raise MissingDateError(f"{key} has no rate for {when.isoformat()}")
        return float(value)

    def _require_key(self, currency: Currency | str) -> str:
        key = self._key_for(currency)
        if key not in self._raw:
            raise UnsupportedPairError(f"No exchange rate series for {key}")
        return key

    @staticmethod
    def _key_for(name: Currency | str) -> str:
        if isinstance(name, Currency):
            foreign, quote = name, BASE_CURRENCY
        else:
            text = str(name).strip().upper()
            if len(text) == 6:
                foreign, quote = Currency.parse(text[:3]), Currency.parse(text[3:])
            else:
                foreign, quote = Currency.parse(text), BASE_CURRENCY
        # Series are stored and cached per (foreign, base) pair only.
        if quote is not BASE_CURRENCY or foreign is BASE_CURRENCY:
            raise UnsupportedPairError(
                f"Only foreign/{BASE_CURRENCY} series are supported, got {foreign}{quote}"
            )
        return pair_key(foreign, quote)


__all__ = ["ExchangeEngine", "Lookup"]
