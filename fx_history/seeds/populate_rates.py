"""CLI + helpers for populating (or refreshing) the exchange rate cache."""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

from fx_history.currency import Currency
from fx_history.db import DEFAULT_CACHE_DIR
from fx_history.db.base_backend import RateCache
from fx_history.engine import ExchangeEngine
from fx_history.ingestion.ecb import ECBRateSource
from fx_history.ingestion.strategy import RateSource
from fx_history.utils.date_range import parse_date
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)

__all__ = ["populate_rates", "parse_args", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--cache",
        dest="cache",
        default=str(DEFAULT_CACHE_DIR),
        help="Cache directory (CSV) or database URL",
    )
    parser.add_argument(
        "--currency",
        dest="currencies",
        action="append",
        help="Currency to refresh (repeatable); defaults to every supported currency",
    )
    parser.add_argument("--today", dest="today", help="Override the current date (YYYY-MM-DD)")
    parser.add_argument(
        "--allow-stale",
        dest="allow_stale",
        action="store_true",
        help="Keep cached rates when the ECB cannot be reached",
    )
    parser.add_argument("--timeout", dest="timeout", type=float, default=30.0)
    return parser.parse_args(argv)


def populate_rates(
    cache: RateCache | str | Path | None = None,
    *,
    currencies: Iterable[Currency | str] | None = None,
    source: RateSource | None = None,
    today: date | None = None,
    allow_stale: bool = False,
) -> ExchangeEngine:
    """Bring every cached series up to date and persist it."""

    engine = ExchangeEngine.init(
        cache,
        source,
        currencies=currencies,
        today=today,
        allow_stale=allow_stale,
    )
    for currency in engine.currencies:
        span = engine.coverage(currency)
        LOGGER.info("%s/%s covered from %s to %s", currency, engine.base, span.start, span.end)
    return engine


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    populate_rates(
        args.cache,
        currencies=args.currencies,
        source=ECBRateSource(timeout=args.timeout),
        today=parse_date(args.today) if args.today else None,
        allow_stale=args.allow_stale,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
