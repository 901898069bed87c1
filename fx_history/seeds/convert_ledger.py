"""CLI + helpers for converting a ledger CSV into a single currency."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from fx_history.currency import Currency
from fx_history.db import DEFAULT_CACHE_DIR
from fx_history.engine import ExchangeEngine
from fx_history.ingestion.ledger_csv import LedgerCSVExporter, LedgerCSVParser
from fx_history.ingestion.strategy import RateSource
from fx_history.utils.logger import get_logger

LOGGER = get_logger(__name__)

__all__ = ["convert_ledger", "parse_args", "main"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("input", help="Ledger CSV with date,currency,value columns")
    parser.add_argument("output", help="Where to write the converted ledger")
    parser.add_argument("--to", dest="currency_to", required=True, help="Target currency code")
    parser.add_argument(
        "--cache",
        dest="cache",
        default=str(DEFAULT_CACHE_DIR),
        help="Cache directory (CSV) or database URL",
    )
    return parser.parse_args(argv)


def convert_ledger(
    input_path: str | Path,
    output_path: str | Path,
    currency_to: Currency | str,
    *,
    engine: ExchangeEngine | None = None,
    cache: str | Path | None = None,
    source: RateSource | None = None,
) -> Path:
    """Convert every row of ``input_path`` into ``currency_to`` and write ``output_path``."""

    ledger = LedgerCSVParser().parse(input_path)
    # Only the currencies the ledger uses need to be loaded.
    needed = {Currency.parse(code) for code in ledger["currency"].dropna().unique()}
    needed.add(Currency.parse(currency_to))
    rates = engine or ExchangeEngine.init(
        cache, source, currencies=sorted(needed, key=str)
    )
    converted = rates.convert_table(currency_to, ledger)
    written = LedgerCSVExporter().write(converted, output_path)
    LOGGER.info("Converted %s rows into %s (%s)", len(converted), currency_to, written)
    return written


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    convert_ledger(args.input, args.output, args.currency_to, cache=args.cache)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
