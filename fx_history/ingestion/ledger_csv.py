"""CSV helpers for reading ledgers and writing converted ledgers."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

import pandas as pd

LEDGER_HEADER = ("date", "currency", "value")


def _canonical_column(column: object) -> object:
    cleaned = str(column).strip().lower()
    return cleaned if cleaned in LEDGER_HEADER else column


class LedgerCSVParser:
    """Parse ledger CSV files with ``date``, ``currency`` and ``value`` columns."""

    def __init__(self, *, date_format: str = "%Y-%m-%d") -> None:
        self.date_format = date_format

    def parse(self, csv_path: str | Path) -> pd.DataFrame:
        path = Path(csv_path)
        if not path.exists():
            raise FileNotFoundError(path)

        with path.open("r", newline="", encoding="utf-8") as handle:
            self._validate_header(next(csv.reader(handle), None))

        frame = pd.read_csv(path)
        frame = frame.rename(columns=_canonical_column)
        frame["date"] = pd.to_datetime(frame["date"], format=self.date_format, errors="coerce")
        frame["currency"] = frame["currency"].astype("string").str.strip().str.upper()
        frame["value"] = pd.to_numeric(frame["value"], errors="coerce")
        return frame

    @staticmethod
    def _validate_header(fieldnames: Iterable[str] | None) -> None:
        if not fieldnames:
            raise ValueError("CSV file does not contain a header row")
        normalized = {field.strip().lower() for field in fieldnames}
        missing = [column for column in LEDGER_HEADER if column not in normalized]
        if missing:
            raise ValueError(f"Ledger CSV is missing column(s): {', '.join(missing)}")


class LedgerCSVExporter:
    """Write converted ledgers (``date``, ``value`` and any extra columns)."""

    def __init__(self, *, date_format: str = "%Y-%m-%d") -> None:
        self.date_format = date_format

    def write(self, frame: pd.DataFrame, csv_path: str | Path) -> Path:
        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        working = frame.copy()
        if "date" in working.columns:
            working["date"] = pd.to_datetime(working["date"]).dt.strftime(self.date_format)
        working.to_csv(path, index=False, encoding="utf-8")
        return path


__all__ = ["LEDGER_HEADER", "LedgerCSVExporter", "LedgerCSVParser"]
