"""Helpers for locating the on-disk rate cache."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["CACHE_FILE_TEMPLATE", "DEFAULT_CACHE_DIR"]

# Resolved against the working directory at runtime.
DEFAULT_CACHE_DIR: Final[Path] = Path("data")
CACHE_FILE_TEMPLATE: Final[str] = "exchange_rate_{key}.csv"
