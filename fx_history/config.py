"""Cache configuration: which backend to use and where it lives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse

from fx_history.db import DEFAULT_CACHE_DIR
from fx_history.db.base_backend import RateCache

__all__ = ["CacheBackend", "CacheConnectionInfo", "build_cache"]


class CacheBackend(str, Enum):
    """Supported cache storage engines."""

    CSV = "csv"
    SQL = "sql"

    @classmethod
    def resolve_backend_and_scheme(cls, scheme: str) -> tuple["CacheBackend", str]:
        """Return the backend and canonical scheme for a URL scheme."""

        scheme_lower = (scheme or "").lower()
        base_scheme, _, driver = scheme_lower.partition("+")
        if base_scheme in {"", "file", "csv"}:
            return cls.CSV, "file"
        if base_scheme in {"postgresql", "postgres"}:
            return cls.SQL, f"postgresql+{driver}" if driver else "postgresql"
        if base_scheme in {"sqlite", "mysql"}:
            # Preserve optional driver hints such as ``mysql+pymysql``.
            return cls.SQL, scheme_lower
        raise ValueError(
            "Unsupported cache backend. Use a directory path (CSV) or a SQLite, "
            "Postgres or MySQL URL."
        )

    @classmethod
    def from_scheme(cls, scheme: str) -> "CacheBackend":
        backend, _ = cls.resolve_backend_and_scheme(scheme)
        return backend


@dataclass(slots=True)
class CacheConnectionInfo:
    """Describes where the rate cache is persisted."""

    backend: CacheBackend
    url: str
    directory: Path | None = None

    @classmethod
    def from_url(cls, url: str | Path) -> "CacheConnectionInfo":
        """Parse a directory path or a database URL."""

        if isinstance(url, Path):
            return cls(backend=CacheBackend.CSV, url=str(url), directory=url)
        raw = url.strip()
        if not raw:
            raise ValueError("Cache location must not be empty")
        parsed = urlparse(raw)
        # A single letter scheme is a Windows drive, not a URL.
        scheme = parsed.scheme if len(parsed.scheme) > 1 else ""
        backend, canonical_scheme = CacheBackend.resolve_backend_and_scheme(scheme)
        if backend is CacheBackend.CSV:
            directory = Path(parsed.path if scheme else raw)
            return cls(backend=backend, url=raw, directory=directory)
        if parsed.scheme != canonical_scheme:
            raw = canonical_scheme + raw[len(parsed.scheme) :]
        return cls(backend=backend, url=raw)

    @classmethod
    def default(cls) -> "CacheConnectionInfo":
        return cls(
            backend=CacheBackend.CSV, url=str(DEFAULT_CACHE_DIR), directory=DEFAULT_CACHE_DIR
        )

    @property
    def is_csv(self) -> bool:
        return self.backend is CacheBackend.CSV

    def build(self) -> RateCache:
        """Instantiate the configured cache backend."""

        if self.is_csv:
            from fx_history.db.csv_backend import CSVRateCache

            return CSVRateCache(self.directory or DEFAULT_CACHE_DIR)
        from fx_history.db.relational_backend import SQLRateCache

        return SQLRateCache(self.url)


def build_cache(cache: RateCache | CacheConnectionInfo | str | Path | None = None) -> RateCache:
    """Return a :class:`RateCache` for a cache instance, connection info, path or URL."""

    if isinstance(cache, RateCache):
        return cache
    if isinstance(cache, CacheConnectionInfo):
        return cache.build()
    if cache is None:
        return CacheConnectionInfo.default().build()
    return CacheConnectionInfo.from_url(cache).build()
