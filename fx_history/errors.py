"""Exception hierarchy shared across fx_history."""

from __future__ import annotations

from datetime import date


class FxHistoryError(Exception):
    """Base class for every error raised by the package."""


class SourceUnavailableError(FxHistoryError):
    """The remote rate feed could not be reached or its response was unreadable."""


class CacheMissError(FxHistoryError, LookupError):
    """No series has been persisted yet for the requested currency pair."""


class DataIntegrityError(FxHistoryError, ValueError):
    """A cached series or feed response is malformed."""


class EmptySeriesError(DataIntegrityError):
    """A series has no rows (or no valid dates) where at least one is required."""


class EmptyColumnError(DataIntegrityError):
    """A column that must carry values contains none."""


class MissingColumnError(DataIntegrityError):
    """A table lacks a column the operation depends on."""


class UnknownCurrencyError(DataIntegrityError):
    """A currency code is not part of the supported set."""


class FeedConventionError(DataIntegrityError):
    """The feed quotes rates in a different unit convention than expected."""


class DateOutOfRangeError(FxHistoryError, ValueError):
    """A query date lies outside the span covered by a cached series."""

    def __init__(self, pair: str, requested: date, start: date, end: date) -> None:
        self.pair = pair
        self.requested = requested
        self.start = start
        self.end = end
        if requested < start:
            detail = "too far in the past"
        else:
            detail = "too near the present"
        super().__init__(
            f"{pair} rate for {requested.isoformat()} is {detail}; "
            f"cached span is {start.isoformat()} to {end.isoformat()}"
        )


class MissingDateError(FxHistoryError, LookupError):
    """A date inside the cached span has no row in an expanded series."""


class UnsupportedPairError(FxHistoryError, LookupError):
    """Neither the pair nor its inverse is available in the engine."""


# Names used by the error taxonomy in the design documentation.
TransientSourceError = SourceUnavailableError
NotFoundError = CacheMissError
PreconditionViolation = DateOutOfRangeError

__all__ = [
    "CacheMissError",
    "DataIntegrityError",
    "DateOutOfRangeError",
    "EmptyColumnError",
    "EmptySeriesError",
    "FeedConventionError",
    "FxHistoryError",
    "MissingColumnError",
    "MissingDateError",
    "NotFoundError",
    "PreconditionViolation",
    "SourceUnavailableError",
    "TransientSourceError",
    "UnknownCurrencyError",
    "UnsupportedPairError",
]
