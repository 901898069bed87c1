"""Supported currencies and currency pair keys."""

from __future__ import annotations

from enum import Enum

from fx_history.errors import UnknownCurrencyError


class Currency(str, Enum):
    """ECB reference currencies handled by the engine."""

    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    CHF = "CHF"
    JPY = "JPY"
    CAD = "CAD"
    AUD = "AUD"
    SEK = "SEK"
    NOK = "NOK"
    DKK = "DKK"
    PLN = "PLN"
    CZK = "CZK"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "Currency | str") -> "Currency":
        """Return the enum member for ``value`` (case-insensitive code)."""

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnknownCurrencyError(f"Currency code must be a string, got {value!r}")
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            raise UnknownCurrencyError(f"Unsupported currency: {value!r}") from exc


BASE_CURRENCY = Currency.EUR


def pair_key(currency_from: Currency | str, currency_to: Currency | str) -> str:
    """Return the cache key of a currency pair, e.g. ``USDEUR``."""

    return f"{Currency.parse(currency_from)}{Currency.parse(currency_to)}"


def foreign_currencies() -> tuple[Currency, ...]:
    """Every supported currency except the base currency."""

    return tuple(currency for currency in Currency if currency is not BASE_CURRENCY)


__all__ = ["BASE_CURRENCY", "Currency", "foreign_currencies", "pair_key"]
