"""CLI entry point for populating the exchange rate cache."""

from __future__ import annotations

from fx_history.seeds.populate_rates import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    main()
