"""CLI entry point for converting a ledger CSV."""

from __future__ import annotations

from fx_history.seeds.convert_ledger import main

if __name__ == "__main__":  # pragma: no cover - thin wrapper
    main()
