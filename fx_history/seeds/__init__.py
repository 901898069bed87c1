"""Command line helpers for :mod:`fx_history`.

The callable helpers are re-exported as :func:`fx_history.populate_rates` and
:func:`fx_history.convert_ledger`.
"""
