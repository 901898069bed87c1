"""Logging utilities for the fx_history package.

Every module logs through a child of the ``fx_history`` logger, so callers
can tune or silence the whole package with a single logger name.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "fx_history"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_configured = False


def _configure_package_logger() -> None:
    global _configured
    if _configured:
        return
    _configured = True
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if package_logger.level == logging.NOTSET:
        package_logger.setLevel(logging.INFO)
    # Applications that configured the root logger keep their own handlers.
    if not logging.getLogger().handlers and not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Return a logger nested under the ``fx_history`` package logger."""

    _configure_package_logger()
    if name != PACKAGE_LOGGER and not name.startswith(f"{PACKAGE_LOGGER}."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "get_logger"]
