from __future__ import annotations

import logging

import pytest

from fx_history.utils.logger import PACKAGE_LOGGER, get_logger


def test_module_loggers_share_the_package_logger() -> None:
    logger = get_logger("fx_history.engine")

    assert logger.name == "fx_history.engine"
    assert logger.parent is logging.getLogger(PACKAGE_LOGGER)


def test_foreign_names_are_nested_under_the_package() -> None:
    assert get_logger("ledger").name == "fx_history.ledger"
    assert get_logger().name == PACKAGE_LOGGER


def test_package_logger_defaults_to_info() -> None:
    get_logger("fx_history.db")

    assert logging.getLogger(PACKAGE_LOGGER).getEffectiveLevel() <= logging.INFO


def test_engine_records_reach_package_logger(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
        get_logger("fx_history.engine").info("loaded %s", "USDEUR")

    assert [record.name for record in caplog.records] == ["fx_history.engine"]
    assert caplog.records[0].getMessage() == "loaded USDEUR"
