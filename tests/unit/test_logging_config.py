"""Unit tests for logging setup."""

import logging
import pytest
from fixed_options.utils.logging_config import PACKAGE_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def restore_logging():
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    root = logging.getLogger()
    root_level = root.level
    root_handlers = root.handlers[:]
    package_level = package_logger.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    package_logger.setLevel(package_level)


def test_default_is_warning(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    configure_logging()
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING


def test_verbose_wins_over_quiet():
    configure_logging(verbose=True, quiet=True)
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG


def test_quiet():
    configure_logging(quiet=True)
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR


def test_explicit_level_beats_environment(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    configure_logging(level="info")
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO


def test_environment_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    configure_logging()
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG


def test_unknown_level_falls_back_to_warning():
    configure_logging(level="chatty")
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING
