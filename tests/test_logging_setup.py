"""Tests for CLI logging configuration."""

import logging

from rich.logging import RichHandler

from vibecheck.logging_setup import configure_logging


def test_configure_logging_levels_and_single_handler():
    name = "vibecheck-test-logger"
    log = configure_logging(verbose=False, logger_name=name)
    assert log.level == logging.INFO
    log = configure_logging(verbose=True, logger_name=name)
    assert log.level == logging.DEBUG
    assert sum(isinstance(h, RichHandler) for h in log.handlers) == 1
    assert log.propagate is False
