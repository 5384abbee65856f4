# Logging configuration for the CLI: a Rich handler on the "vibecheck" logger.

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOGGER_NAME = "vibecheck"


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Configure and return the scan logger.

    INFO by default, DEBUG with ``verbose``. Log output goes to stderr so it
    never mixes with report output on stdout. Calling this again only
    adjusts the level; it does not stack handlers.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=verbose,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
