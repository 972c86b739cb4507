"""Logging setup for the stat_monitor process."""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "stat_monitor"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a single stderr handler to the package logger and return it."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    # Drop handlers from earlier calls so repeated setup does not duplicate lines
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
