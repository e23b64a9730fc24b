"""Shared logging helpers for the YC word correlation tools."""
from __future__ import annotations

import logging

LOGGER_NAME = "ycwords"


def get_logger() -> logging.Logger:
    """Return the shared application logger instance."""
    return logging.getLogger(LOGGER_NAME)


def configure_logging(verbose: bool = False) -> logging.Logger:
    logger = get_logger()
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
