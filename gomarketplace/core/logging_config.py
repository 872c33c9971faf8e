"""Logging setup shared by the cart modules."""
from __future__ import annotations

import logging

from gomarketplace.core.constants import DEFAULT_LOG_LEVEL, LOG_FORMAT

logger = logging.getLogger("gomarketplace")


def setup_logging(level: str | int = DEFAULT_LOG_LEVEL) -> logging.Logger:
    """Configure root logging once and return the package logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)
    return logger
