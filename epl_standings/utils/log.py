from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers handed out by get_logger, so set_level can reach all of them.
_LOGGERS: dict[str, logging.Logger] = {}


def _env_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Create (or retrieve) a configured logger.

    Parameters
    ----------
    name:
        Logger name (usually __name__).
    level:
        Logging level. If None, reads LOG_LEVEL from env (default INFO).
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = level or _env_level()
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _LOGGERS[name] = logger
    return logger


def set_level(level: int) -> None:
    """Change the level of every logger created through get_logger (CLI --verbose/--quiet)."""
    for logger in _LOGGERS.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
