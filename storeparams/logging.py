"""Logging configuration utilities."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS_BY_NAME: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def parse_log_level(name: str | None) -> int | None:
    """Return the numeric level for ``name`` or ``None`` when it is unknown."""

    if name is None:
        return None
    return _LEVELS_BY_NAME.get(name.strip().lower())


def configure_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure application wide logging handlers.

    Records go to ``stream`` (stdout by default) and to ``log_file`` if given.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=parse_log_level(level) or logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def set_default_log_level(logger: logging.Logger, level: str) -> bool:
    """Apply ``level`` to the root logger.

    Unknown level names leave the current level untouched; the problem is
    reported through ``logger`` and ``False`` is returned.
    """

    resolved = parse_log_level(level)
    if resolved is None:
        logger.warning("%s is not a valid logging level; keeping the current level", level)
        return False
    logging.getLogger().setLevel(resolved)
    logger.info("Default log level set to %s", logging.getLevelName(resolved))
    return True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
