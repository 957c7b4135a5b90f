"""Logging configuration."""

import logging
from pathlib import Path
from typing import Optional

from certchain.models.config import AppConfig, LoggingSettings

LOGGER_NAME = "certchain"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def _level(settings: Optional[LoggingSettings]) -> int:
    """Map a configured level name to a logging level, INFO when unknown."""
    if settings is None:
        return logging.INFO
    level = logging.getLevelName(settings.level.upper())
    return level if isinstance(level, int) else logging.INFO


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logger(config: Optional[AppConfig] = None) -> logging.Logger:
    """
    Configure the package logger.

    A console handler is always attached. With a config whose logging.file
    is set, records also go to that file.

    Args:
        config: Application configuration

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    settings = config.logging if config is not None else None
    level = _level(settings)
    logger.setLevel(level)
    logger.addHandler(_handler(logging.StreamHandler(), level, CONSOLE_FORMAT))

    if settings is not None and settings.file:
        log_file = Path(settings.file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file), level, settings.format))

    return logger
