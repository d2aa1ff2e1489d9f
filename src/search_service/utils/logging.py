"""
Logging configuration and utilities for the search service.

Every module logs through a child of the ``search_service`` logger;
``setup_logging`` decides where those records go.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler

from search_service.config.settings import LoggingSettings

ROOT_LOGGER_NAME = "search_service"


def setup_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """
    Configure the application root logger from settings.

    Handlers installed by an earlier call are closed first, so calling
    it again applies the new settings instead of stacking handlers.

    Args:
        settings: Logging configuration. If None, uses LoggingSettings defaults.

    Returns:
        The configured root logger for the application.
    """
    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level)

    reset_logging()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    # Records stop here; the host application's root logger stays untouched
    logger.propagate = False

    handlers: list[logging.Handler] = []
    if settings.log_to_console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if settings.file_path is not None:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=str(settings.file_path),
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        ))

    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a logger under the application root.

    Args:
        name: Usually ``__name__``. Names outside the package are nested
              under ``search_service``; None returns the root itself.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Page opened")
    """
    if name is None or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close and remove every handler on the application root logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
