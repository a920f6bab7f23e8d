"""
Centralized logging configuration for the Menu Guard service.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "menu_guard"

FORMATTER = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

_configured_level: Optional[int] = None


def resolve_level(name: str, default: int = logging.INFO) -> int:
    """Translate a level name such as "debug" into a logging constant."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else default


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    The level is the one passed to set_log_level, else MENU_GUARD_LOG_LEVEL
    (default INFO).

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        A configured Logger instance
    """
    logger = logging.getLogger(name)

    # Only add handler if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(FORMATTER)
        logger.addHandler(handler)
        if _configured_level is not None:
            logger.setLevel(_configured_level)
        else:
            logger.setLevel(resolve_level(os.getenv("MENU_GUARD_LOG_LEVEL", "INFO")))

    return logger


def set_log_level(level: int) -> None:
    """
    Apply a level to every Menu Guard logger, existing and future.

    Args:
        level: The logging level, usually resolve_level(config.log_level)
    """
    global _configured_level
    _configured_level = level
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    for name, logger in list(logging.root.manager.loggerDict.items()):
        if name.startswith(PACKAGE_LOGGER + ".") and isinstance(logger, logging.Logger):
            logger.setLevel(level)


def setup_logging(level: int = logging.INFO) -> None:
    """
    Setup the root logging configuration for the launcher and uvicorn.

    Args:
        level: The logging level (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
