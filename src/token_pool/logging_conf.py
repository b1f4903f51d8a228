"""Loguru sink configuration for the token pool service."""

import sys
from typing import Optional

from loguru import logger

from .config import Config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>"
)


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Replaces the default handler with a console handler and, when a log file
    is configured, adds a rotating file handler.

    Args:
        level: Console log level (defaults to Config.LOG_LEVEL)
        log_file: Optional path for the file sink (defaults to Config.LOG_FILE)
    """
    level = (level or Config.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else Config.LOG_FILE

    logger.remove()  # Remove default handler
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            level="DEBUG",
        )
