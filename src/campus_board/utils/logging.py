"""
Logging setup for the campus board client.

The library logs through loguru's shared ``logger``. Applications embedding it
call ``setup_logging`` once; every record carries a ``component`` tag so board
messages can be told apart from the host application's own output.
"""

import sys
from typing import Optional

from loguru import logger

from ..config import Settings, get_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[component]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {name}:{line} - {message}"


def setup_logging(log_level: Optional[str] = None, settings: Optional[Settings] = None) -> None:
    """
    Replace loguru's default sink with the board's console and file sinks.

    Args:
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        settings: Configuration, defaults to ``get_settings()``
    """
    settings = settings or get_settings()
    level = (log_level or settings.log_level).upper()
    as_json = settings.log_format == "json"

    logger.remove()
    logger.configure(extra={"component": "campus_board"})

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=not as_json,
        serialize=as_json,
        backtrace=settings.debug_mode,
        diagnose=settings.debug_mode,
    )

    # Only the library's own records go to its log file
    if not settings.debug_mode and settings.log_file:
        logger.add(
            settings.log_file,
            format=FILE_FORMAT,
            level=level,
            filter="campus_board",
            rotation="10 MB",
            retention=5,
            serialize=as_json,
            backtrace=False,
            diagnose=False,
        )

    logger.debug(f"Logging initialized with level: {level}, format: {settings.log_format}")


def get_logger(component: str):
    """Logger whose records are tagged with ``component``."""
    return logger.bind(component=component)
