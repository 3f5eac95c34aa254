"""Centralized logging configuration.

The library only creates module-level loggers; applications call
``setup_logging`` to route them (e.g. to see failed background writes).
"""

import logging
import sys
from typing import Optional, Union

from cacheserde.infrastructure.config.settings import get_config

DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def resolve_log_level(level: Union[int, str, None]) -> int:
    """Maps a level name or number to a logging level, defaulting to INFO."""
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if isinstance(resolved, int):
            return resolved
    return DEFAULT_LOG_LEVEL


def setup_logging(
    log_level: Union[int, str, None] = None,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None
) -> None:
    """Configures the root logger.

    Args:
        log_level: Minimum level. Falls back to the ``log_level`` setting.
        log_format: The format string for log messages.
        log_file: Optional path to a file for logging output. Falls back to
            the ``log_file`` setting.
    """
    level = resolve_log_level(log_level if log_level is not None else get_config("log_level"))
    log_file = log_file or get_config("log_file")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(str(log_file), encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logging.info(f"Logging to file: {log_file}")

    logging.debug(f"Logging configured. Level={logging.getLevelName(level)}")
