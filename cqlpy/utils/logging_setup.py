"""Logging configuration for cqlpy."""
from __future__ import annotations
import logging
import sys
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def resolve_level(level: Optional[str], verbose: bool = False) -> str:
    """Effective level name: ``--verbose`` wins over ``--log-level``."""
    if verbose:
        return 'DEBUG'
    return (level or 'INFO').upper()


def configure_logging(level: str = "INFO",
                      log_file: Optional[str] = None,
                      format_str: Optional[str] = None) -> None:
    """Install stderr (and optional file) handlers on the root logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path to write logs to
        format_str: Optional custom format string
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    formatter = logging.Formatter(format_str or DEFAULT_FORMAT)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers = [console_handler]

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Warning: Could not configure log file: {e}", file=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    # The driver logs every reconnect attempt; keep it quiet unless debugging
    driver_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.ERROR
    logging.getLogger("cassandra").setLevel(driver_level)
