"""
Logging configuration for the Contacts Dashboard.

This module sets up the root logger once for the app process and
keeps chatty third-party loggers (HTTP client, dev server) at a
quieter level than the dashboard's own modules.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that flood DEBUG output
NOISY_LOGGERS = ('urllib3', 'werkzeug', 'dash')


def _numeric_level(level: str) -> int:
    return getattr(logging, str(level).upper(), logging.INFO)


def _file_handler(log_file: str, log_dir: str, level: int, formatter: logging.Formatter) -> logging.FileHandler:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / log_file)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    format_string: Optional[str] = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Set up logging configuration for the application.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Name of log file (optional)
        log_dir: Directory for log files (defaults to 'logs')
        format_string: Custom format string (optional)
        quiet_loggers: Logger names held at WARNING regardless of level
    """
    numeric_level = _numeric_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        root_logger.addHandler(_file_handler(log_file, log_dir or 'logs', numeric_level, formatter))
        logging.info(f"Logging to file: {Path(log_dir or 'logs') / log_file}")

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.debug(f"Logging configured with level: {level}")


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name (typically __name__)."""
    return logging.getLogger(name)


def set_log_level(level: str) -> None:
    """Set the level on the root logger and all of its handlers."""
    numeric_level = _numeric_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers:
        handler.setLevel(numeric_level)

    logging.info(f"Log level set to: {level}")


def add_file_handler(
    log_file: str,
    log_dir: str = 'logs',
    level: str = 'INFO',
    format_string: Optional[str] = None
) -> logging.FileHandler:
    """
    Add a file handler to the root logger.

    Args:
        log_file: Name of log file
        log_dir: Directory for log files
        level: Logging level for this handler
        format_string: Custom format string (optional)

    Returns:
        The handler that was added, so callers can remove it again
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handler = _file_handler(log_file, log_dir, _numeric_level(level), formatter)
    logging.getLogger().addHandler(handler)

    logging.info(f"Added file handler: {Path(log_dir) / log_file}")
    return handler
