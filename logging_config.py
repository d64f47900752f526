"""
Structured logging configuration for the practice compensation model.

This module provides a centralized way to configure logging across the engine
with different log levels and output files for different concerns.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Set

# Define logger names for different concerns
PROJECTION_LOGGER = "practice_comp.projection"
CALCULATION_LOGGER = "practice_comp.calculation"
ERROR_LOGGER = "practice_comp.errors"

# Standard log format with module name and line number
LOG_FORMAT = "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAMES = (
    "projection_events.log",
    "calculation_detail.log",
    "warnings_errors.log",
    "combined.log",
)

MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

# Track if logging is already configured and log files
_LOGGING_CONFIGURED = False
_log_files_created: Set[Path] = set()


def clear_logs(log_dir: Path) -> None:
    """
    Clear all log files in the specified directory.

    Args:
        log_dir: Directory containing log files to clear
    """
    for name in LOG_FILE_NAMES:
        log_file = Path(log_dir) / name
        if log_file.exists():
            try:
                log_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(f"Could not delete {log_file}: {e}")


def _rotating_handler(filename: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=filename,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8',
        mode='a',
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    _log_files_created.add(Path(filename))
    return handler


def _attach(logger_name: str, handler: logging.Handler, level: int) -> None:
    named = logging.getLogger(logger_name)
    for h in named.handlers[:]:
        named.removeHandler(h)
    named.setLevel(level)
    named.addHandler(handler)
    named.propagate = True  # Allow to bubble up to root


def setup_logging(log_dir: Path, debug: bool = False, clear_existing: bool = True) -> None:
    """
    Configure structured logging for the application.

    Creates separate log files for different concerns:
    - projection_events.log: Projection runs and field edits (INFO+)
    - calculation_detail.log: Per-year calculation summaries (DEBUG, only if debug=True)
    - warnings_errors.log: Warnings and errors (WARNING+)
    - combined.log: Combined log of all messages (INFO+)

    Args:
        log_dir: Directory where log files will be stored
        debug: If True, enables debug logging and creates calculation_detail.log
        clear_existing: If True, clears existing log files before starting
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    if clear_existing:
        clear_logs(log_dir)

    # Remove all handlers from the root logger before setup
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Formatters
    file_formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    console_formatter = logging.Formatter("%(levelname)-8s %(message)s")

    # Console handler (for warnings and above)
    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(console_formatter)
    root_logger.addHandler(console)

    root_logger.addHandler(_rotating_handler(log_dir / "combined.log", logging.INFO, file_formatter))
    root_logger.addHandler(
        _rotating_handler(log_dir / "warnings_errors.log", logging.WARNING, file_formatter)
    )

    _attach(
        PROJECTION_LOGGER,
        _rotating_handler(log_dir / "projection_events.log", logging.INFO, file_formatter),
        logging.INFO,
    )

    if debug:
        _attach(
            CALCULATION_LOGGER,
            _rotating_handler(log_dir / "calculation_detail.log", logging.DEBUG, file_formatter),
            logging.DEBUG,
        )

    errors = logging.getLogger(ERROR_LOGGER)
    errors.setLevel(logging.WARNING)
    errors.propagate = True

    _LOGGING_CONFIGURED = True


def reset_logging() -> None:
    """Drop the handlers installed by :func:`setup_logging` so it can run again."""
    global _LOGGING_CONFIGURED

    for name in ("", PROJECTION_LOGGER, CALCULATION_LOGGER):
        named = logging.getLogger(name)
        for h in named.handlers[:]:
            named.removeHandler(h)
            h.close()
    _log_files_created.clear()
    _LOGGING_CONFIGURED = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (e.g., __name__). If None, returns root logger.

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_files() -> Set[Path]:
    """Log files created by the current configuration."""
    return set(_log_files_created)
