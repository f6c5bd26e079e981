"""
Logging setup for the reader.

Handlers are attached to the "fsc_reader" package logger, never the root
logger, so an application embedding the reader keeps control of its own
logging:
- Console handler: warnings and errors only (INFO with --verbose)
- File handler: every record of a run, with rotation (DEBUG level)
- Progress logger: per-replicate step announcements, always on the console

Every handler installed here carries a name, so repeated setup replaces
handlers instead of stacking them, and handlers added by others (pytest's
log capture, an embedding application) are left alone.
"""

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

PACKAGE_LOGGER = "fsc_reader"
PROGRESS_LOGGER = "fsc_reader.progress"

CONSOLE_HANDLER = "fsc_reader.console"
FILE_HANDLER = "fsc_reader.file"
PROGRESS_HANDLER = "fsc_reader.progress.console"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _remove_handlers(logger: logging.Logger, *names: str) -> None:
    for handler in [h for h in logger.handlers if h.get_name() in names]:
        logger.removeHandler(handler)
        handler.close()


def _named(handler: logging.Handler, name: str, level: int, fmt: str) -> logging.Handler:
    handler.set_name(name)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def setup_logging(
    log_dir: Path | str | None = None,
    job_name: str = "fsc_reader",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    max_bytes: int = 5 * 1024 * 1024,  # 5MB
    backup_count: int = 3,
) -> Path:
    """
    Send the package's log records to the console and a rotating log file.

    Args:
        log_dir: Directory holding the logs/ folder (current directory if None).
        job_name: Prefix of the log file name, usually the simulation label.
        console_level: Lowest level printed on the console.
        file_level: Lowest level written to the log file.
        max_bytes: Maximum size per log file before rotation.
        backup_count: Number of rotated files to keep.

    Returns:
        Path of the log file, <log_dir>/logs/<job_name>_<timestamp>.log
    """
    log_path = (Path(log_dir) if log_dir else Path.cwd()) / "logs"
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / f"{job_name}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_handlers(package_logger, CONSOLE_HANDLER, FILE_HANDLER)
    package_logger.setLevel(min(console_level, file_level))

    package_logger.addHandler(
        _named(logging.StreamHandler(), CONSOLE_HANDLER, console_level, "%(message)s")
    )
    package_logger.addHandler(
        _named(
            RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count),
            FILE_HANDLER,
            file_level,
            FILE_FORMAT,
        )
    )
    return log_file


def get_progress_logger() -> logging.Logger:
    """
    Get the logger for step announcements (reading, parsing, formatting).

    Records are printed to the console whatever the console level, and are
    not passed on to the package logger.
    """
    logger = logging.getLogger(PROGRESS_LOGGER)

    if not any(h.get_name() == PROGRESS_HANDLER for h in logger.handlers):
        logger.addHandler(
            _named(logging.StreamHandler(), PROGRESS_HANDLER, logging.INFO, "%(asctime)s %(message)s")
        )
        logger.setLevel(logging.INFO)
        logger.propagate = False

    return logger


def reset_logging() -> None:
    """Remove the handlers installed by this module."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    _remove_handlers(package_logger, CONSOLE_HANDLER, FILE_HANDLER)
    package_logger.setLevel(logging.NOTSET)
    _remove_handlers(logging.getLogger(PROGRESS_LOGGER), PROGRESS_HANDLER)
