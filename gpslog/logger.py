"""
Logging configuration for gpslog.
Provides centralized logging setup.
"""

import logging
import sys
from pathlib import Path
from .config import LOG_LEVEL, LOG_FORMAT, LOG_FILE


def setup_logger(name: str) -> logging.Logger:
    """
    Set up a logger with a console handler and an optional file handler.

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    # File handler - detailed logs, only when GPSLOG_LOG_FILE is set
    if LOG_FILE:
        log_path = Path(LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    # Console handler - INFO and above
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    return logger


def log_ingest_stats(stats, logger: logging.Logger, name: str = "Ingest"):
    """Log a summary of an ingest run."""
    if not stats.files_seen:
        logger.warning(f"{name}: No input files found")
        return

    logger.info(
        f"{name}: {stats.files_imported}/{stats.files_seen} files imported, "
        f"{stats.records_written} records written, "
        f"{stats.files_failed} files failed"
    )
