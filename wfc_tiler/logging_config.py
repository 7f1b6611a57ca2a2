"""
Centralized logging configuration for the tiler.

Usage:
    from wfc_tiler.logging_config import setup_logging
    setup_logging()                 # console only
    setup_logging("logs")           # also write DEBUG to logs/wfc_tiler.log

All wfc_tiler.* loggers share the handlers installed here.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union


ROOT_LOGGER = "wfc_tiler"
LOG_FILE_NAME = "wfc_tiler.log"
MAX_LOG_SIZE = 5 * 1024 * 1024  # 5 MB per file
BACKUP_COUNT = 3


def setup_logging(
    log_dir: Optional[Union[Path, str]] = None,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Optional[Path]:
    """
    Configure the wfc_tiler logger.

    Args:
        log_dir: Directory for the rotating log file (None = console only)
        log_level: Level for file logging
        console_level: Level for console output

    Returns:
        Path to the log file, or None when logging to console only
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers (for re-initialization)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(
        fmt="%(levelname)-8s | %(name)-28s | %(message)s"
    ))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return None

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    log_file = log_path / LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-28s | %(funcName)-20s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    root_logger.addHandler(file_handler)

    root_logger.info(f"Logging to {log_file.absolute()}")
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the wfc_tiler namespace."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
