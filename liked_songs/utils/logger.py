"""Logger utility for console and file logging."""

import logging
import os
import sys
from pathlib import Path


DEFAULT_LOGGER_NAME = "liked_songs"


def resolve_log_level(default: int = logging.INFO) -> int:
    """
    Read the log level from the LOG_LEVEL environment variable.

    Args:
        default: Level used when LOG_LEVEL is unset or not a known level name

    Returns:
        Numeric logging level
    """
    name = os.environ.get("LOG_LEVEL", "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def _has_file_handler(logger: logging.Logger, log_file: str) -> bool:
    target = str(Path(log_file).resolve())
    return any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    )


def setup_logger(name: str = DEFAULT_LOGGER_NAME, log_file: str = None) -> logging.Logger:
    """
    Set up a logger with console and optional file output.

    Safe to call after get_logger(): the console handler is only added once,
    and a file handler is only added once per path.

    Args:
        name: Logger name
        log_file: Optional path to log file. If None, logs to console only.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = resolve_log_level()
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)

    console_formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Prevent duplicate handlers
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if log_file and not _has_file_handler(logger, log_file):
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get or create a logger instance with console output.

    Args:
        name: Logger name

    Returns:
        Logger instance with console handler
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        level = resolve_log_level()
        logger.setLevel(level)

        # Plain messages on the terminal
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

    return logger
