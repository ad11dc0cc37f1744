#!/usr/bin/env python3
"""
Logging configuration for the pixel art editor
Provides consistent logging setup across all modules
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "pixeledit"


def setup_logging(level: str = "INFO",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Setup logging configuration for the pixel art editor.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write logs to (defaults to console only)

    Returns:
        Configured logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    # Clear any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(numeric_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create log file {log_file}: {e}")

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Module name (e.g., 'document')

    Returns:
        Logger instance
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


_configured = False


def setup_logging_once(level: str = "INFO",
                       log_file: Optional[str] = None) -> logging.Logger:
    """
    Run setup_logging on the first call in this process.

    Later calls leave the existing configuration alone and return the
    same logger.
    """
    global _configured
    if not _configured:
        _configured = True
        return setup_logging(level, log_file)
    return logging.getLogger(LOGGER_NAME)
