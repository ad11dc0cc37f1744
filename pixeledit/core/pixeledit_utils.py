#!/usr/bin/env python3
"""
Common utilities for the pixel art editor
Extracted to avoid duplication between modules
"""

# Standard library imports
import logging
from typing import Any, Sequence

from .pixeledit_constants import COLOR_CHANNELS, MAX_CHANNEL_VALUE, MIN_CHANNEL_VALUE
from .pixeledit_exceptions import ValidationError
from .pixeledit_logging import get_logger

# RGBA color, each channel 0-255
Color = tuple[int, int, int, int]

# Grid cell coordinate (x, y)
Point = tuple[int, int]

# ================================================================================
# Debug Logging Utilities
# ================================================================================

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def debug_log(category: str, message: str, level: str = "INFO") -> None:
    """Log a message under a category logger

    Args:
        category: Category for the log message (e.g., "DOCUMENT", "SURFACE")
        message: The log message
        level: Log level ("INFO", "WARNING", "ERROR", "DEBUG")
    """
    get_logger(category.lower()).log(_LEVELS.get(level, logging.INFO), message)


def debug_exception(category: str, exception: Exception) -> None:
    """Log exceptions with full traceback

    Args:
        category: Category for the log message
        exception: The exception to log
    """
    get_logger(category.lower()).error(
        f"Exception: {type(exception).__name__}: {exception!s}",
        exc_info=exception,
    )


# ================================================================================
# Color Validation Utilities
# ================================================================================


def validate_color(color: Any) -> Color:
    """Validate and normalize an RGBA color

    Args:
        color: RGBA color as tuple or list

    Returns:
        RGBA tuple with every channel clamped to 0-255

    Raises:
        ValidationError: If the value is not a sequence of four numbers
    """
    if not isinstance(color, (tuple, list)) or len(color) != COLOR_CHANNELS:
        raise ValidationError(f"Expected an RGBA color, got {color!r}")

    try:
        channels = [int(c) for c in color]
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Color channels must be numbers: {color!r}") from e

    r, g, b, a = (max(MIN_CHANNEL_VALUE, min(MAX_CHANNEL_VALUE, c)) for c in channels)
    return (r, g, b, a)


def validate_point(point: Any) -> Point:
    """Validate a grid coordinate pair

    Args:
        point: (x, y) as tuple or list

    Returns:
        Integer (x, y) tuple

    Raises:
        ValidationError: If the value is not a pair of integers
    """
    if not isinstance(point, (tuple, list)) or len(point) != 2:
        raise ValidationError(f"Expected an (x, y) point, got {point!r}")

    x, y = point
    if isinstance(x, bool) or isinstance(y, bool):
        raise ValidationError(f"Point coordinates must be integers: {point!r}")
    if isinstance(x, float) and x.is_integer():
        x = int(x)
    if isinstance(y, float) and y.is_integer():
        y = int(y)
    if not isinstance(x, int) or not isinstance(y, int):
        raise ValidationError(f"Point coordinates must be integers: {point!r}")
    return (x, y)


def unique_points(points: Sequence[Point]) -> list[Point]:
    """Drop repeated points while keeping first-seen order"""
    seen: set[Point] = set()
    result = []
    for point in points:
        if point not in seen:
            seen.add(point)
            result.append(point)
    return result

