#!/usr/bin/env python3
"""
Custom exceptions and error handling utilities for the pixel art editor.

This module defines domain-specific exceptions and provides utilities
for consistent error handling across the application.
"""


class PixelEditError(Exception):
    """Base exception for all pixel art editor errors"""
    pass


class ValidationError(PixelEditError):
    """Raised when input validation fails"""
    pass


class InvalidDimensionError(ValidationError):
    """Raised when a grid is constructed with an unusable size"""
    pass


class OutOfBoundsError(PixelEditError):
    """Raised when a grid cell is read outside the grid"""
    pass


class FileOperationError(PixelEditError):
    """Raised when file operations fail"""
    pass


class ReadError(FileOperationError):
    """Raised when backing bytes cannot be read"""
    pass


class WriteError(FileOperationError):
    """Raised when bytes cannot be written to storage"""
    pass


class BackupDeleteError(FileOperationError):
    """Raised when a backup copy cannot be deleted"""
    pass


class ImageFormatError(FileOperationError):
    """Raised when image bytes or a data URI cannot be decoded"""
    pass


class SurfaceError(PixelEditError):
    """Raised when talking to a drawing surface fails"""
    pass


class NoActiveSurfaceError(SurfaceError):
    """Raised when no drawing surface is attached to supply bytes"""
    pass


class SurfaceTimeoutError(SurfaceError):
    """Raised when a drawing surface does not answer a request in time"""
    pass


class ProtocolError(SurfaceError):
    """Raised when a surface message is malformed"""
    pass


def format_error_message(operation: str, error: Exception) -> str:
    """
    Format an error message for user display.

    Args:
        operation: Description of the operation that failed
        error: The exception that was raised

    Returns:
        User-friendly error message
    """
    if isinstance(error, FileNotFoundError):
        return f"File not found during {operation}"
    elif isinstance(error, PermissionError):
        return f"Permission denied during {operation}"
    elif isinstance(error, OSError) and error.errno == 28:  # No space left
        return f"Disk full - cannot complete {operation}"
    elif isinstance(error, NoActiveSurfaceError):
        return f"Cannot {operation}: no editor is open for this document"
    elif isinstance(error, SurfaceTimeoutError):
        return f"Cannot {operation}: the editor did not respond"
    elif isinstance(error, ImageFormatError):
        return f"Invalid image format: {error}"
    elif isinstance(error, ValidationError):
        return f"Invalid input: {error}"
    else:
        return f"Failed to {operation}: {error}"
