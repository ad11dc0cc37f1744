#!/usr/bin/env python3
"""
Image codec for the pixel art editor

Converts between pixel grids and PNG bytes, and between PNG bytes and the
base64 data URIs used to pass bitmaps to a drawing surface.
"""

# Standard library imports
import base64
import binascii
from io import BytesIO

# Third-party imports
from PIL import Image, UnidentifiedImageError

from .pixeledit_constants import DATA_URI_PREFIX, MAX_IMAGE_DIMENSION, PNG_FORMAT
from .pixeledit_exceptions import ImageFormatError
from .pixeledit_models import PixelGrid
from .pixeledit_utils import debug_log


def decode_image(data: bytes, max_dimension: int = MAX_IMAGE_DIMENSION) -> PixelGrid:
    """Decode raster image bytes into a grid

    Raises:
        ImageFormatError: If the bytes are not a readable image
    """
    if not data:
        raise ImageFormatError("No image data to decode")

    try:
        with Image.open(BytesIO(data)) as image:
            debug_log(
                "CODEC",
                f"Image opened: size={image.size}, mode={image.mode}, format={image.format}",
                "DEBUG",
            )
            if image.width > max_dimension or image.height > max_dimension:
                raise ImageFormatError(
                    f"Image too large: {image.width}x{image.height} "
                    f"(max {max_dimension}x{max_dimension})"
                )
            return PixelGrid.from_pil_image(image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageFormatError(f"Failed to decode image: {e!s}") from e


def encode_image(grid: PixelGrid) -> bytes:
    """Encode a grid as PNG bytes, alpha preserved"""
    buffer = BytesIO()
    grid.to_pil_image().save(buffer, format=PNG_FORMAT)
    return buffer.getvalue()


def to_data_uri(data: bytes) -> str:
    """Wrap PNG bytes in a base64 data URI"""
    return DATA_URI_PREFIX + base64.b64encode(data).decode("ascii")


def from_data_uri(data_uri: str) -> bytes:
    """Extract the PNG bytes from a base64 data URI

    Raises:
        ImageFormatError: If the URI is not a base64 PNG data URI
    """
    if not isinstance(data_uri, str) or not data_uri.startswith(DATA_URI_PREFIX):
        raise ImageFormatError("Expected a base64 PNG data URI")
    try:
        return base64.b64decode(data_uri[len(DATA_URI_PREFIX):], validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageFormatError(f"Invalid base64 payload: {e!s}") from e


def grid_to_data_uri(grid: PixelGrid) -> str:
    return to_data_uri(encode_image(grid))


def grid_from_data_uri(data_uri: str) -> PixelGrid:
    return decode_image(from_data_uri(data_uri))
