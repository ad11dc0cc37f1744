#!/usr/bin/env python3
"""
Core data models for the pixel art editor
These models handle the pixel state and edits without any UI dependencies
"""

# Standard library imports
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

# Third-party imports
import numpy as np
from PIL import Image

from .pixeledit_constants import COLOR_CHANNELS, MAX_IMAGE_DIMENSION, TRANSPARENT
from .pixeledit_exceptions import InvalidDimensionError, OutOfBoundsError, ValidationError
from .pixeledit_utils import Color, Point, validate_color, validate_point


@dataclass(frozen=True)
class Edit:
    """
    One undoable change: paint every point of the stroke with the color.
    Later points override earlier ones at the same cell.
    """

    color: Color
    stroke: tuple[Point, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dictionary"""
        return {
            "color": list(self.color),
            "stroke": [[x, y] for x, y in self.stroke],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Edit":
        """Create an edit from its dictionary form

        Raises:
            ValidationError: If the dictionary is malformed
        """
        if not isinstance(data, dict) or "color" not in data:
            raise ValidationError(f"Invalid edit: {data!r}")
        return make_edit(data["color"], data.get("stroke", []))


def make_edit(color: Any, points: Sequence[Any]) -> Edit:
    """Build an edit from a color and the cells it touches

    Raises:
        ValidationError: If the color, the point list or any point is invalid
    """
    if not isinstance(points, (list, tuple)):
        raise ValidationError(f"Edit stroke must be a list of points, got {points!r}")
    return Edit(
        color=validate_color(color),
        stroke=tuple(validate_point(p) for p in points),
    )


@dataclass(eq=False)
class PixelGrid:
    """
    Model for the pixel data of one document
    Stores one RGBA color per cell in a (height, width, 4) array
    """

    width: int
    height: int
    data: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self):
        """Validate dimensions and make sure the array matches them"""
        for name, value in (("width", self.width), ("height", self.height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidDimensionError(f"Grid {name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidDimensionError(f"Grid {name} must be positive, got {value}")
        self.width = int(self.width)
        self.height = int(self.height)

        expected_shape = (self.height, self.width, COLOR_CHANNELS)
        if self.data is None:
            self.data = np.zeros(expected_shape, dtype=np.uint8)
        elif self.data.shape != expected_shape:
            raise InvalidDimensionError(
                f"Pixel data shape {self.data.shape} does not match {expected_shape}"
            )
        else:
            self.data = np.ascontiguousarray(self.data, dtype=np.uint8)

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        fill: Color = TRANSPARENT,
        max_dimension: int = MAX_IMAGE_DIMENSION,
    ) -> "PixelGrid":
        """Create a grid with every cell set to the fill color"""
        grid = cls(width, height)
        if grid.width > max_dimension or grid.height > max_dimension:
            raise InvalidDimensionError(
                f"Grid too large: {width}x{height} (max {max_dimension}x{max_dimension})"
            )
        if tuple(fill) != TRANSPARENT:
            grid.data[:, :] = validate_color(fill)
        return grid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.data, other.data)
        )

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a cell lies inside the grid"""
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> Color:
        """Get the color of a cell

        Raises:
            OutOfBoundsError: If the cell is outside the grid
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(
                f"Cell ({x}, {y}) is outside {self.width}x{self.height} grid"
            )
        r, g, b, a = (int(c) for c in self.data[y, x])
        return (r, g, b, a)

    def set(self, x: int, y: int, color: Color) -> bool:
        """
        Set the color of a cell
        Cells outside the grid are ignored. Returns True if the cell was written.

        Raises:
            ValidationError: If the color is not an RGBA sequence
        """
        return self._write(x, y, validate_color(color))

    def _write(self, x: int, y: int, color: Color) -> bool:
        if not self.in_bounds(x, y):
            return False
        self.data[y, x] = color
        return True

    def paint(self, edit: Edit) -> int:
        """Apply an edit in stroke order, returns the number of cells written"""
        # Edit colors are validated when the edit is built
        written = 0
        for x, y in edit.stroke:
            if self._write(x, y, edit.color):
                written += 1
        return written

    def copy(self) -> "PixelGrid":
        return PixelGrid(self.width, self.height, self.data.copy())

    @classmethod
    def from_pil_image(cls, pil_image: Image.Image) -> "PixelGrid":
        """
        Import a raster image, one cell per source pixel
        Any image mode is converted to RGBA first
        """
        if pil_image.mode != "RGBA":
            pil_image = pil_image.convert("RGBA")
        data = np.array(pil_image, dtype=np.uint8)
        return cls(pil_image.width, pil_image.height, data)

    def to_pil_image(self) -> Image.Image:
        """Export to an RGBA image, one pixel per cell"""
        return Image.fromarray(self.data)
