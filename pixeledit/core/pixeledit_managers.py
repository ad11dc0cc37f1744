#!/usr/bin/env python3
"""
Tool classes for the pixel art editor
Turn pointer input on grid cells into edits
"""

# Standard library imports
import math
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Callable, Optional, Union

from .pixeledit_constants import (
    DEFAULT_CIRCLE_RADIUS,
    DEFAULT_DRAWING_COLOR,
    DEFAULT_ELLIPSE_RADIUS_X,
    DEFAULT_ELLIPSE_RADIUS_Y,
    TRANSPARENT,
)
from .pixeledit_exceptions import ValidationError
from .pixeledit_fill import flood_fill
from .pixeledit_models import Edit, PixelGrid, make_edit
from .pixeledit_shapes import circle_points, ellipse_points, line_points
from .pixeledit_utils import Color, Point, debug_log, validate_color


class ToolType(Enum):
    """Available drawing tools"""

    PEN = auto()
    ERASER = auto()
    FILL = auto()
    LINE = auto()
    CIRCLE = auto()
    ELLIPSE = auto()
    PICKER = auto()


def pointer_to_cell(
    px: float,
    py: float,
    grid_width: int,
    grid_height: int,
    client_width: float,
    client_height: float,
) -> Point:
    """Map a device coordinate on the drawing surface to a grid cell"""
    if client_width <= 0 or client_height <= 0:
        raise ValidationError("Surface client size must be positive")
    return (
        math.floor(grid_width * px / client_width),
        math.floor(grid_height * py / client_height),
    )


def _clip(points: list[Point], grid: PixelGrid) -> list[Point]:
    return [(x, y) for x, y in points if grid.in_bounds(x, y)]


def clear_edit(grid: PixelGrid) -> Edit:
    """Single edit resetting every cell to transparent, row by row"""
    return make_edit(
        TRANSPARENT, [(x, y) for y in range(grid.height) for x in range(grid.width)]
    )


class Tool(ABC):
    """Abstract base class for drawing tools

    Each handler returns the edits the pointer event produced, in order.
    """

    def on_press(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Handle pointer press"""
        return []

    def on_move(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Handle pointer move while pressed"""
        return []

    @abstractmethod
    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Handle pointer release"""


class PenTool(Tool):
    """Point tool that paints every cell touched during a drag

    Each newly touched cell becomes its own single-point edit. Moves that stay
    inside the previous cell produce nothing. A release without any
    cell-changing move is a click and paints the release cell.
    """

    def __init__(self) -> None:
        self.press_point: Optional[Point] = None
        self.last_point: Optional[Point] = None

    def paint_color(self, color: Color) -> Color:
        return color

    def on_press(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Start tracking a new stroke"""
        self.press_point = point
        self.last_point = None
        return []

    def on_move(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Continue drawing with line interpolation"""
        if point == self.last_point:
            return []

        if self.last_point is None:
            start = self.press_point if self.press_point is not None else point
            points = line_points(start, point)
        else:
            # Previous cell was already painted
            points = line_points(self.last_point, point)[1:]

        self.last_point = point
        paint = self.paint_color(color)
        return [make_edit(paint, [p]) for p in _clip(points, grid)]

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Paint the clicked cell unless a drag just ended"""
        dragged = self.last_point is not None
        self.press_point = None
        self.last_point = None
        if dragged or not grid.in_bounds(*point):
            return []
        return [make_edit(self.paint_color(color), [point])]


class EraserTool(PenTool):
    """Pen that always paints the transparent color"""

    def paint_color(self, color: Color) -> Color:
        return TRANSPARENT


class FillTool(Tool):
    """Flood fill tool"""

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Fill the region under the clicked cell, computed once now"""
        if not grid.in_bounds(*point):
            return []
        seed_color = grid.get(*point)
        if seed_color == color:
            return []
        return [make_edit(color, flood_fill(grid, point, seed_color))]


class LineTool(Tool):
    """Two-click line tool"""

    def __init__(self) -> None:
        self.anchor: Optional[Point] = None

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """First click sets the start, second click draws the line"""
        if self.anchor is None:
            self.anchor = point
            return []
        points = _clip(line_points(self.anchor, point), grid)
        self.anchor = None
        return [make_edit(color, points)] if points else []


class CircleTool(Tool):
    """Circle outline centred on the clicked cell"""

    def __init__(self, radius: int = DEFAULT_CIRCLE_RADIUS) -> None:
        self.radius = radius

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        points = _clip(circle_points(self.radius, point), grid)
        return [make_edit(color, points)] if points else []


class EllipseTool(Tool):
    """Axis-aligned ellipse outline centred on the clicked cell"""

    def __init__(
        self,
        radius_x: int = DEFAULT_ELLIPSE_RADIUS_X,
        radius_y: int = DEFAULT_ELLIPSE_RADIUS_Y,
    ) -> None:
        self.radius_x = radius_x
        self.radius_y = radius_y

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        points = _clip(ellipse_points(self.radius_x, self.radius_y, point), grid)
        return [make_edit(color, points)] if points else []


class ColorPickerTool(Tool):
    """Color picker tool"""

    def __init__(self) -> None:
        self.picked_callback: Optional[Callable[[Color], None]] = None

    def on_release(self, point: Point, color: Color, grid: PixelGrid) -> list[Edit]:
        """Pick color at position"""
        if grid.in_bounds(*point) and self.picked_callback:
            self.picked_callback(grid.get(*point))
        return []


_TOOL_NAMES = {tool_type.name.lower(): tool_type for tool_type in ToolType}


class ToolManager:
    """Manages drawing tools and tool state"""

    def __init__(self) -> None:
        self.tools: dict[ToolType, Tool] = {
            ToolType.PEN: PenTool(),
            ToolType.ERASER: EraserTool(),
            ToolType.FILL: FillTool(),
            ToolType.LINE: LineTool(),
            ToolType.CIRCLE: CircleTool(),
            ToolType.ELLIPSE: EllipseTool(),
            ToolType.PICKER: ColorPickerTool(),
        }
        self.current_tool = ToolType.PEN
        self.current_color: Color = DEFAULT_DRAWING_COLOR

        picker = self.tools[ToolType.PICKER]
        if isinstance(picker, ColorPickerTool):
            picker.picked_callback = self.set_color

    def set_tool(self, tool_type: Union[ToolType, str]) -> None:
        """Set the current tool (accepts ToolType enum or string)"""
        if isinstance(tool_type, str):
            mapped_type = _TOOL_NAMES.get(tool_type.lower())
            if mapped_type is None:
                raise ValueError(f"Unknown tool: {tool_type}")
            tool_type = mapped_type

        self.current_tool = tool_type
        debug_log("TOOL", f"Tool changed to {tool_type.name}")

    @property
    def current_tool_name(self) -> str:
        """Get the name of the current tool"""
        return self.current_tool.name.lower()

    def get_tool(self, tool_type: Optional[ToolType] = None) -> Tool:
        """Get tool instance (current tool if no type specified)"""
        return self.tools[tool_type or self.current_tool]

    def set_color(self, color: Color) -> None:
        """Set the current drawing color"""
        self.current_color = validate_color(color)
        debug_log("TOOL", f"Color changed to {self.current_color}", "DEBUG")

    def set_circle_radius(self, radius: int) -> None:
        if radius < 0:
            raise ValidationError(f"Circle radius must not be negative, got {radius}")
        tool = self.tools[ToolType.CIRCLE]
        if isinstance(tool, CircleTool):
            tool.radius = radius

    def set_ellipse_radii(self, radius_x: int, radius_y: int) -> None:
        if radius_x < 0 or radius_y < 0:
            raise ValidationError(
                f"Ellipse radii must not be negative, got {radius_x}x{radius_y}"
            )
        tool = self.tools[ToolType.ELLIPSE]
        if isinstance(tool, EllipseTool):
            tool.radius_x = radius_x
            tool.radius_y = radius_y

    def set_color_picked_callback(self, callback: Callable[[Color], None]) -> None:
        """Set callback for color picker tool"""
        picker = self.tools[ToolType.PICKER]
        if isinstance(picker, ColorPickerTool):
            picker.picked_callback = callback
