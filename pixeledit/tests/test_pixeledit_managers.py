#!/usr/bin/env python3
"""
Unit tests for drawing tools
Tests pointer mapping, each tool and the ToolManager
"""

from unittest.mock import MagicMock

import pytest

from pixeledit.core.pixeledit_exceptions import ValidationError
from pixeledit.core.pixeledit_managers import (
    CircleTool,
    ColorPickerTool,
    EllipseTool,
    EraserTool,
    FillTool,
    LineTool,
    PenTool,
    ToolManager,
    ToolType,
    clear_edit,
    pointer_to_cell,
)
from pixeledit.core.pixeledit_models import PixelGrid

RED = (255, 0, 0, 255)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
TRANSPARENT = (0, 0, 0, 0)


@pytest.fixture
def grid():
    return PixelGrid.create(8, 8)


class TestPointerToCell:
    """Test device coordinate to grid cell mapping"""

    def test_scaled_surface(self):
        assert pointer_to_cell(0, 0, 8, 8, 80, 80) == (0, 0)
        assert pointer_to_cell(9.9, 10, 8, 8, 80, 80) == (0, 1)
        assert pointer_to_cell(79, 79, 8, 8, 80, 80) == (7, 7)

    def test_non_square_surface(self):
        assert pointer_to_cell(50, 50, 4, 2, 100, 100) == (2, 1)

    def test_outside_surface(self):
        assert pointer_to_cell(-1, 80, 8, 8, 80, 80) == (-1, 8)

    def test_empty_surface(self):
        with pytest.raises(ValidationError):
            pointer_to_cell(1, 1, 8, 8, 0, 80)


class TestPenTool:
    """Test click and drag behaviour of the pen"""

    def test_click_paints_one_cell(self, grid):
        tool = PenTool()

        assert tool.on_press((2, 3), RED, grid) == []
        edits = tool.on_release((2, 3), RED, grid)

        assert len(edits) == 1
        assert edits[0].color == RED
        assert edits[0].stroke == ((2, 3),)

    def test_drag_one_edit_per_cell(self, grid):
        """A drag across N cells yields N single-point edits"""
        tool = PenTool()
        tool.on_press((0, 0), RED, grid)

        edits = tool.on_move((1, 0), RED, grid)
        edits += tool.on_move((2, 0), RED, grid)
        edits += tool.on_release((2, 0), RED, grid)

        assert [e.stroke for e in edits] == [((0, 0),), ((1, 0),), ((2, 0),)]

    def test_sub_cell_motion_is_coalesced(self, grid):
        tool = PenTool()
        tool.on_press((1, 1), RED, grid)
        first = tool.on_move((2, 1), RED, grid)

        assert tool.on_move((2, 1), RED, grid) == []
        assert tool.on_move((2, 1), RED, grid) == []
        assert len(first) == 2

    def test_fast_drag_is_interpolated(self, grid):
        """Cells skipped between samples are filled in"""
        tool = PenTool()
        tool.on_press((0, 0), RED, grid)
        tool.on_move((0, 0), RED, grid)

        edits = tool.on_move((5, 0), RED, grid)

        assert [e.stroke[0] for e in edits] == [(1, 0), (2, 0), (3, 0), (4, 0), (5, 0)]

    def test_drag_outside_grid_is_clipped(self, grid):
        tool = PenTool()
        tool.on_press((6, 0), RED, grid)

        edits = tool.on_move((9, 0), RED, grid)

        assert [e.stroke[0] for e in edits] == [(6, 0), (7, 0)]

    def test_release_after_drag_adds_nothing(self, grid):
        tool = PenTool()
        tool.on_press((0, 0), RED, grid)
        tool.on_move((1, 0), RED, grid)

        assert tool.on_release((1, 0), RED, grid) == []

    def test_click_outside_grid(self, grid):
        tool = PenTool()
        tool.on_press((8, 8), RED, grid)
        assert tool.on_release((8, 8), RED, grid) == []

    def test_tool_does_not_paint_grid(self, grid):
        """Tools only describe edits, applying them is up to the caller"""
        tool = PenTool()
        tool.on_press((0, 0), RED, grid)
        tool.on_release((0, 0), RED, grid)

        assert grid.get(0, 0) == TRANSPARENT


class TestOtherTools:
    """Test eraser, fill, shape and picker tools"""

    def test_eraser_uses_transparent(self, grid):
        tool = EraserTool()
        tool.on_press((1, 1), RED, grid)
        edits = tool.on_release((1, 1), RED, grid)

        assert edits[0].color == TRANSPARENT

    def test_fill_region(self):
        grid = PixelGrid.create(3, 3, fill=BLACK)
        grid.set(1, 1, WHITE)

        edits = FillTool().on_release((0, 0), RED, grid)

        assert len(edits) == 1
        assert len(edits[0].stroke) == 8
        assert (1, 1) not in edits[0].stroke

    def test_fill_same_color_is_noop(self):
        grid = PixelGrid.create(3, 3, fill=RED)
        assert FillTool().on_release((0, 0), RED, grid) == []

    def test_clear_edit_covers_every_cell(self):
        grid = PixelGrid.create(3, 2, fill=RED)

        edit = clear_edit(grid)
        grid.paint(edit)

        assert edit.color == TRANSPARENT
        assert edit.stroke[:4] == ((0, 0), (1, 0), (2, 0), (0, 1))
        assert len(edit.stroke) == 6
        assert grid == PixelGrid.create(3, 2)

    def test_fill_outside_grid(self, grid):
        assert FillTool().on_release((-1, 0), RED, grid) == []

    def test_line_needs_two_clicks(self, grid):
        tool = LineTool()

        assert tool.on_release((0, 0), RED, grid) == []
        edits = tool.on_release((3, 3), RED, grid)

        assert len(edits) == 1
        assert edits[0].stroke == ((0, 0), (1, 1), (2, 2), (3, 3))
        assert tool.anchor is None

    def test_circle_is_clipped(self, grid):
        edits = CircleTool(radius=3).on_release((0, 0), RED, grid)

        assert len(edits) == 1
        assert all(grid.in_bounds(x, y) for x, y in edits[0].stroke)
        assert (3, 0) in edits[0].stroke
        assert (0, 3) in edits[0].stroke

    def test_circle_fully_outside(self, grid):
        assert CircleTool(radius=2).on_release((20, 20), RED, grid) == []

    def test_ellipse_single_edit(self):
        grid = PixelGrid.create(20, 20)
        edits = EllipseTool(6, 3).on_release((10, 10), RED, grid)

        assert len(edits) == 1
        assert (16, 10) in edits[0].stroke
        assert (10, 7) in edits[0].stroke
        assert len(set(edits[0].stroke)) == len(edits[0].stroke)

    def test_picker_reports_color(self, grid):
        grid.set(4, 4, RED)
        tool = ColorPickerTool()
        tool.picked_callback = MagicMock()

        assert tool.on_release((4, 4), BLACK, grid) == []
        tool.picked_callback.assert_called_once_with(RED)


class TestToolManager:
    """Test the ToolManager class"""

    def test_defaults(self):
        manager = ToolManager()

        assert manager.current_tool == ToolType.PEN
        assert manager.current_tool_name == "pen"
        assert isinstance(manager.get_tool(), PenTool)

    def test_set_tool_by_name(self):
        manager = ToolManager()

        manager.set_tool("Fill")
        assert manager.current_tool == ToolType.FILL

        manager.set_tool(ToolType.ELLIPSE)
        assert isinstance(manager.get_tool(), EllipseTool)

    def test_unknown_tool(self):
        with pytest.raises(ValueError):
            ToolManager().set_tool("spray")

    def test_set_color_validates(self):
        manager = ToolManager()

        manager.set_color([10, 20, 30, 40])
        assert manager.current_color == (10, 20, 30, 40)

        with pytest.raises(ValidationError):
            manager.set_color((1, 2))

    def test_picker_updates_current_color(self, grid):
        grid.set(0, 0, RED)
        manager = ToolManager()
        manager.set_tool("picker")

        manager.get_tool().on_release((0, 0), manager.current_color, grid)

        assert manager.current_color == RED

    def test_shape_parameters(self):
        manager = ToolManager()
        manager.set_circle_radius(7)
        manager.set_ellipse_radii(2, 5)

        assert manager.get_tool(ToolType.CIRCLE).radius == 7
        assert manager.get_tool(ToolType.ELLIPSE).radius_y == 5

        with pytest.raises(ValidationError):
            manager.set_circle_radius(-1)
