#!/usr/bin/env python3
"""
Drawing surface for the pixel art editor

The surface keeps its own replica of a document's grid. Pointer input runs
through the current tool, edits are applied locally and posted to the core,
and the core's init/new/update/getBytes messages keep the replica in sync.
"""

# Standard library imports
from typing import Any, Optional

# Third-party imports
from PyQt6.QtCore import QObject, pyqtSignal

from .pixeledit_codec import grid_from_data_uri, grid_to_data_uri
from .pixeledit_commands import EditHistory
from .pixeledit_exceptions import NoActiveSurfaceError, PixelEditError, ValidationError
from .pixeledit_constants import MAX_CHANNEL_VALUE, MIN_CHANNEL_VALUE
from .pixeledit_managers import ToolManager, clear_edit, pointer_to_cell
from .pixeledit_messaging import (
    MessageType,
    SurfaceChannel,
    edit_message,
    message_type,
    ready_message,
    response_message,
)
from .pixeledit_models import Edit, PixelGrid
from .pixeledit_settings import SettingsManager, get_settings
from .pixeledit_utils import Color, debug_log


class PixelSurface(QObject):
    """Rendering-side view of one document"""

    # Signals
    gridChanged = pyqtSignal()
    colorChanged = pyqtSignal(object)  # RGBA tuple
    toolChanged = pyqtSignal(str)  # tool name

    def __init__(
        self,
        channel: SurfaceChannel,
        settings: Optional[SettingsManager] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.channel = channel
        self.settings = settings or get_settings()

        self.tool_manager = ToolManager()
        self.tool_manager.set_color(self.settings.get_default_color())
        self.tool_manager.set_circle_radius(int(self.settings.get("circle_radius")))
        self.tool_manager.set_ellipse_radii(
            int(self.settings.get("ellipse_radius_x")),
            int(self.settings.get("ellipse_radius_y")),
        )
        self.tool_manager.set_color_picked_callback(self.set_color)
        self.palette: list[Color] = self.settings.get_palette()
        self.cell_size = int(self.settings.get("cell_display_size"))

        self.history: Optional[EditHistory] = None
        self.editable = True
        self.client_width = 0
        self.client_height = 0
        self._pressed = False

        self.channel.toSurface.connect(self.handle_message)

    @property
    def grid(self) -> Optional[PixelGrid]:
        return self.history.grid if self.history else None

    @property
    def current_color(self) -> Color:
        return self.tool_manager.current_color

    def start(self) -> None:
        """Tell the core this surface can receive a document"""
        self.channel.post_to_core(ready_message())

    # Message handling
    def handle_message(self, message: Any) -> None:
        try:
            kind = message_type(message)
            if kind == MessageType.INIT:
                self._load(grid_from_data_uri(message["dataUri"]), message.get("edits", []))
                self.editable = bool(message.get("editable", True))
            elif kind == MessageType.NEW:
                grid = PixelGrid.create(int(message["width"]), int(message["height"]))
                self._load(grid, [])
            elif kind == MessageType.UPDATE:
                self._on_update(message.get("doc") or {})
            elif kind == MessageType.GET_BYTES:
                self.channel.post_to_core(
                    response_message(message["requestId"], self.export_data_uri())
                )
            else:
                debug_log("SURFACE", f"Ignoring {kind.value} message", "WARNING")
        except (PixelEditError, KeyError, TypeError, ValueError) as e:
            debug_log("SURFACE", f"Bad message {message!r}: {e}", "WARNING")

    def _on_update(self, doc: dict[str, Any]) -> None:
        data_uri = doc.get("dataUri")
        if data_uri:
            base = grid_from_data_uri(data_uri)
        elif self.history is not None:
            base = self.history.base
        else:
            raise NoActiveSurfaceError("Update received before the document was loaded")
        self._load(base, doc.get("edits", []))

    def _load(self, base: PixelGrid, edits: list[dict[str, Any]]) -> None:
        self.history = EditHistory(base)
        self.history.load_history(edits)
        self._pressed = False
        if self.client_width <= 0 or self.client_height <= 0:
            self.resize_client(base.width * self.cell_size, base.height * self.cell_size)
        debug_log(
            "SURFACE",
            f"Loaded {base.width}x{base.height} grid with {len(self.history.edits)} edits",
            "DEBUG",
        )
        self.gridChanged.emit()

    def export_data_uri(self) -> str:
        """Current grid as a PNG data URI

        Raises:
            NoActiveSurfaceError: If no document has been loaded yet
        """
        if self.history is None:
            raise NoActiveSurfaceError("No document loaded on this surface")
        return grid_to_data_uri(self.history.grid)

    # Pointer input, in device coordinates
    def resize_client(self, width: float, height: float) -> None:
        self.client_width = width
        self.client_height = height

    def pointer_press(self, px: float, py: float) -> list[Edit]:
        if not self._can_draw():
            return []
        self._pressed = True
        return self._dispatch("on_press", px, py)

    def pointer_move(self, px: float, py: float) -> list[Edit]:
        if not self._pressed or not self._can_draw():
            return []
        return self._dispatch("on_move", px, py)

    def pointer_release(self, px: float, py: float) -> list[Edit]:
        if not self._pressed or not self._can_draw():
            return []
        self._pressed = False
        return self._dispatch("on_release", px, py)

    def _can_draw(self) -> bool:
        return self.editable and self.history is not None

    def _dispatch(self, handler: str, px: float, py: float) -> list[Edit]:
        grid = self.history.grid
        cell = pointer_to_cell(
            px, py, grid.width, grid.height, self.client_width, self.client_height
        )
        tool = self.tool_manager.get_tool()
        edits = getattr(tool, handler)(cell, self.current_color, grid)
        for edit in edits:
            self._commit(edit)
        return edits

    def _commit(self, edit: Edit) -> None:
        self.history.apply(edit)
        self.channel.post_to_core(edit_message(edit.to_dict()))
        self.gridChanged.emit()

    # Tool state
    def set_tool(self, tool_type) -> None:
        self.tool_manager.set_tool(tool_type)
        self.toolChanged.emit(self.tool_manager.current_tool_name)

    def set_color(self, color: Color) -> None:
        self.tool_manager.set_color(color)
        self.colorChanged.emit(self.tool_manager.current_color)

    def select_palette_color(self, index: int, alpha: Optional[int] = None) -> Color:
        """Make a palette entry the current color, optionally with its own alpha"""
        if not 0 <= index < len(self.palette):
            raise ValidationError(
                f"Palette index {index} out of range (0-{len(self.palette) - 1})"
            )
        color = self.palette[index]
        if alpha is not None:
            if not MIN_CHANNEL_VALUE <= alpha <= MAX_CHANNEL_VALUE:
                raise ValidationError(f"Alpha must be 0-255, got {alpha}")
            color = (*color[:3], int(alpha))
        self.set_color(color)
        return self.current_color

    def clear(self) -> list[Edit]:
        """Reset every cell to transparent as one undoable edit"""
        if not self._can_draw():
            return []
        edit = clear_edit(self.history.grid)
        self._commit(edit)
        return [edit]

    def close(self) -> None:
        self.channel.close()
