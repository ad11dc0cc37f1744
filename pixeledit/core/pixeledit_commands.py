"""
Edit history for the pixel art editor.

The history keeps the base grid a document was loaded from and the linear
list of edits applied on top of it. Undo pops the last edit and rebuilds the
current grid by replaying the remaining edits onto a copy of the base, so the
result is always identical to painting the edit list in order.
"""

# Standard library imports
from typing import Any, Optional

from .pixeledit_exceptions import ValidationError
from .pixeledit_models import Edit, PixelGrid
from .pixeledit_utils import debug_log


def replay(base: PixelGrid, edits: list[Edit]) -> PixelGrid:
    """Paint edits in order onto a copy of the base grid"""
    grid = base.copy()
    for edit in edits:
        grid.paint(edit)
    return grid


class EditHistory:
    """Manages applied edits, pending redos and the last saved snapshot.

    Redo is only available right after undo: any newly applied edit
    discards every pending redo.
    """

    def __init__(self, base: PixelGrid, edits: Optional[list[Edit]] = None) -> None:
        """Initialize the history.

        Args:
            base: Grid decoded from the document's backing bytes
            edits: Edits already applied on top of the base
        """
        self.base: PixelGrid = base
        self.edits: list[Edit] = list(edits or [])
        self.saved_edits: list[Edit] = list(self.edits)
        self._redo_stack: list[Edit] = []
        self.grid: PixelGrid = replay(self.base, self.edits)

    @property
    def can_undo(self) -> bool:
        return bool(self.edits)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def is_dirty(self) -> bool:
        """True when the edit list differs from the last saved snapshot"""
        return self.edits != self.saved_edits

    def apply(self, edit: Edit) -> None:
        """Apply a new edit and add it to history.

        Args:
            edit: Edit to paint onto the current grid
        """
        self.edits.append(edit)
        self._redo_stack.clear()
        self.grid.paint(edit)

    def undo(self) -> Optional[Edit]:
        """Undo the last edit.

        Returns:
            The undone edit, or None if there was nothing to undo
        """
        if not self.edits:
            return None
        edit = self.edits.pop()
        self._redo_stack.append(edit)
        self.grid = replay(self.base, self.edits)
        return edit

    def redo(self) -> Optional[Edit]:
        """Redo the most recently undone edit.

        Returns:
            The redone edit, or None if there was nothing to redo
        """
        if not self._redo_stack:
            return None
        edit = self._redo_stack.pop()
        self.edits.append(edit)
        self.grid.paint(edit)
        return edit

    def mark_saved(self) -> None:
        """Snapshot the current edits as the saved state."""
        self.saved_edits = list(self.edits)

    def revert(self, base: PixelGrid) -> None:
        """Reset to the saved edits replayed onto a freshly loaded base.

        Args:
            base: Grid decoded from the backing bytes as they are now
        """
        self.base = base
        self.edits = list(self.saved_edits)
        self._redo_stack.clear()
        self.grid = replay(self.base, self.edits)

    def get_stats(self) -> dict[str, Any]:
        """Get current history statistics."""
        return {
            "edit_count": len(self.edits),
            "saved_count": len(self.saved_edits),
            "redo_count": len(self._redo_stack),
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "dirty": self.is_dirty,
        }

    def save_history(self) -> list[dict[str, Any]]:
        """Serialize the applied edits.

        Returns:
            List of serialized edits
        """
        return [edit.to_dict() for edit in self.edits]

    def load_history(self, history: list[dict[str, Any]]) -> None:
        """Replace the applied edits with serialized ones.

        Malformed entries are skipped. The loaded edits become the saved
        snapshot and redo is cleared.

        Args:
            history: List of serialized edits
        """
        edits = []
        for entry in history:
            try:
                edits.append(Edit.from_dict(entry))
            except ValidationError as e:
                debug_log("HISTORY", f"Skipping invalid edit: {e}", "WARNING")
                continue

        self.edits = edits
        self.saved_edits = list(edits)
        self._redo_stack.clear()
        self.grid = replay(self.base, self.edits)
