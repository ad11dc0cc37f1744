#!/usr/bin/env python3
"""
Document model for the pixel art editor

A PixelArtDocument owns the bytes a document was opened from and the edit
history on top of them. It reports every applied edit to the host, rebuilds
its grid on undo, redo and revert, and persists bytes supplied by a drawing
surface through its delegate.

Persistence calls return a PendingOperation instead of blocking. The
operation ends exactly once: finished, failed or cancelled.
"""

# Standard library imports
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Protocol

# Third-party imports
from PyQt6.QtCore import QObject, pyqtSignal

from .pixeledit_codec import decode_image, to_data_uri
from .pixeledit_commands import EditHistory
from .pixeledit_constants import EDIT_LABEL
from .pixeledit_exceptions import (
    BackupDeleteError,
    FileOperationError,
    PixelEditError,
    format_error_message,
)
from .pixeledit_models import Edit, PixelGrid
from .pixeledit_settings import SettingsManager, get_settings
from .pixeledit_storage import FileStorage, Uri, is_untitled
from .pixeledit_utils import debug_exception, debug_log


class DocumentState(Enum):
    CLEAN = "clean"
    DIRTY = "dirty"


class CancellationToken:
    """Flag a caller sets to abandon a persistence operation"""

    def __init__(self):
        self._requested = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._requested

    def cancel(self) -> None:
        self._requested = True


class DocumentDelegate(Protocol):
    """Supplies the bytes of the document as currently drawn"""

    def get_file_data(
        self,
        document: "PixelArtDocument",
        on_data: Callable[[bytes], None],
        on_error: Callable[[Exception], None],
    ) -> None: ...


@dataclass
class EditEvent:
    """Notification for one applied edit, with host-side undo/redo hooks"""

    document: "PixelArtDocument"
    label: str
    edit: Edit
    undo: Callable[[], Any]
    redo: Callable[[], Any]


@dataclass
class ContentChange:
    """Content to re-render; content is None when the base bytes are unchanged"""

    content: Optional[bytes]
    edits: list[Edit]


@dataclass
class Backup:
    """A backup copy written for crash recovery"""

    id: str
    storage: FileStorage = field(repr=False)

    def delete(self) -> None:
        """Remove the backup copy; failures are logged and ignored"""
        try:
            self.storage.delete(self.id)
        except BackupDeleteError as e:
            debug_log("DOCUMENT", f"Backup not deleted: {e}", "WARNING")


class PendingOperation(QObject):
    """Result of an asynchronous persistence call"""

    # Signals
    finished = pyqtSignal(object)  # result
    failed = pyqtSignal(str)  # user-visible message
    cancelled = pyqtSignal()

    def __init__(self, name: str, parent=None):
        super().__init__(parent)
        self.name = name
        self.is_done = False
        self.result: Any = None
        self.error: Optional[Exception] = None
        self.error_message = ""
        self.was_cancelled = False
        self._callbacks: list[Callable[["PendingOperation"], None]] = []

    @property
    def succeeded(self) -> bool:
        return self.is_done and self.error is None and not self.was_cancelled

    def add_done_callback(self, callback: Callable[["PendingOperation"], None]) -> None:
        """Run callback when the operation ends, or now if it already has"""
        if self.is_done:
            callback(self)
        else:
            self._callbacks.append(callback)

    def finish(self, result: Any = None) -> None:
        if self._complete():
            self.result = result
            self.finished.emit(result)
            self._run_callbacks()

    def fail(self, error: Exception) -> None:
        if self._complete():
            self.error = error
            self.error_message = format_error_message(self.name, error)
            debug_log("DOCUMENT", f"{self.name} failed: {error}", "ERROR")
            self.failed.emit(self.error_message)
            self._run_callbacks()

    def cancel(self) -> None:
        if self._complete():
            self.was_cancelled = True
            debug_log("DOCUMENT", f"{self.name} cancelled")
            self.cancelled.emit()
            self._run_callbacks()

    def _complete(self) -> bool:
        if self.is_done:
            debug_log("DOCUMENT", f"{self.name} already completed", "DEBUG")
            return False
        self.is_done = True
        return True

    def _run_callbacks(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self)


class PixelArtDocument(QObject):
    """One open image and its edits"""

    # Signals
    changed = pyqtSignal(object)  # EditEvent
    contentChanged = pyqtSignal(object)  # ContentChange
    dirtyChanged = pyqtSignal(bool)
    disposed = pyqtSignal()

    def __init__(
        self,
        uri: Uri,
        data: bytes,
        delegate: DocumentDelegate,
        storage: Optional[FileStorage] = None,
        settings: Optional[SettingsManager] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.uri = uri
        self.data = data
        self.delegate = delegate
        self.storage = storage or FileStorage()
        self.settings = settings or get_settings()
        self.history = EditHistory(self._decode(data))
        self.is_disposed = False
        self._was_dirty = False

    @classmethod
    def create(
        cls,
        uri: Uri,
        backup_id: Optional[str],
        delegate: DocumentDelegate,
        storage: Optional[FileStorage] = None,
        settings: Optional[SettingsManager] = None,
    ) -> "PixelArtDocument":
        """Open a document, from its backup copy when one is given

        Raises:
            ReadError: If the bytes cannot be read
            ImageFormatError: If the bytes are not an image
        """
        storage = storage or FileStorage()
        source = backup_id if backup_id else uri
        debug_log("DOCUMENT", f"Opening {uri} from {source}")
        data = storage.read_file(source)
        return cls(uri, data, delegate, storage, settings)

    def _decode(self, data: bytes) -> PixelGrid:
        max_dimension = int(self.settings.get("max_image_dimension"))
        if not data:
            width, height = self.settings.get_new_image_size()
            return PixelGrid.create(width, height, max_dimension=max_dimension)
        return decode_image(data, max_dimension)

    # Properties
    @property
    def grid(self) -> PixelGrid:
        return self.history.grid

    @property
    def base_grid(self) -> PixelGrid:
        return self.history.base

    @property
    def edits(self) -> list[Edit]:
        return list(self.history.edits)

    @property
    def saved_edits(self) -> list[Edit]:
        return list(self.history.saved_edits)

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    @property
    def is_dirty(self) -> bool:
        return self.history.is_dirty

    @property
    def state(self) -> DocumentState:
        return DocumentState.DIRTY if self.is_dirty else DocumentState.CLEAN

    @property
    def is_untitled(self) -> bool:
        return is_untitled(self.uri)

    @property
    def editable(self) -> bool:
        return self.storage.is_writable(self.uri)

    def base_data_uri(self) -> Optional[str]:
        """Data URI of the bytes the document was loaded from, None when empty"""
        return to_data_uri(self.data) if self.data else None

    # Edit operations
    def apply_edit(self, edit: Edit, label: str = EDIT_LABEL) -> None:
        """Apply an edit made on a drawing surface and report it to the host"""
        self.history.apply(edit)
        debug_log(
            "DOCUMENT",
            f"Applied edit: color={edit.color}, {len(edit.stroke)} cells",
            "DEBUG",
        )
        self.changed.emit(EditEvent(self, label, edit, self.undo, self.redo))
        self._update_dirty()

    def undo(self) -> bool:
        if self.history.undo() is None:
            return False
        self._fire_content_change(None)
        return True

    def redo(self) -> bool:
        if self.history.redo() is None:
            return False
        self._fire_content_change(None)
        return True

    def _fire_content_change(self, content: Optional[bytes]) -> None:
        self.contentChanged.emit(ContentChange(content, self.edits))
        self._update_dirty()

    def _update_dirty(self) -> None:
        dirty = self.is_dirty
        if dirty != self._was_dirty:
            self._was_dirty = dirty
            self.dirtyChanged.emit(dirty)

    # Persistence
    def save(self, cancellation: Optional[CancellationToken] = None) -> PendingOperation:
        """Write the drawn bytes to the document's own uri and mark it clean"""
        operation = PendingOperation("save")

        def on_written(_destination):
            self.history.mark_saved()
            self._update_dirty()
            operation.finish(self.uri)

        self._persist(self.uri, cancellation, operation, on_written)
        return operation

    def save_as(
        self, destination: Uri, cancellation: Optional[CancellationToken] = None
    ) -> PendingOperation:
        """Write the drawn bytes to another uri, saved state is untouched"""
        operation = PendingOperation("save as")
        self._persist(destination, cancellation, operation, operation.finish)
        return operation

    def backup(
        self, destination: Uri, cancellation: Optional[CancellationToken] = None
    ) -> PendingOperation:
        """Write a crash-recovery copy, the result is a Backup"""
        operation = PendingOperation("back up")
        self._persist(
            destination,
            cancellation,
            operation,
            lambda written: operation.finish(Backup(str(written), self.storage)),
        )
        return operation

    def revert(self, cancellation: Optional[CancellationToken] = None) -> PendingOperation:
        """Reload the backing bytes and replay the saved edits onto them"""
        operation = PendingOperation("revert")
        if cancellation is not None and cancellation.is_cancellation_requested:
            operation.cancel()
            return operation

        try:
            data = self.storage.read_file(self.uri)
            if data:
                base = self._decode(data)
            else:
                base = PixelGrid.create(self.base_grid.width, self.base_grid.height)
        except FileOperationError as e:
            operation.fail(e)
            return operation

        self.data = data
        self.history.revert(base)
        debug_log("DOCUMENT", f"Reverted {self.uri} to {len(self.history.edits)} saved edits")
        self._fire_content_change(data)
        operation.finish(self.uri)
        return operation

    def _persist(
        self,
        destination: Uri,
        cancellation: Optional[CancellationToken],
        operation: PendingOperation,
        on_written: Callable[[Uri], None],
    ) -> None:
        if cancellation is not None and cancellation.is_cancellation_requested:
            operation.cancel()
            return

        def on_data(data: bytes) -> None:
            # The surface may take a while, check again before writing
            if cancellation is not None and cancellation.is_cancellation_requested:
                operation.cancel()
                return
            try:
                self.storage.write_file(destination, data)
            except FileOperationError as e:
                operation.fail(e)
                return
            debug_log("DOCUMENT", f"Wrote {self.uri} to {destination}")
            on_written(destination)

        def on_error(error: Exception) -> None:
            if not isinstance(error, PixelEditError):
                debug_exception("DOCUMENT", error)
            operation.fail(error)

        self.delegate.get_file_data(self, on_data, on_error)

    def dispose(self) -> None:
        if self.is_disposed:
            return
        self.is_disposed = True
        debug_log("DOCUMENT", f"Disposed {self.uri}", "DEBUG")
        self.disposed.emit()
