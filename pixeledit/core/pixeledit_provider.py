#!/usr/bin/env python3
"""
Editor provider for the pixel art editor

Implements the document lifecycle a host application drives: open, attach a
drawing surface, save, save as, revert and back up. Bytes for persistence
are requested from the first surface attached to the document.
"""

# Standard library imports
from dataclasses import dataclass
from typing import Any, Callable, Optional

# Third-party imports
from PyQt6.QtCore import QObject, pyqtSignal

from .pixeledit_codec import from_data_uri, to_data_uri
from .pixeledit_constants import NEW_FILE_TEMPLATE, UNTITLED_SCHEME
from .pixeledit_document import CancellationToken, ContentChange, PendingOperation, PixelArtDocument
from .pixeledit_exceptions import ImageFormatError, NoActiveSurfaceError, PixelEditError
from .pixeledit_logging import setup_logging_once
from .pixeledit_messaging import (
    MessageType,
    RequestBroker,
    SurfaceChannel,
    init_message,
    message_type,
    new_message,
    update_message,
)
from .pixeledit_models import Edit
from .pixeledit_settings import SettingsManager, get_settings
from .pixeledit_storage import FileStorage, Uri
from .pixeledit_utils import debug_log


@dataclass
class BackupContext:
    """Where the host wants a backup written"""

    destination: Uri


class SurfaceCollection:
    """Drawing surfaces attached to each document uri"""

    def __init__(self):
        self._channels: dict[str, list[SurfaceChannel]] = {}

    def get(self, uri: Uri) -> list[SurfaceChannel]:
        return list(self._channels.get(str(uri), []))

    def add(self, uri: Uri, channel: SurfaceChannel) -> None:
        self._channels.setdefault(str(uri), []).append(channel)

    def remove(self, uri: Uri, channel: SurfaceChannel) -> None:
        channels = self._channels.get(str(uri), [])
        if channel in channels:
            channels.remove(channel)
        if not channels:
            self._channels.pop(str(uri), None)

    def discard(self, uri: Uri) -> None:
        self._channels.pop(str(uri), None)


class PixelEditorProvider(QObject):
    """Host-facing entry point for pixel art documents"""

    # Signals
    documentChanged = pyqtSignal(object)  # EditEvent

    def __init__(
        self,
        storage: Optional[FileStorage] = None,
        settings: Optional[SettingsManager] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.storage = storage or FileStorage()
        self.settings = settings or get_settings()
        setup_logging_once(str(self.settings.get("log_level", "INFO")))
        self.broker = RequestBroker(int(self.settings.get("request_timeout_ms")), self)
        self.surfaces = SurfaceCollection()
        self._next_untitled = 1

    def new_untitled_uri(self, workspace: str) -> str:
        """Uri for a new unsaved document inside a workspace folder"""
        name = NEW_FILE_TEMPLATE.format(index=self._next_untitled)
        self._next_untitled += 1
        return f"{UNTITLED_SCHEME}:{workspace.rstrip('/')}/{name}"

    # Document lifecycle
    def open_document(self, uri: Uri, backup_id: Optional[str] = None) -> PixelArtDocument:
        """Open a document, resuming from a backup when one is given

        Raises:
            ReadError: If the bytes cannot be read
            ImageFormatError: If the bytes are not an image
        """
        document = PixelArtDocument.create(
            uri, backup_id, self, self.storage, self.settings
        )
        document.changed.connect(self.documentChanged)
        document.contentChanged.connect(
            lambda change: self._broadcast_update(document, change)
        )
        document.disposed.connect(lambda: self.surfaces.discard(document.uri))

        if not document.is_untitled:
            self.settings.add_recent_file(str(uri))
        debug_log("PROVIDER", f"Opened {uri} ({document.width}x{document.height})")
        return document

    def resolve_editor(self, document: PixelArtDocument, channel: SurfaceChannel) -> None:
        """Attach a drawing surface to a document"""
        self.surfaces.add(document.uri, channel)
        channel.toCore.connect(
            lambda message: self._on_message(document, channel, message)
        )
        channel.closed.connect(lambda: self._on_surface_closed(document, channel))

    def save_document(
        self, document: PixelArtDocument, cancellation: Optional[CancellationToken] = None
    ) -> PendingOperation:
        return document.save(cancellation)

    def save_document_as(
        self,
        document: PixelArtDocument,
        destination: Uri,
        cancellation: Optional[CancellationToken] = None,
    ) -> PendingOperation:
        return document.save_as(destination, cancellation)

    def revert_document(
        self, document: PixelArtDocument, cancellation: Optional[CancellationToken] = None
    ) -> PendingOperation:
        return document.revert(cancellation)

    def backup_document(
        self,
        document: PixelArtDocument,
        context: BackupContext,
        cancellation: Optional[CancellationToken] = None,
    ) -> PendingOperation:
        return document.backup(context.destination, cancellation)

    # Document delegate
    def get_file_data(
        self,
        document: PixelArtDocument,
        on_data: Callable[[bytes], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        """Fetch the drawn bytes of a document from its first surface"""
        channels = self.surfaces.get(document.uri)
        if not channels:
            on_error(NoActiveSurfaceError(f"No drawing surface is open for {document.uri}"))
            return

        def on_response(body: str) -> None:
            try:
                data = from_data_uri(body)
            except ImageFormatError as e:
                on_error(e)
                return
            on_data(data)

        self.broker.request(channels[0], on_response, on_error)

    # Surface messages
    def _on_message(
        self, document: PixelArtDocument, channel: SurfaceChannel, message: Any
    ) -> None:
        try:
            kind = message_type(message)
            if kind == MessageType.READY:
                self._init_surface(document, channel)
            elif kind == MessageType.EDIT:
                document.apply_edit(Edit.from_dict(message.get("edit")))
            elif kind == MessageType.RESPONSE:
                self.broker.handle_response(message.get("requestId"), message.get("body"))
            else:
                debug_log("PROVIDER", f"Unexpected {kind.value} message from surface", "WARNING")
        except PixelEditError as e:
            debug_log("PROVIDER", f"Rejected surface message {message!r}: {e}", "WARNING")

    def _init_surface(self, document: PixelArtDocument, channel: SurfaceChannel) -> None:
        edits = document.history.save_history()
        data_uri = document.base_data_uri()
        if data_uri is None:
            channel.post_to_surface(new_message(document.width, document.height))
            if edits:
                channel.post_to_surface(update_message(None, edits))
        else:
            channel.post_to_surface(init_message(data_uri, edits, document.editable))

    def _broadcast_update(self, document: PixelArtDocument, change: ContentChange) -> None:
        data_uri = to_data_uri(change.content) if change.content else None
        message = update_message(data_uri, [edit.to_dict() for edit in change.edits])
        for channel in self.surfaces.get(document.uri):
            channel.post_to_surface(message)

    def _on_surface_closed(self, document: PixelArtDocument, channel: SurfaceChannel) -> None:
        self.surfaces.remove(document.uri, channel)
        failed = self.broker.fail_channel(channel)
        debug_log(
            "PROVIDER",
            f"Surface closed for {document.uri}, {failed} pending requests failed",
            "DEBUG",
        )
