#!/usr/bin/env python3
"""
Message channel between a document and its drawing surfaces

Messages are plain dictionaries with a "type" key. A SurfaceChannel carries
them in both directions as Qt signals, and a RequestBroker matches "getBytes"
requests to their "response" messages by request id.
"""

# Standard library imports
from enum import Enum
from typing import Any, Callable, Optional

# Third-party imports
from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .pixeledit_constants import REQUEST_TIMEOUT_MS
from .pixeledit_exceptions import NoActiveSurfaceError, ProtocolError, SurfaceTimeoutError
from .pixeledit_utils import debug_log


class MessageType(str, Enum):
    """Message types understood on a surface channel"""

    # surface -> core
    READY = "ready"
    EDIT = "edit"
    RESPONSE = "response"
    # core -> surface
    INIT = "init"
    NEW = "new"
    UPDATE = "update"
    GET_BYTES = "getBytes"


def message_type(message: Any) -> MessageType:
    """Get the type of a message

    Raises:
        ProtocolError: If the message is not a dict with a known type
    """
    if not isinstance(message, dict) or "type" not in message:
        raise ProtocolError(f"Malformed message: {message!r}")
    try:
        return MessageType(message["type"])
    except ValueError as e:
        raise ProtocolError(f"Unknown message type: {message['type']!r}") from e


def ready_message() -> dict[str, Any]:
    return {"type": MessageType.READY.value}


def edit_message(edit: dict[str, Any]) -> dict[str, Any]:
    return {"type": MessageType.EDIT.value, "edit": edit}


def response_message(request_id: int, body: str) -> dict[str, Any]:
    return {"type": MessageType.RESPONSE.value, "requestId": request_id, "body": body}


def init_message(
    data_uri: str, edits: list[dict[str, Any]], editable: bool = True
) -> dict[str, Any]:
    return {
        "type": MessageType.INIT.value,
        "dataUri": data_uri,
        "edits": edits,
        "editable": editable,
    }


def new_message(width: int, height: int) -> dict[str, Any]:
    return {"type": MessageType.NEW.value, "width": width, "height": height}


def update_message(data_uri: Optional[str], edits: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": MessageType.UPDATE.value, "doc": {"dataUri": data_uri, "edits": edits}}


def get_bytes_message(request_id: int) -> dict[str, Any]:
    return {"type": MessageType.GET_BYTES.value, "requestId": request_id}


class SurfaceChannel(QObject):
    """Two-way message pipe between the core and one drawing surface"""

    # Signals
    toSurface = pyqtSignal(object)  # message for the surface
    toCore = pyqtSignal(object)  # message for the core
    closed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def post_to_surface(self, message: dict[str, Any]) -> bool:
        """Send a message to the surface, returns False once closed"""
        if self._closed:
            debug_log("CHANNEL", f"Dropping {message.get('type')} for closed surface", "DEBUG")
            return False
        self.toSurface.emit(message)
        return True

    def post_to_core(self, message: dict[str, Any]) -> bool:
        """Send a message to the core, returns False once closed"""
        if self._closed:
            return False
        self.toCore.emit(message)
        return True

    def close(self) -> None:
        """Detach the surface; later posts are dropped"""
        if self._closed:
            return
        self._closed = True
        self.closed.emit()


class _PendingRequest:
    def __init__(self, channel, on_response, on_error, timer):
        self.channel: SurfaceChannel = channel
        self.on_response: Callable[[str], None] = on_response
        self.on_error: Callable[[Exception], None] = on_error
        self.timer: QTimer = timer


class RequestBroker(QObject):
    """
    Correlates byte requests with surface responses

    Every request gets the next id from a counter owned by the broker. The
    pending entry is removed when the response arrives, when the timeout
    fires, or when the surface it was sent to is closed. Exactly one of the
    two callbacks runs per request.
    """

    def __init__(self, timeout_ms: int = REQUEST_TIMEOUT_MS, parent=None):
        super().__init__(parent)
        self.timeout_ms = timeout_ms
        self._next_id = 1
        self._pending: dict[int, _PendingRequest] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def request(
        self,
        channel: SurfaceChannel,
        on_response: Callable[[str], None],
        on_error: Callable[[Exception], None],
    ) -> int:
        """Ask a surface for its current bytes

        Returns:
            The request id
        """
        request_id = self._next_id
        self._next_id += 1

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._on_timeout(request_id))

        # Registered before posting, the surface may answer synchronously
        self._pending[request_id] = _PendingRequest(channel, on_response, on_error, timer)
        timer.start(self.timeout_ms)

        debug_log("BROKER", f"Requesting bytes, id={request_id}", "DEBUG")
        if not channel.post_to_surface(get_bytes_message(request_id)):
            self._fail(request_id, NoActiveSurfaceError("Drawing surface is closed"))
        return request_id

    def handle_response(self, request_id: Any, body: Any) -> bool:
        """Resolve a pending request, returns False for unknown ids

        Raises:
            ProtocolError: If the id is not an integer
        """
        if isinstance(request_id, bool) or not isinstance(request_id, int):
            raise ProtocolError(f"Invalid request id: {request_id!r}")
        pending = self._pending.pop(request_id, None)
        if pending is None:
            debug_log("BROKER", f"No pending request for id={request_id!r}", "WARNING")
            return False

        pending.timer.stop()
        pending.timer.deleteLater()
        if not isinstance(body, str):
            pending.on_error(ProtocolError(f"Response {request_id} has no body"))
        else:
            pending.on_response(body)
        return True

    def fail_channel(self, channel: SurfaceChannel) -> int:
        """Fail every request waiting on a channel, returns how many"""
        request_ids = [rid for rid, p in self._pending.items() if p.channel is channel]
        for request_id in request_ids:
            self._fail(request_id, NoActiveSurfaceError("Drawing surface was closed"))
        return len(request_ids)

    def _on_timeout(self, request_id: int) -> None:
        debug_log("BROKER", f"Request {request_id} timed out", "WARNING")
        self._fail(
            request_id,
            SurfaceTimeoutError(
                f"No response to request {request_id} within {self.timeout_ms} ms"
            ),
        )

    def _fail(self, request_id: int, error: Exception) -> None:
        pending = self._pending.pop(request_id, None)
        if pending is None:
            return
        pending.timer.stop()
        pending.timer.deleteLater()
        pending.on_error(error)
