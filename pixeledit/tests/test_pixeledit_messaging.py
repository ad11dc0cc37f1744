#!/usr/bin/env python3
"""
Tests for surface messages, the channel and request correlation
"""

import pytest

from pixeledit.core.pixeledit_exceptions import (
    NoActiveSurfaceError,
    ProtocolError,
    SurfaceTimeoutError,
)
from pixeledit.core.pixeledit_messaging import (
    MessageType,
    RequestBroker,
    SurfaceChannel,
    edit_message,
    get_bytes_message,
    init_message,
    message_type,
    new_message,
    ready_message,
    response_message,
    update_message,
)


class TestMessages:
    """Test message builders and type parsing"""

    def test_shapes(self):
        assert ready_message() == {"type": "ready"}
        assert edit_message({"color": [1, 2, 3, 4], "stroke": []}) == {
            "type": "edit",
            "edit": {"color": [1, 2, 3, 4], "stroke": []},
        }
        assert response_message(3, "body") == {
            "type": "response",
            "requestId": 3,
            "body": "body",
        }
        assert init_message("data:x", [], editable=False) == {
            "type": "init",
            "dataUri": "data:x",
            "edits": [],
            "editable": False,
        }
        assert new_message(16, 8) == {"type": "new", "width": 16, "height": 8}
        assert update_message(None, []) == {
            "type": "update",
            "doc": {"dataUri": None, "edits": []},
        }
        assert get_bytes_message(7) == {"type": "getBytes", "requestId": 7}

    def test_message_type(self):
        assert message_type({"type": "getBytes"}) is MessageType.GET_BYTES
        assert message_type(ready_message()) == "ready"

    @pytest.mark.parametrize("message", [None, {}, {"kind": "ready"}, {"type": "bogus"}])
    def test_bad_messages(self, message):
        with pytest.raises(ProtocolError):
            message_type(message)


class TestSurfaceChannel:
    """Test the SurfaceChannel class"""

    def test_posts_in_both_directions(self):
        channel = SurfaceChannel()
        to_surface, to_core = [], []
        channel.toSurface.connect(to_surface.append)
        channel.toCore.connect(to_core.append)

        assert channel.post_to_surface({"type": "new"})
        assert channel.post_to_core({"type": "ready"})

        assert to_surface == [{"type": "new"}]
        assert to_core == [{"type": "ready"}]

    def test_closed_channel_drops_messages(self):
        channel = SurfaceChannel()
        received = []
        closed = []
        channel.toSurface.connect(received.append)
        channel.closed.connect(lambda: closed.append(True))

        channel.close()
        channel.close()

        assert channel.is_closed
        assert closed == [True]
        assert channel.post_to_surface({"type": "new"}) is False
        assert received == []


class _Recorder:
    def __init__(self):
        self.responses = []
        self.errors = []

    def on_response(self, body):
        self.responses.append(body)

    def on_error(self, error):
        self.errors.append(error)


class TestRequestBroker:
    """Test request ids, responses, timeouts and closed surfaces"""

    def test_ids_increase(self):
        broker = RequestBroker()
        channel = SurfaceChannel()
        sent = []
        channel.toSurface.connect(sent.append)
        recorder = _Recorder()

        first = broker.request(channel, recorder.on_response, recorder.on_error)
        second = broker.request(channel, recorder.on_response, recorder.on_error)

        assert second > first
        assert [m["requestId"] for m in sent] == [first, second]
        assert all(m["type"] == "getBytes" for m in sent)
        assert broker.pending_count == 2

    def test_response_resolves_once(self):
        broker = RequestBroker()
        channel = SurfaceChannel()
        recorder = _Recorder()
        request_id = broker.request(channel, recorder.on_response, recorder.on_error)

        assert broker.handle_response(request_id, "payload") is True
        assert broker.handle_response(request_id, "again") is False

        assert recorder.responses == ["payload"]
        assert recorder.errors == []
        assert broker.pending_count == 0

    def test_unknown_id(self):
        assert RequestBroker().handle_response(99, "x") is False

    def test_invalid_id_leaves_pending(self):
        broker = RequestBroker()
        recorder = _Recorder()
        broker.request(SurfaceChannel(), recorder.on_response, recorder.on_error)

        for bad_id in ([1], "1", None, True):
            with pytest.raises(ProtocolError):
                broker.handle_response(bad_id, "x")

        assert broker.pending_count == 1
        assert recorder.responses == []

    def test_missing_body(self):
        broker = RequestBroker()
        recorder = _Recorder()
        request_id = broker.request(SurfaceChannel(), recorder.on_response, recorder.on_error)

        broker.handle_response(request_id, None)

        assert isinstance(recorder.errors[0], ProtocolError)

    def test_synchronous_answer(self):
        """A surface answering inside the post is still matched"""
        broker = RequestBroker()
        channel = SurfaceChannel()
        channel.toSurface.connect(
            lambda m: broker.handle_response(m["requestId"], "inline")
        )
        recorder = _Recorder()

        broker.request(channel, recorder.on_response, recorder.on_error)

        assert recorder.responses == ["inline"]
        assert broker.pending_count == 0

    def test_timeout(self, qtbot):
        broker = RequestBroker(timeout_ms=20)
        recorder = _Recorder()
        broker.request(SurfaceChannel(), recorder.on_response, recorder.on_error)

        qtbot.waitUntil(lambda: len(recorder.errors) > 0, timeout=2000)

        assert isinstance(recorder.errors[0], SurfaceTimeoutError)
        assert broker.pending_count == 0

    def test_late_response_after_timeout(self, qtbot):
        broker = RequestBroker(timeout_ms=20)
        recorder = _Recorder()
        request_id = broker.request(SurfaceChannel(), recorder.on_response, recorder.on_error)
        qtbot.waitUntil(lambda: len(recorder.errors) > 0, timeout=2000)

        assert broker.handle_response(request_id, "late") is False
        assert recorder.responses == []

    def test_no_timeout_after_response(self, qtbot):
        broker = RequestBroker(timeout_ms=20)
        recorder = _Recorder()
        request_id = broker.request(SurfaceChannel(), recorder.on_response, recorder.on_error)
        broker.handle_response(request_id, "ok")

        qtbot.wait(100)

        assert recorder.errors == []

    def test_fail_channel(self):
        broker = RequestBroker()
        closing, other = SurfaceChannel(), SurfaceChannel()
        recorder = _Recorder()
        broker.request(closing, recorder.on_response, recorder.on_error)
        broker.request(other, recorder.on_response, recorder.on_error)

        assert broker.fail_channel(closing) == 1

        assert len(recorder.errors) == 1
        assert isinstance(recorder.errors[0], NoActiveSurfaceError)
        assert broker.pending_count == 1

    def test_closed_channel_fails_immediately(self):
        broker = RequestBroker()
        channel = SurfaceChannel()
        channel.close()
        recorder = _Recorder()

        broker.request(channel, recorder.on_response, recorder.on_error)

        assert isinstance(recorder.errors[0], NoActiveSurfaceError)
        assert broker.pending_count == 0
