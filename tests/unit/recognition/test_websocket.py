"""Tests for the WebSocket recognizer bridge (no network)."""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from read_along.recognition.events import EndEvent, ErrorEvent, ResultEvent
from read_along.recognition.websocket import WebSocketRecognizer


class FakeWebSocket:
    """Minimal stand-in for a websockets client connection."""

    def __init__(self, messages=()):
        self.messages = list(messages)
        self.sent = []
        self.close_code = None

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for message in self.messages:
            yield message

    async def send(self, data):
        self.sent.append(json.loads(data))

    async def close(self):
        self.close_code = 1000


def result_message(text: str) -> str:
    return json.dumps({"type": "result", "isFinal": True, "alternatives": [{"transcript": text, "isFinal": True}]})


class TestControlMessages:
    """Test start/stop frames sent to the recognizer."""

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        recognizer = WebSocketRecognizer("ws://localhost:9")
        recognizer.websocket = FakeWebSocket()

        recognizer.start("te-IN")
        assert recognizer.running is True
        with pytest.raises(RuntimeError):
            recognizer.start("te-IN")

        recognizer.stop()
        await asyncio.sleep(0)
        assert recognizer.websocket.sent == [{"type": "start", "language": "te-IN"}, {"type": "stop"}]
        assert recognizer.running is False

    @pytest.mark.asyncio
    async def test_start_without_connection(self):
        recognizer = WebSocketRecognizer("ws://localhost:9")
        with pytest.raises(RuntimeError):
            recognizer.start("te-IN")

    @pytest.mark.asyncio
    async def test_connect_starts_listener(self):
        socket = FakeWebSocket([result_message("ka")])
        events = []
        recognizer = WebSocketRecognizer("ws://localhost:9")
        recognizer.bind(events.append)

        with patch("read_along.recognition.websocket.websockets.connect", AsyncMock(return_value=socket)) as connect:
            await recognizer.connect()
            await asyncio.sleep(0.01)
            await recognizer.close()

        connect.assert_awaited_once_with("ws://localhost:9", ssl=None)
        assert isinstance(events[0], ResultEvent)
        assert socket.close_code == 1000


class TestListener:
    """Test event delivery from the socket."""

    @pytest.mark.asyncio
    async def test_events_delivered_in_order(self):
        events = []
        recognizer = WebSocketRecognizer("ws://localhost:9")
        recognizer.bind(events.append)
        recognizer._closing = True
        recognizer.websocket = FakeWebSocket(
            [result_message("ka"), '{"type": "error", "error": "no-speech"}', '{"type": "end"}']
        )

        await recognizer._listen()
        assert [e.type for e in events] == ["result", "error", "end"]
        assert events[0].transcript == "ka"

    @pytest.mark.asyncio
    async def test_malformed_messages_skipped(self):
        events = []
        recognizer = WebSocketRecognizer("ws://localhost:9")
        recognizer.bind(events.append)
        recognizer._closing = True
        recognizer.websocket = FakeWebSocket(["{broken", '{"type": "speechstart"}', '{"type": "end"}'])

        await recognizer._listen()
        assert [e.type for e in events] == ["end"]

    @pytest.mark.asyncio
    async def test_lost_connection_reported_as_network_error(self):
        events = []
        recognizer = WebSocketRecognizer("ws://localhost:9")
        recognizer.bind(events.append)
        recognizer.websocket = FakeWebSocket([result_message("ka")])
        recognizer.running = True

        await recognizer._listen()
        assert isinstance(events[1], ErrorEvent)
        assert events[1].code == "network"
        assert isinstance(events[2], EndEvent)
        assert recognizer.running is False
