#!/usr/bin/env python3
"""WebSocket bridge to a remote recognizer.

The recognizer itself runs elsewhere (typically a browser page using the Web
Speech API). It forwards its events to us as JSON text frames and accepts
start/stop control frames:

    <- {"type": "result", "alternatives": [{"transcript": "...", "isFinal": true}], "isFinal": true}
    <- {"type": "error", "error": "no-speech"}
    <- {"type": "end"}
    -> {"type": "start", "language": "te-IN"}
    -> {"type": "stop"}

Losing the connection is reported as a "network" error followed by "end".
"""

import asyncio
import json
import logging
import ssl

import websockets
from pydantic import ValidationError

from .events import EndEvent, ErrorEvent, parse_event
from .protocol import RecognitionEventCallback

logger = logging.getLogger(__name__)


class WebSocketRecognizer:
    """RecognitionEngine backed by a WebSocket connection."""

    def __init__(self, websocket_url: str):
        self.websocket_url = websocket_url
        self.websocket = None
        self.running = False
        self._closing = False

        self._callback: RecognitionEventCallback | None = None
        self._listener_task: asyncio.Task | None = None
        self._send_tasks: set[asyncio.Task] = set()

        logger.info(f"WebSocket recognizer initialized for {websocket_url}")

    def _is_websocket_closed(self) -> bool:
        """Check if WebSocket connection is closed."""
        if not self.websocket:
            return True
        if hasattr(self.websocket, "closed") and self.websocket.closed:
            return True
        if hasattr(self.websocket, "close_code") and self.websocket.close_code is not None:
            return True
        return False

    async def connect(self) -> None:
        """Connect to the recognizer and start listening for its events."""
        ssl_context = None
        if self.websocket_url.startswith("wss://"):
            ssl_context = ssl.create_default_context()

        try:
            self.websocket = await websockets.connect(self.websocket_url, ssl=ssl_context)
        except Exception as e:
            logger.error(f"Failed to connect: {e}")
            raise
        logger.info("Connected to recognizer")
        self._listener_task = asyncio.create_task(self._listen())

    async def close(self) -> None:
        """Close the connection and stop the listener."""
        self._closing = True
        self.running = False
        if self._listener_task:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass
            self._listener_task = None
        if self.websocket is not None:
            await self.websocket.close()
            self.websocket = None

    def bind(self, callback: RecognitionEventCallback) -> None:
        self._callback = callback

    def start(self, language: str) -> None:
        if self._is_websocket_closed():
            raise RuntimeError("WebSocket connection is closed - cannot start recognition")
        if self.running:
            raise RuntimeError("Recognition already started")
        self.running = True
        self._send({"type": "start", "language": language})

    def stop(self) -> None:
        self.running = False
        if not self._is_websocket_closed():
            self._send({"type": "stop"})

    def _send(self, message: dict) -> None:
        task = asyncio.get_running_loop().create_task(self._send_message(message))
        self._send_tasks.add(task)
        task.add_done_callback(self._send_tasks.discard)

    async def _send_message(self, message: dict) -> None:
        if self.websocket is None:
            return
        try:
            await self.websocket.send(json.dumps(message))
        except websockets.exceptions.ConnectionClosed:
            logger.warning(f"Connection closed before '{message['type']}' was sent")

    def _dispatch(self, event) -> None:
        if isinstance(event, (ErrorEvent, EndEvent)):
            self.running = False
        if self._callback is not None:
            self._callback(event)

    async def _listen(self) -> None:
        """Background task delivering recognizer events in arrival order."""
        logger.debug("Starting event listener")
        try:
            async for message in self.websocket:
                try:
                    event = parse_event(message)
                except json.JSONDecodeError as e:
                    logger.warning(f"Invalid JSON received: {e}")
                    continue
                except ValidationError as e:
                    logger.warning(f"Ignoring unknown message: {e.error_count()} validation errors")
                    continue
                self._dispatch(event)
        except websockets.exceptions.ConnectionClosed as e:
            logger.warning(f"Connection to recognizer lost: {e}")
        finally:
            logger.debug("Event listener stopped")

        if not self._closing:
            self._dispatch(ErrorEvent(code="network", message="Connection to recognizer lost"))
            self._dispatch(EndEvent())
