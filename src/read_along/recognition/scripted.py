"""Scripted recognizer that replays recorded recognition events.

Behaves like a browser recognizer: each start() plays events until an error
or end event, at which point the engine considers itself stopped and waits
for the next start(). Used for offline replay and in tests.
"""

import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .events import EndEvent, ErrorEvent, ResultEvent, parse_event
from .protocol import RecognitionEventCallback

logger = logging.getLogger(__name__)


@dataclass
class ScriptedStep:
    """One scripted event and the delay before it is emitted."""

    event: ResultEvent | ErrorEvent | EndEvent
    delay: float = 0.0


def load_script(path: str | Path) -> list[ScriptedStep]:
    """Load a JSON Lines replay file.

    Each non-blank line is one event object with an optional "delay" field
    (seconds before the event is emitted).
    """
    steps = []
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{line_number}: invalid JSON: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"{path}:{line_number}: expected an event object")
            delay = float(data.pop("delay", 0.0))
            steps.append(ScriptedStep(event=parse_event(data), delay=delay))
    return steps


class ScriptedRecognizer:
    """RecognitionEngine that replays a fixed list of events."""

    def __init__(
        self,
        steps: Iterable[ScriptedStep | ResultEvent | ErrorEvent | EndEvent] = (),
        fail_starts: int = 0,
        unsupported_languages: Iterable[str] = (),
    ):
        """Initialize the recognizer.

        Args:
            steps: Events to replay, optionally wrapped with a delay
            fail_starts: Number of upcoming start() calls that raise
            unsupported_languages: Languages that produce a
                language-not-supported error when started

        """
        self.steps = [s if isinstance(s, ScriptedStep) else ScriptedStep(event=s) for s in steps]
        self.fail_starts = fail_starts
        self.unsupported_languages = set(unsupported_languages)

        self.start_calls: list[str] = []
        self.stop_calls = 0
        self.running = False
        self.finished = asyncio.Event()

        self._callback: RecognitionEventCallback | None = None
        self._cursor = 0
        self._handle: asyncio.TimerHandle | None = None

    def bind(self, callback: RecognitionEventCallback) -> None:
        self._callback = callback

    def start(self, language: str) -> None:
        if self.running:
            raise RuntimeError("Recognition already started")
        if self.fail_starts > 0:
            self.fail_starts -= 1
            raise RuntimeError("Recognition could not start")

        self.start_calls.append(language)
        self.running = True
        loop = asyncio.get_running_loop()

        if language in self.unsupported_languages:
            self._handle = loop.call_soon(self._emit_run_error, ErrorEvent(code="language-not-supported"))
            return
        self._schedule_next(loop)

    def stop(self) -> None:
        self.stop_calls += 1
        self.running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self.steps)

    def emit(self, event: ResultEvent | ErrorEvent | EndEvent) -> None:
        """Deliver an event immediately, outside the script."""
        if isinstance(event, (ErrorEvent, EndEvent)):
            self.running = False
        if self._callback is not None:
            self._callback(event)

    def _schedule_next(self, loop: asyncio.AbstractEventLoop) -> None:
        if self.exhausted:
            self._handle = None
            self.finished.set()
            return
        self._handle = loop.call_later(self.steps[self._cursor].delay, self._play_next)

    def _play_next(self) -> None:
        self._handle = None
        if not self.running or self.exhausted:
            return

        step = self.steps[self._cursor]
        self._cursor += 1
        logger.debug(f"Replaying {step.event.type} event ({self._cursor}/{len(self.steps)})")
        self.emit(step.event)

        if self.running:
            self._schedule_next(asyncio.get_running_loop())
        elif self.exhausted:
            self.finished.set()

    def _emit_run_error(self, event: ErrorEvent) -> None:
        self._handle = None
        self.emit(event)
