"""Recognition session controller.

RecognitionSessionController owns the lifecycle of one streaming recognizer:
- Starts and stops the engine (the microphone is held only while running)
- Converts result events into Hypotheses for the alignment layer
- Restarts the engine after it ends by itself or reports a recoverable error
- Stops for good on fatal errors or exhausted retries

All work happens on one asyncio event loop. Restarts are scheduled with
loop.call_later and guarded by a single should-continue flag, so a stop()
turns every pending restart into a no-op.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from ..alignment.types import Hypothesis
from ..core.config import ConfigLoader, get_config
from ..errors import RecognitionError, RecognitionFatalError, RetriesExhaustedError, SessionStateError
from .events import EndEvent, ErrorEvent, ResultEvent
from .policy import ErrorClass, LanguageCycle, RecoveryDelays, RetryBudget, classify
from .protocol import RecognitionEngine

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a recognition session."""

    IDLE = "idle"
    LISTENING = "listening"
    RESTARTING = "restarting"
    STOPPED = "stopped"


class RecognitionSessionController:
    """Keeps a recognizer running for the duration of one practice attempt.

    Example:
        controller = RecognitionSessionController(
            engine,
            language="te-IN",
            on_hypothesis=handle_hypothesis,
            on_fatal=show_error,
        )
        controller.start()   # inside a running event loop
        ...
        controller.stop()

    """

    def __init__(
        self,
        engine: RecognitionEngine,
        language: str | None = None,
        fallback_languages: list[str] | None = None,
        config: ConfigLoader | None = None,
        on_hypothesis: Callable[[Hypothesis], None] | None = None,
        on_fatal: Callable[[RecognitionFatalError], None] | None = None,
        on_notice: Callable[[RecognitionError], None] | None = None,
    ):
        """Initialize the controller.

        Args:
            engine: Recognizer to drive
            language: Primary language code (defaults to config)
            fallback_languages: Languages tried in order when the current one
                is not supported (defaults to config)
            config: Configuration (defaults to the global config)
            on_hypothesis: Receives every hypothesis worth aligning
            on_fatal: Receives the terminal error, at most once
            on_notice: Receives recoverable errors the caller should know about

        """
        config = config or get_config()
        self.engine = engine
        self.on_hypothesis = on_hypothesis
        self.on_fatal = on_fatal
        self.on_notice = on_notice

        if fallback_languages is None:
            fallback_languages = config.fallback_languages
        self.languages = LanguageCycle(language or config.language, fallback_languages)
        self.delays = RecoveryDelays.from_config(config)
        self.max_alternatives = config.max_alternatives
        self.process_interim_results = config.process_interim_results

        self._error_budget = RetryBudget(
            self.delays.for_class(ErrorClass.UNKNOWN), config.max_error_retries, config.backoff_factor
        )
        self._restart_budget = RetryBudget(
            self.delays.restart_retry, config.max_restart_attempts, config.backoff_factor
        )

        self._state = SessionState.IDLE
        self._should_continue = False
        self._fatal_reported = False
        self._pending: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

        self.engine.bind(self.handle_event)

    @property
    def state(self) -> SessionState:
        """Current session state."""
        return self._state

    @property
    def should_continue(self) -> bool:
        """Whether the caller still wants the engine running."""
        return self._should_continue

    @property
    def language(self) -> str:
        """Language the engine is (re)started with."""
        return self.languages.current

    @property
    def restart_pending(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        """Start listening. Must be called from a running event loop.

        Raises:
            SessionStateError: If the controller was already started
            RecognitionFatalError: If the engine refuses to start

        """
        if self._state != SessionState.IDLE:
            raise SessionStateError(f"Recognition session already started (state={self._state.value})")

        self._loop = asyncio.get_running_loop()
        self._should_continue = True
        try:
            self.engine.start(self.language)
        except Exception as e:
            self._should_continue = False
            self._state = SessionState.STOPPED
            logger.error(f"Recognition engine failed to start: {e}")
            raise RecognitionFatalError("start-failed", f"Recognition engine failed to start: {e}") from e

        self._state = SessionState.LISTENING
        logger.info(f"Recognition started (language={self.language})")

    def stop(self) -> None:
        """Stop listening and release the engine. Safe to call repeatedly."""
        if self._state == SessionState.STOPPED:
            return

        self._should_continue = False
        self._cancel_pending()
        if self._state != SessionState.IDLE:
            self._release()
        self._state = SessionState.STOPPED
        logger.info("Recognition stopped")

    def handle_event(self, event: ResultEvent | ErrorEvent | EndEvent) -> None:
        """Route one engine event. Events are handled strictly in arrival order."""
        if isinstance(event, ResultEvent):
            self._handle_result(event)
        elif isinstance(event, ErrorEvent):
            self._handle_error(event.code, event.message)
        elif isinstance(event, EndEvent):
            self._handle_end()
        else:
            logger.warning(f"Ignoring unknown recognition event: {event!r}")

    def _handle_result(self, event: ResultEvent) -> None:
        if self._state != SessionState.LISTENING:
            logger.debug(f"Ignoring result while {self._state.value}")
            return

        # The engine is producing output again
        self._error_budget.record_success()

        hypothesis = event.to_hypothesis(self.max_alternatives)
        if hypothesis is None:
            logger.debug("Ignoring empty transcript")
            return
        if not hypothesis.is_final and not self.process_interim_results:
            return

        logger.debug(f"Hypothesis: '{hypothesis.text}' (final={hypothesis.is_final}, alternatives={len(hypothesis.alternatives)})")
        self._notify(self.on_hypothesis, hypothesis)

    def _handle_error(self, code: str, message: str | None) -> None:
        if not self._should_continue:
            logger.debug(f"Ignoring error '{code}' after stop")
            return

        error_class = classify(code)
        logger.warning(f"Recognition error: {code} ({error_class.value})")

        if error_class == ErrorClass.AUDIO_CAPTURE:
            self._fail(RecognitionFatalError(code, message or "Microphone unavailable: check permissions and hardware"))
            return

        if error_class == ErrorClass.LANGUAGE_NOT_SUPPORTED:
            previous = self.language
            if self.languages.advance() is None:
                self._fail(
                    RecognitionFatalError(code, f"No supported language among {', '.join(self.languages.languages)}")
                )
                return
            logger.info(f"Switching language: {previous} -> {self.language}")
            self._schedule_restart(self.delays.for_class(error_class))
            return

        if error_class in (ErrorClass.NO_SPEECH, ErrorClass.ABORTED):
            self._schedule_restart(self.delays.for_class(error_class))
            return

        if error_class == ErrorClass.NETWORK:
            self._notify(self.on_notice, RecognitionError(code, message or "Network error: check your connection"))
            if not self._should_continue:
                return

        delay = self._error_budget.next_delay()
        if delay is None:
            self._fail(RetriesExhaustedError(code, self._error_budget.max_attempts))
            return
        self._schedule_restart(delay)

    def _handle_end(self) -> None:
        if not self._should_continue:
            return
        if self._state == SessionState.RESTARTING:
            # An error already scheduled the restart
            return
        logger.info("Recognition ended by engine, restarting")
        self._schedule_restart(self.delays.end)

    def _schedule_restart(self, delay: float) -> None:
        self._cancel_pending()
        self._state = SessionState.RESTARTING
        logger.debug(f"Restart scheduled in {delay:.2f}s")
        self._pending = self._loop.call_later(delay, self._attempt_restart)

    def _attempt_restart(self) -> None:
        self._pending = None
        if not self._should_continue:
            return

        try:
            self.engine.start(self.language)
        except Exception as e:
            delay = self._restart_budget.next_delay()
            if delay is None:
                self._fail(RetriesExhaustedError("restart-failed", self._restart_budget.max_attempts))
                return
            logger.warning(f"Restart failed ({e}), retrying in {delay:.2f}s")
            self._pending = self._loop.call_later(delay, self._attempt_restart)
            return

        self._restart_budget.record_success()
        self._state = SessionState.LISTENING
        logger.info(f"Recognition restarted (language={self.language})")

    def _fail(self, error: RecognitionFatalError) -> None:
        if self._fatal_reported:
            return
        self._fatal_reported = True
        logger.error(f"Recognition stopped: {error}")
        self.stop()
        self._notify(self.on_fatal, error)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _release(self) -> None:
        try:
            self.engine.stop()
        except Exception as e:
            logger.warning(f"Error stopping recognition engine: {e}")

    def _notify(self, callback: Callable | None, value) -> None:
        if callback is None:
            return
        try:
            callback(value)
        except Exception as e:
            logger.exception(f"Error in recognition callback: {e}")

    def get_status(self) -> dict:
        """Get controller state for monitoring."""
        return {
            "state": self._state.value,
            "language": self.language,
            "should_continue": self._should_continue,
            "restart_pending": self.restart_pending,
            "error_retries": self._error_budget.get_status(),
            "restart_retries": self._restart_budget.get_status(),
        }
