"""Practice session: one attempt at reading a passage aloud.

PracticeSession coordinates the pipeline:
- Builds the reference sequence from the passage
- Runs a RecognitionSessionController on the given engine
- Aligns every hypothesis and updates the ProgressTracker
- Emits a SessionSummary once, on completion or stop
"""

import logging
from collections.abc import Callable, Iterable

from .alignment.engine import AlignmentEngine
from .alignment.progress import ProgressTracker
from .alignment.report import build_summary
from .alignment.types import Hypothesis, ReferenceSequence, SessionSummary, WordState
from .core.config import ConfigLoader, get_config
from .errors import RecognitionError, RecognitionFatalError, SessionStateError
from .recognition.controller import RecognitionSessionController, SessionState
from .recognition.protocol import RecognitionEngine

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[tuple[WordState, ...], int], None]


class PracticeSession:
    """Owns every piece of state for one passage attempt.

    Example:
        session = PracticeSession(
            passage,
            engine,
            on_update=render_words,
            on_summary=show_report,
        )
        session.start()      # inside a running event loop
        ...
        session.stop()       # or let the reader finish the passage

    """

    def __init__(
        self,
        passage: str | Iterable[str],
        engine: RecognitionEngine,
        language: str | None = None,
        fallback_languages: list[str] | None = None,
        config: ConfigLoader | None = None,
        on_update: UpdateCallback | None = None,
        on_summary: Callable[[SessionSummary], None] | None = None,
        on_fatal: Callable[[RecognitionFatalError], None] | None = None,
        on_notice: Callable[[RecognitionError], None] | None = None,
    ):
        self.passage = passage
        self.engine = engine
        self.language = language
        self.fallback_languages = fallback_languages
        self.config = config or get_config()
        self.on_update = on_update
        self.on_summary = on_summary
        self.on_fatal = on_fatal
        self.on_notice = on_notice

        self.aligner = AlignmentEngine.from_config(self.config)
        self.reference: ReferenceSequence | None = None
        self.tracker: ProgressTracker | None = None
        self.controller: RecognitionSessionController | None = None
        self.summary: SessionSummary | None = None

    @property
    def word_states(self) -> tuple[WordState, ...]:
        """Live, read-only word states (empty before start)."""
        return self.tracker.states if self.tracker else ()

    @property
    def pointer(self) -> int:
        return self.tracker.pointer if self.tracker else 0

    @property
    def state(self) -> SessionState:
        return self.controller.state if self.controller else SessionState.IDLE

    @property
    def is_active(self) -> bool:
        return self.controller is not None and self.controller.should_continue

    def start(self) -> None:
        """Start the attempt.

        Raises:
            EmptyPassageError: If the passage has no readable words; the
                engine is not started
            SessionStateError: If the attempt is already running

        """
        if self.is_active:
            raise SessionStateError("Practice session already running")

        if self.reference is None:
            self.reference = ReferenceSequence.from_passage(
                self.passage, require_script_letters=self.config.require_script_letters
            )
            self.tracker = ProgressTracker(self.reference, on_complete=self._on_complete)

        self.summary = None
        self.controller = RecognitionSessionController(
            self.engine,
            language=self.language,
            fallback_languages=self.fallback_languages,
            config=self.config,
            on_hypothesis=self._on_hypothesis,
            on_fatal=self._on_fatal,
            on_notice=self.on_notice,
        )
        logger.info(f"Practice started: {len(self.reference)} words")
        self.controller.start()

    def stop(self) -> SessionSummary | None:
        """Stop the attempt and emit the summary (once)."""
        if self.controller is None:
            return None
        self.controller.stop()
        return self._emit_summary()

    def restart(self) -> None:
        """Discard progress and start the passage again from the first word."""
        if self.controller is not None:
            self.controller.stop()
        if self.tracker is not None:
            self.tracker.reset()
        self.controller = None
        logger.info("Practice restarted")
        self.start()

    def _on_hypothesis(self, hypothesis: Hypothesis) -> None:
        if self.tracker is None or self.tracker.is_complete:
            return
        decision = self.aligner.align(hypothesis, self.tracker)
        self.tracker.apply(decision)
        if self.on_update:
            self.on_update(self.tracker.states, self.tracker.pointer)

    def _on_complete(self, tracker: ProgressTracker) -> None:
        if self.controller is not None:
            self.controller.stop()
        self._emit_summary()

    def _on_fatal(self, error: RecognitionFatalError) -> None:
        if self.on_fatal:
            self.on_fatal(error)
        self._emit_summary()

    def _emit_summary(self) -> SessionSummary | None:
        if self.summary is not None or self.tracker is None:
            return self.summary
        self.summary = build_summary(self.tracker)
        logger.info(
            f"Practice finished: {self.summary.correct_words}/{self.summary.total_words} correct "
            f"({self.summary.accuracy_percent}%)"
        )
        if self.on_summary:
            self.on_summary(self.summary)
        return self.summary
