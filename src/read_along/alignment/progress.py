"""Per-word progress through the passage.

The tracker owns the WordState of every reference word and the session
pointer (index of the word the reader is expected to say next). It is
mutated only by applying AlignmentDecisions.
"""

import logging
from collections.abc import Callable

from .types import AlignmentDecision, ReferenceSequence, ReferenceWord, WordState

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Forward-only word states plus the session pointer.

    Invariants:
    - 0 <= pointer <= len(reference)
    - words before the pointer are resolved, words from the pointer on are pending
    - a resolved word is never changed again until reset()

    Example:
        tracker = ProgressTracker(reference, on_complete=show_report)
        tracker.apply(engine.align(hypothesis, tracker))

    """

    def __init__(
        self,
        reference: ReferenceSequence,
        on_complete: Callable[["ProgressTracker"], None] | None = None,
    ):
        self.reference = reference
        self.on_complete = on_complete
        self._states: list[WordState] = [WordState.PENDING] * len(reference)
        self._pointer = 0
        self._completion_reported = False

    @property
    def pointer(self) -> int:
        """Index of the word expected next."""
        return self._pointer

    @property
    def states(self) -> tuple[WordState, ...]:
        """Read-only snapshot of every word's state."""
        return tuple(self._states)

    @property
    def is_complete(self) -> bool:
        return self._pointer >= len(self.reference)

    @property
    def current_word(self) -> ReferenceWord | None:
        if self.is_complete:
            return None
        return self.reference[self._pointer]

    def is_pending(self, index: int) -> bool:
        return self._states[index] == WordState.PENDING

    def _mark(self, index: int, state: WordState) -> None:
        if self._states[index] == WordState.PENDING:
            self._states[index] = state

    def apply(self, decision: AlignmentDecision) -> None:
        """Apply an alignment decision and advance the pointer.

        A match at index m resolves every pending word in [pointer, m] as
        correct: words the recognizer missed while the reader moved ahead are
        not penalized. No match marks the current word incorrect and moves on.
        """
        if self.is_complete:
            logger.debug("Ignoring decision: passage already complete")
            return

        if decision.no_match:
            self._mark(self._pointer, WordState.INCORRECT)
            logger.debug(f"Word {self._pointer} marked incorrect")
            self._pointer += 1
        else:
            matched = decision.matched_index
            if matched < self._pointer or matched >= len(self.reference):
                raise IndexError(f"Matched index {matched} outside pending range [{self._pointer}, {len(self.reference)})")

            skipped = [i for i in range(self._pointer, matched) if self.is_pending(i)]
            for index in skipped:
                self._mark(index, WordState.CORRECT)
            if skipped:
                logger.info(f"Skipped ahead: marked words {skipped} correct")

            self._mark(matched, WordState.CORRECT)
            logger.debug(f"Word {matched} marked correct (score={decision.score:.2f})")
            self._pointer = matched + 1

        self._check_complete()

    def _check_complete(self) -> None:
        if not self.is_complete or self._completion_reported:
            return
        self._completion_reported = True
        logger.info(f"Passage complete: {len(self.reference)} words")
        if self.on_complete:
            self.on_complete(self)

    def reset(self) -> None:
        """Explicit restart: every word pending, pointer back to 0."""
        self._states = [WordState.PENDING] * len(self.reference)
        self._pointer = 0
        self._completion_reported = False
        logger.info("Progress reset")
