"""Final accuracy report for a practice attempt."""

from .progress import ProgressTracker
from .types import SessionSummary, WordState


def accuracy_percent(correct: int, total: int) -> int:
    """Whole-number accuracy, halves rounded up; 0 for an empty passage."""
    if total <= 0:
        return 0
    return int(correct * 100 / total + 0.5)


def build_summary(tracker: ProgressTracker) -> SessionSummary:
    """Summarize tracker state.

    Works for completed and stopped attempts alike; words still pending after
    an early stop count as neither correct nor incorrect.
    """
    states = list(tracker.states)
    correct = sum(1 for state in states if state == WordState.CORRECT)
    incorrect = sum(1 for state in states if state == WordState.INCORRECT)
    return SessionSummary(
        total_words=len(states),
        correct_words=correct,
        incorrect_words=incorrect,
        accuracy_percent=accuracy_percent(correct, len(states)),
        completed=tracker.is_complete,
        word_states=states,
    )
