"""Type definitions for live word alignment.

Provides:
- WordState: Per-word pronunciation state
- ReferenceWord / ReferenceSequence: The passage being read
- Hypothesis: One recognition event with ranked alternatives
- AlignmentDecision: Outcome of aligning one hypothesis
- SessionSummary: Final accuracy report
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from ..errors import EmptyPassageError
from ..text.normalizer import contains_script_letters, normalize


class WordState(Enum):
    """Pronunciation state of one reference word."""

    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True)
class ReferenceWord:
    """A word of the passage with its normalized form."""

    text: str
    normalized: str


class ReferenceSequence:
    """Ordered, immutable list of reference words.

    Indices are stable for the lifetime of a session.
    """

    def __init__(self, words: Iterable[ReferenceWord]):
        self._words = tuple(words)

    @classmethod
    def from_passage(cls, passage: str | Iterable[str], require_script_letters: bool = False) -> "ReferenceSequence":
        """Build the sequence from passage text.

        Args:
            passage: Passage text, or a list of paragraphs read in order
            require_script_letters: Keep only words containing Telugu letters

        Raises:
            EmptyPassageError: If no readable word remains

        """
        paragraphs = [passage] if isinstance(passage, str) else list(passage)
        words = []
        for paragraph in paragraphs:
            for raw in paragraph.split():
                if require_script_letters and not contains_script_letters(raw):
                    continue
                normalized = normalize(raw)
                if normalized:
                    words.append(ReferenceWord(text=raw, normalized=normalized))

        if not words:
            raise EmptyPassageError()
        return cls(words)

    @classmethod
    def from_words(cls, words: Iterable[str]) -> "ReferenceSequence":
        """Build the sequence from already-split words."""
        return cls.from_passage(" ".join(words))

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, index: int) -> ReferenceWord:
        return self._words[index]

    def __iter__(self) -> Iterator[ReferenceWord]:
        return iter(self._words)

    @property
    def texts(self) -> list[str]:
        """Display text of every word."""
        return [w.text for w in self._words]


@dataclass(frozen=True)
class Hypothesis:
    """One recognition event: primary transcript plus ranked alternatives."""

    text: str
    is_final: bool = False
    alternatives: tuple[str, ...] = ()

    @property
    def transcripts(self) -> list[str]:
        """Primary transcript first, then alternatives in rank order."""
        return [self.text, *self.alternatives]


@dataclass(frozen=True)
class AlignmentDecision:
    """Outcome of aligning one hypothesis against the passage."""

    matched_index: int | None = None
    score: float = 0.0
    token: str | None = None

    @property
    def no_match(self) -> bool:
        return self.matched_index is None


NO_MATCH = AlignmentDecision()


@dataclass
class SessionSummary:
    """Accuracy report for one practice attempt."""

    total_words: int
    correct_words: int
    incorrect_words: int = 0
    accuracy_percent: int = 0
    completed: bool = False
    word_states: list[WordState] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "total_words": self.total_words,
            "correct_words": self.correct_words,
            "incorrect_words": self.incorrect_words,
            "accuracy_percent": self.accuracy_percent,
            "completed": self.completed,
            "word_states": [state.value for state in self.word_states],
        }
