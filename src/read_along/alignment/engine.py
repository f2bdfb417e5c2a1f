"""Alignment of recognition hypotheses to the reference passage.

For every token of every transcript alternative, pending reference words are
scored with the WordMatcher and weighted by their distance from the pointer:
the current word is preferred, the next one slightly less, later words less
still, and words before the pointer are never considered. This keeps progress
left-to-right while still tolerating recognizers that skip or reorder words
during fast reading.
"""

import logging
from dataclasses import dataclass

from ..core.config import ConfigLoader, get_config
from ..text.matcher import MatcherThresholds, WordMatcher
from ..text.normalizer import tokenize
from .progress import ProgressTracker
from .types import NO_MATCH, AlignmentDecision, Hypothesis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriorityWeights:
    """Positional weights relative to the pointer."""

    current: float = 1.0
    next: float = 0.8
    ahead: float = 0.5

    def weight(self, index: int, pointer: int) -> float:
        if index < pointer:
            return 0.0
        if index == pointer:
            return self.current
        if index == pointer + 1:
            return self.next
        return self.ahead


@dataclass(frozen=True)
class AlignmentConfig:
    """Alignment thresholds loaded from the [alignment] config section."""

    min_similarity: float = 0.3
    partial_max_length_diff: int = 2
    weights: PriorityWeights = PriorityWeights()

    @classmethod
    def from_config(cls, config: ConfigLoader | None = None) -> "AlignmentConfig":
        config = config or get_config()
        weights = config.get("alignment.weights", {})
        return cls(
            min_similarity=float(config.get("alignment.min_similarity", 0.3)),
            partial_max_length_diff=int(config.get("alignment.partial_max_length_diff", 2)),
            weights=PriorityWeights(
                current=float(weights.get("current", 1.0)),
                next=float(weights.get("next", 0.8)),
                ahead=float(weights.get("ahead", 0.5)),
            ),
        )


class AlignmentEngine:
    """Decides which reference word a hypothesis refers to.

    Stateless apart from configuration: the same reference, pointer and
    hypothesis always produce the same decision.
    """

    def __init__(self, matcher: WordMatcher | None = None, config: AlignmentConfig | None = None):
        self.matcher = matcher or WordMatcher()
        self.config = config or AlignmentConfig()

    @classmethod
    def from_config(cls, config: ConfigLoader | None = None) -> "AlignmentEngine":
        config = config or get_config()
        return cls(
            matcher=WordMatcher(MatcherThresholds.from_config(config)),
            config=AlignmentConfig.from_config(config),
        )

    def align(self, hypothesis: Hypothesis, tracker: ProgressTracker) -> AlignmentDecision:
        """Align one hypothesis batch.

        Args:
            hypothesis: Primary transcript and ranked alternatives
            tracker: Current progress (read only)

        Returns:
            Decision with the matched index, or NO_MATCH

        """
        if tracker.is_complete:
            return NO_MATCH

        pointer = tracker.pointer
        reference = tracker.reference
        candidates = [i for i in range(pointer, len(reference)) if tracker.is_pending(i)]

        best = NO_MATCH
        for transcript in hypothesis.transcripts:
            for token in tokenize(transcript):
                for index in candidates:
                    weight = self.config.weights.weight(index, pointer)
                    expected = reference[index].normalized

                    if token == expected:
                        logger.debug(f"Exact match '{token}' at index {index} (weight={weight})")
                        return AlignmentDecision(matched_index=index, score=1.0 * weight, token=token)

                    score = self.matcher.similarity(token, expected)
                    if score <= self.config.min_similarity:
                        continue
                    adjusted = score * weight
                    if adjusted > best.score:
                        best = AlignmentDecision(matched_index=index, score=adjusted, token=token)

        if not best.no_match:
            logger.debug(f"Similar match '{best.token}' at index {best.matched_index} (score={best.score:.2f})")
            return best

        return self._partial_match(hypothesis, tracker, candidates)

    def _partial_match(
        self, hypothesis: Hypothesis, tracker: ProgressTracker, candidates: list[int]
    ) -> AlignmentDecision:
        """Containment fallback over the primary transcript only."""
        reference = tracker.reference
        for token in tokenize(hypothesis.text):
            for index in candidates:
                expected = reference[index].normalized
                if abs(len(token) - len(expected)) > self.config.partial_max_length_diff:
                    continue
                if token in expected or expected in token:
                    weight = self.config.weights.weight(index, tracker.pointer)
                    logger.debug(f"Partial match '{token}' at index {index}")
                    return AlignmentDecision(matched_index=index, score=weight, token=token)

        logger.debug(f"No match for '{hypothesis.text}'")
        return NO_MATCH
