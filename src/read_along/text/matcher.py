"""Fuzzy word similarity for spoken vs. expected words.

Rules are evaluated in priority order and the first rule that fires wins:

1. identical normalized forms
2. identical base forms (vowel modifiers ignored)
3. equal length, scored letter by letter with phonetic substitutions
4. large length difference: containment only, penalized for short fragments
5. small length difference: containment, then prefix/suffix
6. letter-by-letter score over the overlapping prefix
"""
from __future__ import annotations

from dataclasses import dataclass

from ..core.config import ConfigLoader, get_config
from .normalizer import base_form, normalize
from .phonetics import are_confusable


@dataclass(frozen=True)
class MatcherThresholds:
    """Tunable scores and cut-offs for WordMatcher."""

    exact: float = 1.0
    base_form: float = 0.95
    substitution: float = 0.8
    equal_length_min: float = 0.6
    max_length_diff: int = 4
    containment: float = 0.9
    far_containment: float = 0.8
    far_containment_penalized: float = 0.4
    far_length_ratio: float = 0.6
    affix: float = 0.8
    affix_max_diff: int = 2
    char_max_diff: int = 3
    char_min: float = 0.5
    char_close_max_diff: int = 2
    char_close_min: float = 0.4
    char_close_bonus: float = 0.1

    @classmethod
    def from_config(cls, config: ConfigLoader | None = None) -> "MatcherThresholds":
        """Load thresholds from the [matcher] config section."""
        config = config or get_config()
        section = config.get("matcher", {})
        known = {name: section[name] for name in cls.__dataclass_fields__ if name in section}
        return cls(**known)


class WordMatcher:
    """Scores how well a spoken token matches an expected reference word."""

    def __init__(self, thresholds: MatcherThresholds | None = None):
        self.thresholds = thresholds or MatcherThresholds()

    def _letter_score(self, spoken: str, expected: str) -> float:
        if spoken == expected:
            return 1.0
        if are_confusable(spoken, expected):
            return self.thresholds.substitution
        return 0.0

    def _prefix_score(self, spoken: str, expected: str) -> float:
        return sum(self._letter_score(s, e) for s, e in zip(spoken, expected))

    def similarity(self, spoken: str, expected: str) -> float:
        """Return a similarity score in [0, 1].

        Args:
            spoken: Token heard by the recognizer
            expected: Reference word

        Returns:
            1.0 for an exact match, 0.0 when the words are unrelated

        """
        t = self.thresholds
        spoken_norm = normalize(spoken)
        expected_norm = normalize(expected)
        if not spoken_norm or not expected_norm:
            return 0.0

        if spoken_norm == expected_norm:
            return t.exact

        spoken_base = base_form(spoken_norm)
        if spoken_base and spoken_base == base_form(expected_norm):
            return t.base_form

        spoken_len = len(spoken_norm)
        expected_len = len(expected_norm)

        if spoken_len == expected_len:
            score = self._prefix_score(spoken_norm, expected_norm) / spoken_len
            if score > t.equal_length_min:
                return score

        length_diff = abs(spoken_len - expected_len)
        contained = spoken_norm in expected_norm or expected_norm in spoken_norm

        if length_diff > t.max_length_diff:
            if not contained:
                return 0.0
            ratio = min(spoken_len, expected_len) / max(spoken_len, expected_len)
            if ratio < t.far_length_ratio:
                return t.far_containment_penalized
            return t.far_containment

        if contained:
            return t.containment

        if length_diff <= t.affix_max_diff:
            if spoken_norm.startswith(expected_norm) or expected_norm.startswith(spoken_norm):
                return t.affix
            if spoken_norm.endswith(expected_norm) or expected_norm.endswith(spoken_norm):
                return t.affix

        char_score = self._prefix_score(spoken_norm, expected_norm) / max(spoken_len, expected_len)
        if length_diff <= t.char_max_diff and char_score > t.char_min:
            return char_score
        if length_diff <= t.char_close_max_diff and char_score > t.char_close_min:
            return min(1.0, char_score + t.char_close_bonus)

        return 0.0


_default_matcher = WordMatcher()


def similarity(spoken: str, expected: str) -> float:
    """Score two words with the default thresholds."""
    return _default_matcher.similarity(spoken, expected)
