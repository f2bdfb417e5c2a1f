"""Text normalization and fuzzy word matching."""
from .matcher import MatcherThresholds, WordMatcher, similarity
from .normalizer import base_form, contains_script_letters, normalize, tokenize

__all__ = [
    "MatcherThresholds",
    "WordMatcher",
    "base_form",
    "contains_script_letters",
    "normalize",
    "similarity",
    "tokenize",
]
