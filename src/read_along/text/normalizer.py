"""Transcript normalization for word alignment.

Transcripts and reference words are compared in two canonical forms:

- normalized: lowercase, only Telugu-block letters and basic alphanumerics,
  single spaces, trimmed
- base form: normalized with Telugu dependent vowel signs removed, so words
  that differ only in their vowel modifiers compare equal
"""
from __future__ import annotations

import re
from typing import List

# Telugu Unicode block
TELUGU_START = "\u0c00"
TELUGU_END = "\u0c7f"

_DISALLOWED = re.compile(rf"[^{TELUGU_START}-{TELUGU_END}a-z0-9_\s]+")
_WHITESPACE = re.compile(r"\s+")
_TELUGU_LETTER = re.compile(rf"[{TELUGU_START}-{TELUGU_END}]")

# Dependent vowel signs (matras) and length marks
VOWEL_SIGNS = frozenset(
    [chr(cp) for cp in range(0x0C3E, 0x0C45)]
    + [chr(cp) for cp in range(0x0C46, 0x0C49)]
    + [chr(cp) for cp in range(0x0C4A, 0x0C4D)]
    + ["\u0c55", "\u0c56"]
)
_VOWEL_SIGN_PATTERN = re.compile("[" + "".join(sorted(VOWEL_SIGNS)) + "]")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize(raw: str) -> str:
    """Canonicalize a raw transcript or word.

    Args:
        raw: Text as produced by the recognizer or found in the passage

    Returns:
        Normalized text; idempotent (normalize(normalize(x)) == normalize(x))

    """
    text = raw.lower()
    text = _DISALLOWED.sub("", text)
    return _collapse(text)


def base_form(raw: str) -> str:
    """Normalize and strip vowel modifiers, leaving base consonants."""
    return _collapse(_VOWEL_SIGN_PATTERN.sub("", normalize(raw)))


def tokenize(raw: str) -> List[str]:
    """Split a transcript into normalized word tokens.

    Example: "  నమస్తే,  World! " -> ["నమస్తే", "world"]
    """
    tokens = []
    for piece in raw.split():
        normalized = normalize(piece)
        if normalized:
            tokens.append(normalized)
    return tokens


def contains_script_letters(word: str) -> bool:
    """Check whether a word has at least one Telugu character."""
    return bool(_TELUGU_LETTER.search(word))
