"""Letter substitutions commonly produced by recognizers for read-aloud speech.

Each letter maps to the letters it is often confused with: aspirated and
voiced stop variants, nasals, liquids, sibilants and short/long vowel pairs.
The relation is checked in both directions.
"""
from __future__ import annotations

from typing import Dict, FrozenSet

TELUGU_SUBSTITUTIONS: Dict[str, FrozenSet[str]] = {
    "క": frozenset("గఖ"),
    "గ": frozenset("కఘ"),
    "చ": frozenset("జఛ"),
    "జ": frozenset("చఝ"),
    "ట": frozenset("డఠ"),
    "డ": frozenset("టఢ"),
    "త": frozenset("దథ"),
    "ద": frozenset("తధ"),
    "ప": frozenset("బఫ"),
    "బ": frozenset("పభ"),
    "మ": frozenset("న"),
    "న": frozenset("మ"),
    "య": frozenset("ర"),
    "ర": frozenset("య"),
    "ల": frozenset("ళ"),
    "ళ": frozenset("ల"),
    "వ": frozenset("అ"),
    "శ": frozenset("ష"),
    "ష": frozenset("శ"),
    "స": frozenset("శష"),
    "హ": frozenset("అ"),
    "అ": frozenset("ఆ"),
    "ఆ": frozenset("అ"),
    "ఇ": frozenset("ఈ"),
    "ఈ": frozenset("ఇ"),
    "ఉ": frozenset("ఊ"),
    "ఊ": frozenset("ఉ"),
    "ఎ": frozenset("ఏ"),
    "ఏ": frozenset("ఎ"),
    "ఐ": frozenset("అ"),
    "ఒ": frozenset("ఓ"),
    "ఓ": frozenset("ఒ"),
    "ఔ": frozenset("అ"),
}

# Romanized transcripts (e.g. en-IN fallback) confuse the same stop pairs
LATIN_SUBSTITUTIONS: Dict[str, FrozenSet[str]] = {
    "k": frozenset("gc"),
    "g": frozenset("k"),
    "c": frozenset("kj"),
    "j": frozenset("c"),
    "t": frozenset("d"),
    "d": frozenset("t"),
    "p": frozenset("bf"),
    "b": frozenset("pv"),
    "f": frozenset("p"),
    "v": frozenset("bw"),
    "w": frozenset("v"),
    "m": frozenset("n"),
    "n": frozenset("m"),
    "l": frozenset("r"),
    "r": frozenset("l"),
    "s": frozenset("z"),
    "z": frozenset("s"),
}

SUBSTITUTIONS: Dict[str, FrozenSet[str]] = {**TELUGU_SUBSTITUTIONS, **LATIN_SUBSTITUTIONS}


def are_confusable(spoken: str, expected: str) -> bool:
    """Return True if two different letters are a known substitution pair."""
    if spoken == expected:
        return False
    return spoken in SUBSTITUTIONS.get(expected, frozenset()) or expected in SUBSTITUTIONS.get(
        spoken, frozenset()
    )
