#!/usr/bin/env python3
"""Recovery policy for recognition engine errors.

Every error code maps to one recovery class. Recoverable classes restart the
engine after a class-specific delay; fatal classes stop the session. Retries
that can repeat indefinitely are bounded by a RetryBudget, a small
failure counter in the style of a circuit breaker.
"""

from dataclasses import dataclass
from enum import Enum

from ..core.config import ConfigLoader, get_config


class ErrorClass(Enum):
    """Recovery classes of recognition errors."""

    NO_SPEECH = "no-speech"
    AUDIO_CAPTURE = "audio-capture"
    NETWORK = "network"
    LANGUAGE_NOT_SUPPORTED = "language-not-supported"
    ABORTED = "aborted"
    UNKNOWN = "unknown"


# Permission and hardware failures cannot be fixed by restarting
_FATAL_CODES = {"audio-capture", "not-allowed", "service-not-allowed"}


def classify(code: str) -> ErrorClass:
    """Map an engine error code to its recovery class."""
    code = (code or "").strip().lower()
    if code in _FATAL_CODES:
        return ErrorClass.AUDIO_CAPTURE
    try:
        return ErrorClass(code)
    except ValueError:
        return ErrorClass.UNKNOWN


@dataclass(frozen=True)
class RecoveryDelays:
    """Restart delays in seconds."""

    end: float = 0.1
    no_speech: float = 0.5
    aborted: float = 1.0
    language_switch: float = 1.0
    unknown: float = 1.5
    restart_retry: float = 1.0

    @classmethod
    def from_config(cls, config: ConfigLoader | None = None) -> "RecoveryDelays":
        config = config or get_config()
        return cls(**{name: config.get_delay(name) for name in cls.__dataclass_fields__})

    def for_class(self, error_class: ErrorClass) -> float:
        return {
            ErrorClass.NO_SPEECH: self.no_speech,
            ErrorClass.ABORTED: self.aborted,
            ErrorClass.LANGUAGE_NOT_SUPPORTED: self.language_switch,
            ErrorClass.NETWORK: self.unknown,
            ErrorClass.UNKNOWN: self.unknown,
        }.get(error_class, 0.0)


class RetryBudget:
    """Bounded, escalating retry counter.

    next_delay() returns base_delay * factor ** attempts and counts the
    attempt, or None once max_attempts consecutive attempts have been used.
    record_success() resets the count.
    """

    def __init__(self, base_delay: float, max_attempts: int, factor: float = 2.0):
        self.base_delay = base_delay
        self.max_attempts = max_attempts
        self.factor = factor
        self.attempts = 0

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def next_delay(self) -> float | None:
        if self.exhausted:
            return None
        delay = self.base_delay * (self.factor**self.attempts)
        self.attempts += 1
        return delay

    def record_success(self) -> None:
        self.attempts = 0

    def get_status(self) -> dict:
        """Get budget state for logging."""
        return {
            "attempts": self.attempts,
            "max_attempts": self.max_attempts,
            "exhausted": self.exhausted,
        }


class LanguageCycle:
    """Primary language followed by fallbacks, each tried once."""

    def __init__(self, primary: str, fallbacks: list[str] | None = None):
        languages = [primary]
        for language in fallbacks or []:
            if language not in languages:
                languages.append(language)
        self.languages = languages
        self._index = 0

    @property
    def current(self) -> str:
        return self.languages[self._index]

    def advance(self) -> str | None:
        """Move to the next fallback; None when all have been tried."""
        if self._index + 1 >= len(self.languages):
            return None
        self._index += 1
        return self.current
