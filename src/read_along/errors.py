#!/usr/bin/env python3
"""Exception hierarchy for read-along sessions."""


class ReadAlongError(Exception):
    """Base exception for read-along errors."""


class EmptyPassageError(ReadAlongError, ValueError):
    """Raised when a passage yields no reference words."""

    def __init__(self, message: str = "Passage contains no readable words"):
        super().__init__(message)


class SessionStateError(ReadAlongError):
    """Raised when a session operation is invalid for its current state."""


class RecognitionError(ReadAlongError):
    """Error reported by, or about, the recognition engine."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or f"Recognition error: {code}")


class RecognitionFatalError(RecognitionError):
    """Recognition cannot continue; the session has been stopped."""


class RetriesExhaustedError(RecognitionFatalError):
    """Bounded restart attempts were used up."""

    def __init__(self, code: str, attempts: int):
        self.attempts = attempts
        super().__init__(code, f"Recognition could not recover from '{code}' after {attempts} attempts")
