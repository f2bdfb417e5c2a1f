"""Live alignment of recognition hypotheses to a reference passage.

Public API:
- AlignmentEngine: picks the reference word a hypothesis refers to
- ProgressTracker: per-word states and the session pointer
- build_summary(): final accuracy report
"""

from .engine import AlignmentConfig, AlignmentEngine, PriorityWeights
from .progress import ProgressTracker
from .report import accuracy_percent, build_summary
from .types import (
    NO_MATCH,
    AlignmentDecision,
    Hypothesis,
    ReferenceSequence,
    ReferenceWord,
    SessionSummary,
    WordState,
)

__all__ = [
    "AlignmentConfig",
    "AlignmentDecision",
    "AlignmentEngine",
    "Hypothesis",
    "NO_MATCH",
    "PriorityWeights",
    "ProgressTracker",
    "ReferenceSequence",
    "ReferenceWord",
    "SessionSummary",
    "WordState",
    "accuracy_percent",
    "build_summary",
]
