"""read-along - live alignment of speech recognition to a passage read aloud."""

from importlib import import_module
from importlib import metadata
from pathlib import Path
import tomllib
from typing import TYPE_CHECKING


def _get_version() -> str:
    try:
        return metadata.version("read-along")
    except Exception:
        pass

    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return str(data["project"]["version"])
    except Exception:
        return "unknown"


__version__ = _get_version()

if TYPE_CHECKING:
    from .alignment import AlignmentEngine, ProgressTracker, ReferenceSequence, SessionSummary, WordState
    from .core.config import ConfigLoader, get_config
    from .practice import PracticeSession
    from .recognition import RecognitionSessionController, ScriptedRecognizer, SessionState
    from .text import normalize, similarity

__all__ = [
    "__version__",
    "AlignmentEngine",
    "ConfigLoader",
    "PracticeSession",
    "ProgressTracker",
    "RecognitionSessionController",
    "ReferenceSequence",
    "ScriptedRecognizer",
    "SessionState",
    "SessionSummary",
    "WordState",
    "get_config",
    "normalize",
    "similarity",
]

_LAZY_EXPORTS = {
    "AlignmentEngine": (".alignment", "AlignmentEngine"),
    "ConfigLoader": (".core.config", "ConfigLoader"),
    "PracticeSession": (".practice", "PracticeSession"),
    "ProgressTracker": (".alignment", "ProgressTracker"),
    "RecognitionSessionController": (".recognition", "RecognitionSessionController"),
    "ReferenceSequence": (".alignment", "ReferenceSequence"),
    "ScriptedRecognizer": (".recognition", "ScriptedRecognizer"),
    "SessionState": (".recognition", "SessionState"),
    "SessionSummary": (".alignment", "SessionSummary"),
    "WordState": (".alignment", "WordState"),
    "get_config": (".core.config", "get_config"),
    "normalize": (".text", "normalize"),
    "similarity": (".text", "similarity"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
