"""Streaming recognition session management.

Public API:
- RecognitionSessionController: keeps a recognizer running, with recovery
- RecognitionEngine: protocol implemented by recognizers
- ScriptedRecognizer: replays recorded events
- WebSocketRecognizer: bridge to a remote recognizer (lazy import)
"""

from importlib import import_module
from typing import TYPE_CHECKING

from .controller import RecognitionSessionController, SessionState
from .events import EndEvent, ErrorEvent, RecognitionAlternative, ResultEvent, parse_event
from .policy import ErrorClass, LanguageCycle, RecoveryDelays, RetryBudget, classify
from .protocol import RecognitionEngine
from .scripted import ScriptedRecognizer, ScriptedStep, load_script

if TYPE_CHECKING:
    from .websocket import WebSocketRecognizer

__all__ = [
    "EndEvent",
    "ErrorClass",
    "ErrorEvent",
    "LanguageCycle",
    "RecognitionAlternative",
    "RecognitionEngine",
    "RecognitionSessionController",
    "RecoveryDelays",
    "ResultEvent",
    "RetryBudget",
    "ScriptedRecognizer",
    "ScriptedStep",
    "SessionState",
    "WebSocketRecognizer",
    "classify",
    "load_script",
    "parse_event",
]

_LAZY_EXPORTS = {
    "WebSocketRecognizer": (".websocket", "WebSocketRecognizer"),
}


def __getattr__(name):
    if name not in _LAZY_EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attr_name = _LAZY_EXPORTS[name]
    module = import_module(module_name, __name__)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
