"""Protocol definition for streaming recognition engines.

Uses Protocol-based typing - engines don't need to inherit from a base
class, just implement the required methods.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .events import EndEvent, ErrorEvent, ResultEvent

RecognitionEventCallback = Callable[[ResultEvent | ErrorEvent | EndEvent], None]


@runtime_checkable
class RecognitionEngine(Protocol):
    """A continuous speech recognizer producing text hypotheses.

    Engines deliver events on the event loop the controller runs on, in
    arrival order:
    - ResultEvent: transcript alternatives for one recognition step
    - ErrorEvent: engine failure with a Web Speech style code
    - EndEvent: the engine stopped by itself (e.g. silence timeout)
    """

    def bind(self, callback: RecognitionEventCallback) -> None:
        """Register the single consumer of engine events."""
        ...

    def start(self, language: str) -> None:
        """Start recognizing in the given language.

        May raise if the engine cannot start (e.g. already running).
        """
        ...

    def stop(self) -> None:
        """Stop recognizing and release the microphone."""
        ...
