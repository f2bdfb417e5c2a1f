"""Recognition event schema.

Events emitted by a streaming recognizer. The same models validate events
arriving over the WebSocket bridge and events loaded from replay files, so
both camelCase (Web Speech API) and snake_case field names are accepted.
"""

from __future__ import annotations

import json
from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from ..alignment.types import Hypothesis


class BaseEvent(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str


class RecognitionAlternative(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    text: str = Field(default="", validation_alias=AliasChoices("text", "transcript"))
    is_final: bool = Field(default=False, validation_alias=AliasChoices("is_final", "isFinal"))
    confidence: float | None = None


class ResultEvent(BaseEvent):
    type: Literal["result"] = "result"
    alternatives: list[RecognitionAlternative] = Field(default_factory=list)
    is_final: bool = Field(default=False, validation_alias=AliasChoices("is_final", "isFinal"))

    @property
    def transcript(self) -> str:
        """Top-ranked transcript, stripped."""
        if not self.alternatives:
            return ""
        return self.alternatives[0].text.strip()

    def to_hypothesis(self, max_alternatives: int = 10) -> Hypothesis | None:
        """Convert to a Hypothesis, or None when there is nothing to align.

        Ranked alternatives are only trusted on final results; interim
        results contribute their top transcript alone.
        """
        text = self.transcript
        if not text:
            return None
        is_final = self.is_final or self.alternatives[0].is_final
        alternatives: tuple[str, ...] = ()
        if is_final:
            alternatives = tuple(
                alt.text for alt in self.alternatives[1:max_alternatives] if alt.text.strip()
            )
        return Hypothesis(text=text, is_final=is_final, alternatives=alternatives)


class ErrorEvent(BaseEvent):
    type: Literal["error"] = "error"
    code: str = Field(validation_alias=AliasChoices("code", "error"))
    message: str | None = None


class EndEvent(BaseEvent):
    type: Literal["end"] = "end"


RecognitionEvent = Annotated[Union[ResultEvent, ErrorEvent, EndEvent], Field(discriminator="type")]

_EVENT_ADAPTER: TypeAdapter[RecognitionEvent] = TypeAdapter(RecognitionEvent)


def parse_event(data: dict | str | bytes) -> ResultEvent | ErrorEvent | EndEvent:
    """Validate a raw event (dict or JSON text).

    Raises:
        pydantic.ValidationError: If the payload is not a known event

    """
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    return _EVENT_ADAPTER.validate_python(data)
