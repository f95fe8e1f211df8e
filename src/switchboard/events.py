"""Canonical stream events.

Every provider's wire output is translated into these three events. The
host-facing shape is produced by ``to_wire()``:

    {"type": "text", "text": "..."}
    {"type": "reasoning", "reasoning": "..."}
    {"type": "usage", "inputTokens": 10, "outputTokens": 2, "cacheWriteTokens": 0}
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    def to_wire(self) -> dict[str, Any]:
        """Return the camelCase dict exposed to the host layer."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TextDelta(_Event):
    """An incremental fragment of the answer text."""

    type: Literal["text"] = "text"
    text: str


class ReasoningDelta(_Event):
    """An incremental fragment of backend "thinking" text."""

    type: Literal["reasoning"] = "reasoning"
    text: str = Field(alias="reasoning")


class UsageReport(_Event):
    """Token usage reported by the backend for this request."""

    type: Literal["usage"] = "usage"
    input_tokens: int = 0
    output_tokens: int = 0
    cache_write_tokens: int | None = None
    cache_read_tokens: int | None = None


StreamEvent = Annotated[Union[TextDelta, ReasoningDelta, UsageReport], Field(discriminator="type")]

_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)


def parse_event(data: dict[str, Any]) -> TextDelta | ReasoningDelta | UsageReport:
    """Parse a wire-shaped dict back into a canonical event."""
    return _event_adapter.validate_python(data)
