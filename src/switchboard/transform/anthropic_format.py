"""Conversion of conversation messages to the Anthropic Messages format."""

from typing import Any, Sequence

from ..types import ConversationMessage, ImagePart, TextPart
from .cache import EPHEMERAL


def convert_block(part: TextPart | ImagePart) -> dict[str, Any]:
    if isinstance(part, ImagePart):
        return {
            "type": "image",
            "source": {"type": "base64", "media_type": part.media_type, "data": part.data},
        }
    return {"type": "text", "text": part.text}


def convert_to_anthropic_messages(messages: Sequence[ConversationMessage]) -> list[dict[str, Any]]:
    """Convert a conversation to Anthropic message params, keeping block order."""
    converted = []
    for message in messages:
        if isinstance(message.content, str):
            content: str | list[dict[str, Any]] = message.content
        else:
            content = [convert_block(part) for part in message.content]
        converted.append({"role": message.role, "content": content})
    return converted


def build_anthropic_system(system_prompt: str, cache: bool = False) -> list[dict[str, Any]]:
    """Build the structured ``system`` parameter."""
    block: dict[str, Any] = {"text": system_prompt, "type": "text"}
    if cache:
        block["cache_control"] = dict(EPHEMERAL)
    return [block]
