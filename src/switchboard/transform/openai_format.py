"""Conversion of conversation messages to the OpenAI chat format."""

from enum import Enum
from typing import Any, Sequence

from ..types import ConversationMessage, ImagePart, TextPart
from .r1_format import convert_to_r1_format


class SystemProjection(str, Enum):
    """How the system prompt is placed in an OpenAI-style request."""

    SYSTEM = "system"  # leading system-role message
    DEVELOPER = "developer"  # leading developer-role message (o1, o3-mini)
    R1 = "r1"  # demoted to a user message, same-role runs merged
    MERGED_USER = "merged_user"  # folded into the first user message


def convert_part(part: TextPart | ImagePart) -> dict[str, Any]:
    """Convert one content part to an OpenAI content part."""
    if isinstance(part, ImagePart):
        return {"type": "image_url", "image_url": {"url": part.data_url}}
    return {"type": "text", "text": part.text}


def convert_message(message: ConversationMessage) -> dict[str, Any]:
    """Convert one conversation message, keeping part order."""
    if isinstance(message.content, str):
        return {"role": message.role, "content": message.content}

    if message.role == "assistant":
        # Assistant turns only carry text on the OpenAI API
        text = "\n".join(part.text for part in message.content if isinstance(part, TextPart))
        return {"role": "assistant", "content": text}

    return {"role": "user", "content": [convert_part(part) for part in message.content]}


def convert_to_openai_messages(messages: Sequence[ConversationMessage]) -> list[dict[str, Any]]:
    """Convert a conversation to OpenAI chat messages, one per message."""
    return [convert_message(message) for message in messages]


def _merge_into_first_user(system_prompt: str, converted: list[dict[str, Any]]) -> list[dict[str, Any]]:
    if not converted or converted[0]["role"] != "user":
        return [{"role": "user", "content": system_prompt}, *converted]

    content = converted[0]["content"]
    if isinstance(content, str):
        merged: str | list[dict[str, Any]] = f"{system_prompt}\n{content}"
    else:
        merged = [{"type": "text", "text": system_prompt}, *content]
    return [{"role": "user", "content": merged}, *converted[1:]]


def build_openai_messages(
    system_prompt: str,
    messages: Sequence[ConversationMessage],
    projection: SystemProjection = SystemProjection.SYSTEM,
) -> list[dict[str, Any]]:
    """Build the ``messages`` array of a chat completions request.

    Args:
        system_prompt: The system prompt.
        messages: Conversation history, oldest first.
        projection: Where the system prompt goes.

    Returns:
        A new list of OpenAI message dicts.
    """
    if projection is SystemProjection.R1:
        # Demote first so the merge below sees the system prompt as a user turn
        return convert_to_r1_format([ConversationMessage.user(system_prompt), *messages])

    converted = convert_to_openai_messages(messages)

    if projection is SystemProjection.MERGED_USER:
        return _merge_into_first_user(system_prompt, converted)

    role = "developer" if projection is SystemProjection.DEVELOPER else "system"
    return [{"role": role, "content": system_prompt}, *converted]
