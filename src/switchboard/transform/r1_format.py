"""Flattening for reasoning-only models (DeepSeek R1 and relatives).

These models reject a system role and require strictly alternating turns, so
consecutive messages with the same role are merged into one.
"""

from typing import Any, Sequence

from ..types import ConversationMessage, ImagePart, TextPart


def _flatten_content(message: ConversationMessage) -> str | list[dict[str, Any]]:
    if isinstance(message.content, str):
        return message.content

    texts = [part.text for part in message.content if isinstance(part, TextPart)]
    images = [
        {"type": "image_url", "image_url": {"url": part.data_url}}
        for part in message.content
        if isinstance(part, ImagePart)
    ]
    if not images:
        return "\n".join(texts)

    parts: list[dict[str, Any]] = []
    if texts:
        parts.append({"type": "text", "text": "\n".join(texts)})
    parts.extend(images)
    return parts


def _as_parts(content: str | list[dict[str, Any]]) -> list[dict[str, Any]]:
    if isinstance(content, str):
        return [{"type": "text", "text": content}]
    return list(content)


def convert_to_r1_format(messages: Sequence[ConversationMessage]) -> list[dict[str, Any]]:
    """Convert messages to OpenAI format, merging runs of the same role.

    Text parts within a message are joined with a newline and any images
    follow the text. Two string contents merge with a newline; otherwise the
    part lists are concatenated.
    """
    merged: list[dict[str, Any]] = []

    for message in messages:
        content = _flatten_content(message)

        if merged and merged[-1]["role"] == message.role:
            last = merged[-1]
            if isinstance(last["content"], str) and isinstance(content, str):
                last["content"] = f"{last['content']}\n{content}"
            else:
                last["content"] = _as_parts(last["content"]) + _as_parts(content)
        else:
            merged.append({"role": message.role, "content": content})

    return merged
