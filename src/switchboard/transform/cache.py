"""Prompt-cache annotation.

Marks the system message and the last two user messages as cacheable. Only
one user message is added per turn, so the previous user message is the
cache read point and the latest one the cache write point.
"""

import copy
from typing import Any

EPHEMERAL = {"type": "ephemeral"}

# Placeholder text part used when a message has nothing to carry the marker
SYNTHETIC_TEXT = "..."


def mark_cacheable(message: dict[str, Any]) -> None:
    """Put a cache marker on the last text part of ``message`` in place.

    Plain string content is promoted to a one-part list first. A list without
    any text part gets a synthetic trailing text part.
    """
    if isinstance(message.get("content"), str):
        message["content"] = [{"type": "text", "text": message["content"]}]

    parts = message["content"]
    text_parts = [part for part in parts if part.get("type") == "text"]
    if text_parts:
        target = text_parts[-1]
    else:
        target = {"type": "text", "text": SYNTHETIC_TEXT}
        parts.append(target)
    target["cache_control"] = dict(EPHEMERAL)


def _mark_last_user_messages(messages: list[dict[str, Any]], count: int = 2) -> None:
    user_messages = [message for message in messages if message["role"] == "user"]
    for message in user_messages[-count:]:
        mark_cacheable(message)


def add_openai_cache_control(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return a copy of OpenAI chat messages with cache markers applied."""
    annotated = copy.deepcopy(messages)
    if annotated and annotated[0]["role"] in ("system", "developer"):
        mark_cacheable(annotated[0])
    _mark_last_user_messages(annotated)
    return annotated


def add_anthropic_cache_control(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Return a copy of Anthropic message params with cache markers applied.

    The system prompt is a separate parameter; see build_anthropic_system.
    """
    annotated = copy.deepcopy(messages)
    _mark_last_user_messages(annotated)
    return annotated
