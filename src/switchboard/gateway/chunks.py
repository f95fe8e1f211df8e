"""Wire chunk decoding.

Each backend chunk is decoded exactly once, at the provider boundary, into a
small frozen variant. Decoders accept SDK objects (anything with
``model_dump``) or plain dicts. Unknown or malformed shapes decode to
UnknownChunk, which providers skip.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class UnknownChunk:
    """A chunk shape this gateway does not understand."""

    type: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


# =============================================================================
# OpenAI chat completions
# =============================================================================


@dataclass(frozen=True)
class OpenAIUsage:
    """Token counts from an OpenAI-style ``usage`` object.

    Cache counters are None when the backend did not report them.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    cache_write_tokens: int | None = None
    cache_read_tokens: int | None = None

    @property
    def has_native_cache_counters(self) -> bool:
        return self.cache_write_tokens is not None or self.cache_read_tokens is not None


@dataclass(frozen=True)
class OpenAIChunk:
    """One decoded ``chat.completion.chunk`` (or a full completion)."""

    content: str | None = None
    reasoning: str | None = None
    usage: OpenAIUsage | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)


def as_dict(chunk: Any) -> dict[str, Any] | None:
    """Return a plain dict view of an SDK object or dict."""
    if isinstance(chunk, dict):
        return chunk
    dump = getattr(chunk, "model_dump", None)
    if callable(dump):
        data = dump()
        if isinstance(data, dict):
            return data
    return None


def _int_or_none(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def decode_openai_usage(data: Mapping[str, Any] | None) -> OpenAIUsage | None:
    if not data:
        return None
    details = data.get("prompt_tokens_details") or {}
    return OpenAIUsage(
        prompt_tokens=int(data.get("prompt_tokens") or 0),
        completion_tokens=int(data.get("completion_tokens") or 0),
        # caching_tokens is a router extension for Anthropic-backed models
        cache_write_tokens=_int_or_none(details.get("caching_tokens")),
        cache_read_tokens=_int_or_none(details.get("cached_tokens")),
    )


def _decode_openai(data: dict[str, Any], body_key: str) -> OpenAIChunk | UnknownChunk:
    choices = data.get("choices")
    usage = decode_openai_usage(data.get("usage"))
    if not choices and usage is None:
        return UnknownChunk(type=data.get("object"), extra=data)

    content = reasoning = None
    if choices:
        body = choices[0].get(body_key) or {}
        content = body.get("content")
        reasoning = body.get("reasoning_content") or body.get("reasoning")

    known = {"choices", "usage"}
    return OpenAIChunk(
        content=content,
        reasoning=reasoning,
        usage=usage,
        extra={k: v for k, v in data.items() if k not in known},
    )


def decode_openai_chunk(chunk: Any) -> OpenAIChunk | UnknownChunk:
    """Decode one streamed chat completion chunk."""
    data = as_dict(chunk)
    if data is None:
        return UnknownChunk()
    try:
        return _decode_openai(data, "delta")
    except (AttributeError, KeyError, TypeError, ValueError, IndexError):
        return UnknownChunk(type=data.get("object"), extra=data)


def decode_openai_completion(response: Any) -> OpenAIChunk | UnknownChunk:
    """Decode a non-streamed chat completion."""
    data = as_dict(response)
    if data is None:
        return UnknownChunk()
    try:
        return _decode_openai(data, "message")
    except (AttributeError, KeyError, TypeError, ValueError, IndexError):
        return UnknownChunk(type=data.get("object"), extra=data)


# =============================================================================
# Anthropic Messages stream
# =============================================================================


@dataclass(frozen=True)
class MessageStart:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None


@dataclass(frozen=True)
class MessageDelta:
    output_tokens: int = 0


@dataclass(frozen=True)
class ContentBlockStart:
    index: int
    block_type: str
    text: str = ""


@dataclass(frozen=True)
class ContentBlockDelta:
    index: int
    delta_type: str
    text: str = ""


AnthropicChunk = MessageStart | MessageDelta | ContentBlockStart | ContentBlockDelta | UnknownChunk


def _decode_anthropic(data: dict[str, Any]) -> AnthropicChunk:
    kind = data.get("type")

    if kind == "message_start":
        usage = data["message"]["usage"]
        return MessageStart(
            input_tokens=int(usage.get("input_tokens") or 0),
            output_tokens=int(usage.get("output_tokens") or 0),
            cache_creation_input_tokens=_int_or_none(usage.get("cache_creation_input_tokens")),
            cache_read_input_tokens=_int_or_none(usage.get("cache_read_input_tokens")),
        )

    if kind == "message_delta":
        usage = data.get("usage") or {}
        return MessageDelta(output_tokens=int(usage.get("output_tokens") or 0))

    if kind == "content_block_start":
        block = data["content_block"]
        block_type = block["type"]
        text = block.get("thinking") if block_type == "thinking" else block.get("text")
        return ContentBlockStart(index=int(data["index"]), block_type=block_type, text=text or "")

    if kind == "content_block_delta":
        delta = data["delta"]
        delta_type = delta["type"]
        text = delta.get("thinking") if delta_type == "thinking_delta" else delta.get("text")
        return ContentBlockDelta(index=int(data["index"]), delta_type=delta_type, text=text or "")

    return UnknownChunk(type=kind, extra=data)


def decode_anthropic_event(event: Any) -> AnthropicChunk:
    """Decode one raw Anthropic stream event."""
    data = as_dict(event)
    if data is None:
        return UnknownChunk()
    try:
        return _decode_anthropic(data)
    except (AttributeError, KeyError, TypeError, ValueError):
        return UnknownChunk(type=data.get("type"), extra=data)
