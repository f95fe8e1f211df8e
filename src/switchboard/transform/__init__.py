"""Request payload converters, one per wire format."""

from .anthropic_format import build_anthropic_system, convert_to_anthropic_messages
from .cache import add_anthropic_cache_control, add_openai_cache_control, mark_cacheable
from .openai_format import SystemProjection, build_openai_messages, convert_to_openai_messages
from .r1_format import convert_to_r1_format

__all__ = [
    "SystemProjection",
    "add_anthropic_cache_control",
    "add_openai_cache_control",
    "build_anthropic_system",
    "build_openai_messages",
    "convert_to_anthropic_messages",
    "convert_to_openai_messages",
    "convert_to_r1_format",
    "mark_cacheable",
]
