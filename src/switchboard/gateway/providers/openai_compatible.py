"""Shared streaming logic for OpenAI-compatible chat completion backends."""

import logging
from typing import Any, AsyncIterator, Iterator, Sequence

from openai import AsyncOpenAI

from ...events import ReasoningDelta, StreamEvent, TextDelta
from ...exceptions import ConfigurationError, SwitchboardError
from ...models import ResolvedModel, requires_r1_format
from ...transform import SystemProjection, add_openai_cache_control, build_openai_messages
from ...types import ConversationMessage
from ..chunks import (
    OpenAIChunk,
    OpenAIUsage,
    UnknownChunk,
    decode_openai_chunk,
    decode_openai_completion,
)
from ..usage import DEFAULT_CACHE_POLICY, CacheUsagePolicy, usage_report
from .base import BaseProvider

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(BaseProvider):
    """Base for providers speaking the chat completions protocol.

    Subclasses pick the endpoint and tweak the request through the
    ``_projection``, ``_max_tokens`` and ``_extra_params`` hooks.
    """

    # Used when settings.base_url is not set
    default_base_url: str | None = None

    # Sent with every request
    default_headers: dict[str, str] = {}

    # Policy for backends that accept cache markers but report no counters
    cache_policy: CacheUsagePolicy = DEFAULT_CACHE_POLICY

    def _create_client(self) -> Any:
        """Build the OpenAI client from settings."""
        if not self._settings.api_key:
            raise ConfigurationError(
                f"An API key is required for the '{self.provider_type.value}' provider",
                setting="api_key",
            )

        kwargs: dict[str, Any] = {
            "api_key": self._settings.api_key,
            "timeout": self._settings.request_timeout,
            "max_retries": 0,  # retries are handled by RetryStrategy
        }
        base_url = self._settings.base_url or self.default_base_url
        if base_url:
            kwargs["base_url"] = base_url
        if self.default_headers:
            kwargs["default_headers"] = dict(self.default_headers)

        return AsyncOpenAI(**kwargs)

    # =========================================================================
    # REQUEST
    # =========================================================================

    def _projection(self, model: ResolvedModel) -> SystemProjection:
        if requires_r1_format(model.id):
            return SystemProjection.R1
        return SystemProjection.SYSTEM

    def _max_tokens(self, model: ResolvedModel) -> int | None:
        return None

    def _extra_params(self, model: ResolvedModel) -> dict[str, Any]:
        return {"temperature": 0}

    def _uses_streaming(self, model: ResolvedModel) -> bool:
        return True

    def _cache_requested(self, model: ResolvedModel) -> bool:
        return model.info.supports_prompt_cache

    def build_request(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> dict[str, Any]:
        """Build the chat completions request body.

        Pure: identical inputs and settings give an identical payload.
        """
        model = self.get_model()
        openai_messages = build_openai_messages(system_prompt, messages, self._projection(model))
        if self._cache_requested(model):
            openai_messages = add_openai_cache_control(openai_messages)

        request: dict[str, Any] = {
            "model": model.id,
            "messages": openai_messages,
        }

        max_tokens = self._max_tokens(model)
        if max_tokens is not None:
            request["max_tokens"] = max_tokens

        request.update(self._extra_params(model))

        if self._uses_streaming(model):
            request["stream"] = True
            request["stream_options"] = {"include_usage": True}

        return request

    # =========================================================================
    # RESPONSE
    # =========================================================================

    def _chunk_events(self, chunk: OpenAIChunk, cache_requested: bool) -> Iterator[StreamEvent]:
        """Map one decoded chunk to canonical events."""
        if chunk.content:
            yield TextDelta(text=chunk.content)
        if chunk.reasoning:
            yield ReasoningDelta(text=chunk.reasoning)
        if chunk.usage is not None:
            yield usage_report(chunk.usage, cache_requested, self.cache_policy)

    async def stream(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream a chat completion as canonical events.

        Raises:
            ConfigurationError: If no API key is configured.
            ProviderError: If the request fails.
        """
        client = self._get_client()
        model = self.get_model()
        request = self.build_request(system_prompt, messages)
        # The estimate only applies once a user message carries a cache marker
        cache_requested = self._cache_requested(model) and any(
            m["role"] == "user" for m in request["messages"]
        )

        try:
            if not request.get("stream"):
                response = await client.chat.completions.create(**request)
                for event in self._single_response_events(response, cache_requested):
                    yield event
                return

            stream = await client.chat.completions.create(**request)
            try:
                async for raw in stream:
                    chunk = decode_openai_chunk(raw)
                    if isinstance(chunk, UnknownChunk):
                        logger.debug(f"Skipping unrecognized chunk: {chunk.type}")
                        continue
                    for event in self._chunk_events(chunk, cache_requested):
                        yield event
            finally:
                await stream.close()

        except SwitchboardError:
            raise
        except Exception as e:
            raise self._provider_error(e) from e

    def _single_response_events(
        self, response: Any, cache_requested: bool
    ) -> Iterator[StreamEvent]:
        """Synthesize exactly one TextDelta and one UsageReport."""
        decoded = decode_openai_completion(response)
        if isinstance(decoded, UnknownChunk):
            decoded = OpenAIChunk()
        yield TextDelta(text=decoded.content or "")
        yield usage_report(decoded.usage or OpenAIUsage(), cache_requested, self.cache_policy)
