"""Anthropic provider implementation for Switchboard Gateway."""

import logging
from abc import abstractmethod
from typing import Any, AsyncIterator, Sequence

from anthropic import AsyncAnthropic

from ...events import ReasoningDelta, StreamEvent, TextDelta, UsageReport
from ...exceptions import ConfigurationError, SwitchboardError
from ...models import ResolvedModel
from ...transform import (
    add_anthropic_cache_control,
    build_anthropic_system,
    convert_to_anthropic_messages,
)
from ...types import ApiProvider, ConversationMessage
from ..chunks import (
    ContentBlockDelta,
    ContentBlockStart,
    MessageDelta,
    MessageStart,
    UnknownChunk,
    decode_anthropic_event,
)
from .base import BaseProvider

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 8192


class AnthropicMessagesProvider(BaseProvider):
    """Shared streaming logic for backends speaking the Messages API."""

    def _output_limit(self, model: ResolvedModel) -> int:
        return model.info.max_tokens if model.info.max_tokens > 0 else DEFAULT_MAX_TOKENS

    @staticmethod
    async def _process_stream(stream: AsyncIterator[Any]) -> AsyncIterator[StreamEvent]:
        """Translate raw Messages API stream events into canonical events.

        A newline is emitted before every text block after the first one.
        """
        text_blocks = 0

        async for raw in stream:
            chunk = decode_anthropic_event(raw)

            if isinstance(chunk, MessageStart):
                yield UsageReport(
                    input_tokens=chunk.input_tokens,
                    output_tokens=chunk.output_tokens,
                    cache_write_tokens=chunk.cache_creation_input_tokens,
                    cache_read_tokens=chunk.cache_read_input_tokens,
                )

            elif isinstance(chunk, MessageDelta):
                yield UsageReport(input_tokens=0, output_tokens=chunk.output_tokens)

            elif isinstance(chunk, ContentBlockStart):
                if chunk.block_type == "text":
                    if text_blocks > 0:
                        yield TextDelta(text="\n")
                    text_blocks += 1
                    if chunk.text:
                        yield TextDelta(text=chunk.text)
                elif chunk.block_type == "thinking" and chunk.text:
                    yield ReasoningDelta(text=chunk.text)

            elif isinstance(chunk, ContentBlockDelta):
                if chunk.delta_type == "text_delta" and chunk.text:
                    yield TextDelta(text=chunk.text)
                elif chunk.delta_type == "thinking_delta" and chunk.text:
                    yield ReasoningDelta(text=chunk.text)

            elif isinstance(chunk, UnknownChunk):
                logger.debug(f"Skipping unrecognized event: {chunk.type}")

    async def stream(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream a Messages API response as canonical events.

        Raises:
            ConfigurationError: If credentials are missing.
            ProviderError: If the request fails.
        """
        client = self._get_client()
        request = self.build_request(system_prompt, messages)

        try:
            stream = await client.messages.create(**request)
            try:
                async for event in self._process_stream(stream):
                    yield event
            finally:
                await stream.close()

        except SwitchboardError:
            raise
        except Exception as e:
            raise self._provider_error(e) from e

    @abstractmethod
    def build_request(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> dict[str, Any]:
        """Build the Messages API request body."""
        pass


class AnthropicProvider(AnthropicMessagesProvider):
    """Anthropic API provider.

    Supports Claude 3, Claude 3.5 and Claude 3.7 models, prompt caching and
    extended thinking.

    Example:
        provider = AnthropicProvider(GatewaySettings(api_key="sk-ant-..."))
        async for event in provider.stream(system_prompt, messages):
            ...
    """

    provider_type = ApiProvider.ANTHROPIC
    model_family = "anthropic"

    def _create_client(self) -> Any:
        """Build the Anthropic client from settings."""
        if not self._settings.api_key:
            raise ConfigurationError("An API key is required for Anthropic", setting="api_key")

        kwargs: dict[str, Any] = {
            "api_key": self._settings.api_key,
            "timeout": self._settings.request_timeout,
            "max_retries": 0,  # retries are handled by RetryStrategy
        }
        if self._settings.base_url:
            kwargs["base_url"] = self._settings.base_url

        return AsyncAnthropic(**kwargs)

    def build_request(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> dict[str, Any]:
        """Build the Messages API request body.

        Raises:
            ConfigurationError: If the thinking budget does not fit the output limit.
        """
        model = self.get_model()
        cache = model.info.supports_prompt_cache
        max_tokens = self._output_limit(model)

        anthropic_messages = convert_to_anthropic_messages(messages)
        if cache:
            anthropic_messages = add_anthropic_cache_control(anthropic_messages)

        request: dict[str, Any] = {
            "model": model.id,
            "max_tokens": max_tokens,
            "system": build_anthropic_system(system_prompt, cache=cache),
            "messages": anthropic_messages,
            "stream": True,
        }

        budget = self._settings.thinking_budget_tokens
        if budget is not None:
            if budget >= max_tokens:
                raise ConfigurationError(
                    f"thinking_budget_tokens ({budget}) must be below max_tokens ({max_tokens})",
                    setting="thinking_budget_tokens",
                )
            # Extended thinking rejects a custom temperature
            request["thinking"] = {"type": "enabled", "budget_tokens": budget}
        else:
            request["temperature"] = 0

        return request
