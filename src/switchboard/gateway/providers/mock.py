"""Mock provider for exercising Switchboard without external API calls."""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Sequence

from ...events import StreamEvent, TextDelta, UsageReport
from ...exceptions import ProviderError, TransientProviderError
from ...types import ApiProvider, ConversationMessage, GatewaySettings
from .base import BaseProvider


@dataclass(frozen=True)
class MockCall:
    """One request received by MockProvider."""

    system_prompt: str
    messages: tuple[ConversationMessage, ...]


class MockProvider(BaseProvider):
    """Scripted provider for tests, demos and development without keys.

    Each call either replays ``events`` or streams ``default_response`` word
    by word followed by one usage report. The first ``fail_times`` calls
    raise before yielding anything; ``fail_after`` makes every call raise
    once that many events have been yielded.

    Example:
        provider = MockProvider(
            GatewaySettings(provider="mock"),
            default_response="Hello there",
            fail_times=2,
        )
    """

    provider_type = ApiProvider.MOCK
    model_family = "mock"

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        client: Any = None,
        *,
        events: Sequence[StreamEvent] | None = None,
        default_response: str = "This is a mock response from Switchboard MockProvider.",
        tokens_per_call: tuple[int, int] = (100, 50),
        latency_ms: float = 0,
        fail_times: int = 0,
        fail_after: int | None = None,
        transient: bool = True,
        response_generator: Callable[[str, Sequence[ConversationMessage]], str] | None = None,
    ):
        """Initialize mock provider.

        Args:
            settings: Gateway settings, defaults to a mock configuration.
            client: Ignored; accepted for factory compatibility.
            events: Exact events to replay on every successful call.
            default_response: Text streamed when ``events`` is not given.
            tokens_per_call: (input_tokens, output_tokens) for the usage report.
            latency_ms: Simulated delay before each event.
            fail_times: Number of leading calls that fail before any output.
            fail_after: Fail every call after this many events.
            transient: Whether simulated failures are retryable.
            response_generator: Custom function producing the response text.
        """
        super().__init__(settings or GatewaySettings(provider=ApiProvider.MOCK), client)
        self._events = list(events) if events is not None else None
        self._default_response = default_response
        self._tokens_per_call = tokens_per_call
        self._latency_ms = latency_ms
        self._fail_times = fail_times
        self._fail_after = fail_after
        self._transient = transient
        self._response_generator = response_generator
        self._call_log: list[MockCall] = []

    @property
    def call_log(self) -> list[MockCall]:
        """Get log of all requests made to this provider."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def _create_client(self) -> Any:
        return None

    def _failure(self, message: str) -> ProviderError:
        error_cls = TransientProviderError if self._transient else ProviderError
        return error_cls(self.provider_type.value, message)

    def _script(self, system_prompt: str, messages: Sequence[ConversationMessage]) -> list[StreamEvent]:
        if self._events is not None:
            return list(self._events)

        if self._response_generator:
            text = self._response_generator(system_prompt, messages)
        else:
            text = self._default_response

        words = text.split()
        pieces = [f"{word} " for word in words[:-1]] + words[-1:]
        script: list[StreamEvent] = [TextDelta(text=piece) for piece in pieces]
        input_tokens, output_tokens = self._tokens_per_call
        script.append(UsageReport(input_tokens=input_tokens, output_tokens=output_tokens))
        return script

    async def stream(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream the scripted response."""
        self._call_log.append(MockCall(system_prompt, tuple(messages)))

        if self.call_count <= self._fail_times:
            raise self._failure(f"Simulated failure on call {self.call_count}")

        for delivered, event in enumerate(self._script(system_prompt, messages)):
            if self._fail_after is not None and delivered >= self._fail_after:
                raise self._failure(f"Simulated interruption after {delivered} events")
            if self._latency_ms:
                await asyncio.sleep(self._latency_ms / 1000)
            yield event

    def reset(self) -> None:
        """Clear the call log."""
        self._call_log.clear()
