"""Gateway - the single entry point for streaming model calls.

FLOW:
1. Caller calls gateway.create_message(system_prompt, messages)
2. Gateway resolves the model and hands the request to its provider
3. The provider call runs inside the RetryStrategy
4. Canonical events are relayed to the caller as they arrive
"""

from contextlib import aclosing
from typing import Any, AsyncIterator, Sequence

from ..control.retry import RetryStrategy
from ..credentials import CredentialResolver
from ..events import StreamEvent, UsageReport
from ..exceptions import ProviderNotFoundError
from ..models import ResolvedModel
from ..types import ApiProvider, ConversationMessage, GatewaySettings
from ..utils.logging import StructuredLogger
from .providers import BaseProvider, ProviderFactory

_log = StructuredLogger("gateway")


class Gateway:
    """Dispatches one conversation session to its configured backend.

    The provider is chosen once, at construction, from ``settings.provider``.
    Settings are never changed afterwards.

    Usage:
        gateway = Gateway(GatewaySettings(provider="anthropic", api_key="sk-ant-..."))
        async for event in gateway.create_message("You are terse.", messages):
            if isinstance(event, TextDelta):
                print(event.text, end="")
    """

    def __init__(
        self,
        settings: GatewaySettings,
        *,
        credential_resolver: CredentialResolver | None = None,
        client: Any = None,
        provider: BaseProvider | None = None,
    ):
        """Create gateway.

        Args:
            settings: Session configuration.
            credential_resolver: Resolver for profile-based AWS credentials.
            client: Optional pre-built SDK client (mainly for tests).
            provider: Use this provider instance instead of building one.

        Raises:
            ProviderNotFoundError: If ``settings.provider`` is not registered.
        """
        self._settings = settings
        self._retry = RetryStrategy(settings.retry)

        if provider is not None:
            self._provider = provider
            return

        kwargs: dict[str, Any] = {"client": client}
        if settings.provider == ApiProvider.BEDROCK:
            kwargs["credential_resolver"] = credential_resolver

        try:
            self._provider = ProviderFactory.create(settings.provider, settings, **kwargs)
        except KeyError as e:
            raise ProviderNotFoundError(
                settings.provider.value, ProviderFactory.list_providers()
            ) from e

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    @property
    def provider(self) -> BaseProvider:
        return self._provider

    def get_model(self) -> ResolvedModel:
        """Resolve the configured model id and its capabilities."""
        return self._provider.get_model()

    async def create_message(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream the model's reply as canonical events.

        Each event is forwarded as soon as the provider produces it.

        Args:
            system_prompt: The system prompt.
            messages: Conversation history, oldest first.

        Yields:
            TextDelta, ReasoningDelta and UsageReport events.

        Raises:
            ConfigurationError: If credentials are missing or invalid.
            ProviderError: If the backend rejects the request.
            RetryExhaustedError: If every attempt failed transiently.
            StreamInterruptedError: If the stream failed after delivering events.
        """
        log = _log.bind(
            provider=self._provider.provider_type.value, model=self.get_model().id
        )
        log.debug("Starting stream")

        stream = self._retry.wrap_stream(self._provider.stream)
        count = 0
        cost = 0.0

        async with aclosing(stream(system_prompt, messages)) as events:
            async for event in events:
                count += 1
                if isinstance(event, UsageReport):
                    cost += self._provider.calculate_cost(event)
                yield event

        log.debug("Finished stream", events=count, cost=f"{cost:.6f}")
