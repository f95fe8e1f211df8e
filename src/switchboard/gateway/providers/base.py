"""Base provider interface for Switchboard Gateway.

All backend adapters must inherit from BaseProvider.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Sequence

from ...control.retry import is_transient_error
from ...events import StreamEvent, UsageReport
from ...exceptions import ProviderError, TransientProviderError
from ...models import ResolvedModel, calculate_cost, resolve_model
from ...types import ApiProvider, ConversationMessage, GatewaySettings


class BaseProvider(ABC):
    """Abstract base class for backend adapters.

    A provider owns exactly one SDK client, built lazily on first use from
    the gateway settings. ``stream()`` issues one network call and yields
    canonical events; it is not restartable.

    Example:
        class EchoProvider(BaseProvider):
            provider_type = ApiProvider.MOCK
            model_family = "mock"

            def _create_client(self) -> Any:
                return EchoClient()

            async def stream(self, system_prompt, messages):
                yield TextDelta(text=system_prompt)
    """

    # Provider identifier
    provider_type: ApiProvider

    # Key into models.MODEL_FAMILIES
    model_family: str = ""

    def __init__(self, settings: GatewaySettings, client: Any = None):
        """Initialize the base provider.

        Args:
            settings: Gateway settings for this session.
            client: Optional pre-built SDK client (mainly for tests).
        """
        self._settings = settings
        self._client = client

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    def _get_client(self) -> Any:
        """Lazily initialize and return the SDK client.

        Raises:
            ConfigurationError: If credentials are missing or cannot be resolved.
        """
        if self._client is None:
            self._client = self._create_client()
        return self._client

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the SDK client from settings."""
        pass

    def get_model(self) -> ResolvedModel:
        """Resolve the configured model id and its capabilities."""
        return resolve_model(
            self._settings.model_id,
            self.model_family,
            supports_prompt_cache=self._settings.supports_prompt_cache,
            supports_computer_use=self._settings.supports_computer_use,
        )

    @abstractmethod
    def stream(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream canonical events for one request.

        Args:
            system_prompt: The system prompt.
            messages: Conversation history, oldest first.

        Yields:
            TextDelta, ReasoningDelta and UsageReport events in wire order.

        Raises:
            ConfigurationError: If the client cannot be built.
            ProviderError: If the backend call fails.
        """
        pass

    def calculate_cost(self, usage: UsageReport) -> float:
        """Cost in dollars of one usage report for the configured model."""
        return calculate_cost(self.get_model().info, usage)

    def _provider_error(self, error: Exception) -> ProviderError:
        """Wrap an SDK or transport error, keeping its retry class."""
        error_cls = TransientProviderError if is_transient_error(error) else ProviderError
        return error_cls(self.provider_type.value, str(error), error)


class ProviderFactory:
    """Factory for creating provider instances.

    This class manages provider registration and instantiation.

    Example:
        ProviderFactory.register("openai", OpenAIProvider)

        provider = ProviderFactory.create("openai", settings)
    """

    _providers: dict[str, type[BaseProvider]] = {}

    @classmethod
    def register(cls, name: str | ApiProvider, provider_class: type[BaseProvider]) -> None:
        """Register a provider class.

        Args:
            name: Provider name (e.g., "openai").
            provider_class: Provider class to register.
        """
        key = name.value if isinstance(name, ApiProvider) else name
        cls._providers[key] = provider_class

    @classmethod
    def create(cls, name: str | ApiProvider, settings: GatewaySettings, **kwargs: Any) -> BaseProvider:
        """Create a provider instance.

        Args:
            name: Provider name.
            settings: Gateway settings.
            **kwargs: Extra arguments for the provider constructor.

        Returns:
            Provider instance.

        Raises:
            KeyError: If provider not registered.
        """
        key = name.value if isinstance(name, ApiProvider) else name
        if key not in cls._providers:
            raise KeyError(f"Provider '{key}' not registered")
        return cls._providers[key](settings, **kwargs)

    @classmethod
    def list_providers(cls) -> list[str]:
        """List registered providers."""
        return list(cls._providers.keys())

    @classmethod
    def is_registered(cls, name: str | ApiProvider) -> bool:
        """Check if a provider is registered."""
        key = name.value if isinstance(name, ApiProvider) else name
        return key in cls._providers
