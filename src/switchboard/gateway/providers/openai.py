"""OpenAI-compatible provider implementation for Switchboard Gateway.

Serves any endpoint speaking the chat completions protocol, including Azure
OpenAI deployments and proxies that expose other vendors' models.
"""

from typing import Any

from openai import AsyncAzureOpenAI

from ...exceptions import ConfigurationError
from ...models import ResolvedModel
from ...types import ApiProvider
from .openai_compatible import OpenAICompatibleProvider

# Claude ids that default to a 4096-token limit on some proxies unless asked
_EXTENDED_OUTPUT_SUFFIXES = (
    "claude-3.5-sonnet",
    "claude-3.5-sonnet:beta",
    "claude-3.5-sonnet-20240620",
    "claude-3.5-sonnet-20240620:beta",
    "claude-3-5-haiku",
    "claude-3-5-haiku:beta",
    "claude-3-5-haiku-20241022",
    "claude-3-5-haiku-20241022:beta",
)


class OpenAIProvider(OpenAICompatibleProvider):
    """Generic OpenAI-compatible API provider.

    Uses ``AsyncAzureOpenAI`` when the base URL points at ``azure.com``.
    Prompt caching is opt-in through ``settings.supports_prompt_cache``;
    these endpoints report no cache counters, so usage carries estimates.

    Example:
        provider = OpenAIProvider(GatewaySettings(
            provider="openai", api_key="sk-...", base_url="https://example.com/v1",
            model_id="my-model",
        ))
        async for event in provider.stream("You are terse.", messages):
            ...
    """

    provider_type = ApiProvider.OPENAI
    model_family = "openai"

    def _is_azure(self) -> bool:
        return "azure.com" in (self._settings.base_url or "").lower()

    def _create_client(self) -> Any:
        """Build an OpenAI or Azure OpenAI client."""
        if not self._is_azure():
            return super()._create_client()

        if not self._settings.api_key:
            raise ConfigurationError("An API key is required for Azure OpenAI", setting="api_key")

        return AsyncAzureOpenAI(
            base_url=self._settings.base_url,
            api_key=self._settings.api_key,
            api_version=self._settings.azure_api_version,
            timeout=self._settings.request_timeout,
            max_retries=0,
        )

    def _max_tokens(self, model: ResolvedModel) -> int | None:
        if model.id.lower().endswith(_EXTENDED_OUTPUT_SUFFIXES):
            return 8192
        return None
