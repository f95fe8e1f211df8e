"""AWS Bedrock provider implementation for Switchboard Gateway."""

import asyncio
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Sequence

from anthropic import AsyncAnthropicBedrock

from ...credentials import CredentialResolver, ProfileCredentialResolver
from ...events import StreamEvent
from ...models import BEDROCK_MODELS
from ...transform import build_anthropic_system, convert_to_anthropic_messages
from ...types import ApiProvider, ConversationMessage, GatewaySettings
from .anthropic import AnthropicMessagesProvider

logger = logging.getLogger(__name__)

# Region prefix -> inference profile prefix
CROSS_REGION_PREFIXES = {
    "us-": "us.",
    "eu-": "eu.",
}


def cross_region_model_id(model_id: str, region: str) -> str:
    """Rewrite a model id to its cross-region inference profile.

    Example:
        cross_region_model_id("m", "us-east-1")   # "us.m"
        cross_region_model_id("m", "ap-south-1")  # "m"
    """
    prefix = CROSS_REGION_PREFIXES.get((region or "")[:3])
    return f"{prefix}{model_id}" if prefix else model_id


class BedrockProvider(AnthropicMessagesProvider):
    """Anthropic models on AWS Bedrock.

    Credentials come from a named profile (resolved on every client build),
    explicit access keys, or the default AWS chain of the SDK.

    Example:
        provider = BedrockProvider(GatewaySettings(
            provider="bedrock", aws_region="eu-west-1",
            aws_use_profile=True, aws_profile="work",
            aws_use_cross_region_inference=True,
        ))
    """

    provider_type = ApiProvider.BEDROCK
    model_family = "bedrock"

    def __init__(
        self,
        settings: GatewaySettings,
        client: Any = None,
        credential_resolver: CredentialResolver | None = None,
    ):
        super().__init__(settings, client)
        self._credential_resolver = credential_resolver or ProfileCredentialResolver()

    def _create_client(self) -> Any:
        """Build the Bedrock client.

        Raises:
            ConfigurationError: If the configured profile cannot be resolved.
        """
        settings = self._settings
        kwargs: dict[str, Any] = {
            "aws_region": settings.aws_region,
            "timeout": settings.request_timeout,
            "max_retries": 0,
        }

        if settings.aws_use_profile:
            profile = settings.aws_profile or "default"
            credentials = self._credential_resolver.resolve(profile)
            logger.debug(f"Using AWS profile '{profile}' for Bedrock")
            kwargs["aws_access_key"] = credentials.access_key
            kwargs["aws_secret_key"] = credentials.secret_key
            kwargs["aws_session_token"] = credentials.session_token
        elif settings.aws_access_key and settings.aws_secret_key:
            kwargs["aws_access_key"] = settings.aws_access_key
            kwargs["aws_secret_key"] = settings.aws_secret_key
            if settings.aws_session_token:
                kwargs["aws_session_token"] = settings.aws_session_token

        return AsyncAnthropicBedrock(**kwargs)

    async def stream(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> AsyncIterator[StreamEvent]:
        """Stream a Bedrock response as canonical events.

        Profile lookups read the AWS config files, so the client is built in
        a worker thread.
        """
        if self._client is None:
            await asyncio.to_thread(self._get_client)

        async with aclosing(super().stream(system_prompt, messages)) as events:
            async for event in events:
                yield event

    def effective_model_id(self) -> str:
        """Model id sent on the wire, after cross-region rewriting."""
        model_id = self.get_model().id
        if self._settings.aws_use_cross_region_inference:
            return cross_region_model_id(model_id, self._settings.aws_region)
        return model_id

    def build_request(
        self, system_prompt: str, messages: Sequence[ConversationMessage]
    ) -> dict[str, Any]:
        """Build the Messages API request body for Bedrock."""
        model = self.get_model()

        # Catalogue models take the structured system form; custom ids get a string
        if model.id in BEDROCK_MODELS:
            system: Any = build_anthropic_system(system_prompt)
        else:
            system = system_prompt

        return {
            "model": self.effective_model_id(),
            "max_tokens": self._output_limit(model),
            "temperature": 0,
            "system": system,
            "messages": convert_to_anthropic_messages(messages),
            "stream": True,
        }
