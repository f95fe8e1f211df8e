"""Nebius AI Studio provider implementation for Switchboard Gateway.

Nebius exposes an OpenAI-compatible API with its own model catalogue.
"""

from ...models import NEBIUS_DEFAULT_URL
from ...types import ApiProvider
from .openai_compatible import OpenAICompatibleProvider


class NebiusProvider(OpenAICompatibleProvider):
    """Nebius AI Studio provider.

    DeepSeek reasoning models get the R1 projection and their
    ``reasoning_content`` is streamed as ReasoningDelta events.
    """

    provider_type = ApiProvider.NEBIUS
    model_family = "nebius"
    default_base_url = NEBIUS_DEFAULT_URL
