"""Backend adapters for Switchboard Gateway.

Supported providers:
- Anthropic (Claude 3, Claude 3.5, Claude 3.7)
- AWS Bedrock (Anthropic models, optional cross-region inference)
- OpenAI-compatible endpoints, including Azure OpenAI
- OpenAI platform (GPT-4o, o1, o3-mini, etc.)
- Nebius AI Studio
- Requesty router
- Mock (for testing)
"""

from .anthropic import AnthropicMessagesProvider, AnthropicProvider
from .base import BaseProvider, ProviderFactory
from .bedrock import BedrockProvider, cross_region_model_id
from .mock import MockCall, MockProvider
from .nebius import NebiusProvider
from .openai import OpenAIProvider
from .openai_compatible import OpenAICompatibleProvider
from .openai_native import OpenAINativeProvider
from .requesty import RequestyProvider

# Register providers
ProviderFactory.register("anthropic", AnthropicProvider)
ProviderFactory.register("bedrock", BedrockProvider)
ProviderFactory.register("openai", OpenAIProvider)
ProviderFactory.register("openai-native", OpenAINativeProvider)
ProviderFactory.register("nebius", NebiusProvider)
ProviderFactory.register("requesty", RequestyProvider)
ProviderFactory.register("mock", MockProvider)

__all__ = [
    "BaseProvider",
    "ProviderFactory",
    "AnthropicMessagesProvider",
    "AnthropicProvider",
    "BedrockProvider",
    "cross_region_model_id",
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "OpenAINativeProvider",
    "NebiusProvider",
    "RequestyProvider",
    "MockProvider",
    "MockCall",
]
