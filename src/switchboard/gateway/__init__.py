"""Switchboard Gateway Layer.

The Gateway is the routing layer between a caller and its model backend.
It provides:
- Selection of one backend adapter per session
- Retry of transient failures before the first event
- A single canonical event stream for every backend

Callers never talk to SDK clients directly - all calls go through the Gateway.
"""

from .gateway import Gateway
from .providers import (
    AnthropicProvider,
    BaseProvider,
    BedrockProvider,
    MockProvider,
    NebiusProvider,
    OpenAINativeProvider,
    OpenAIProvider,
    ProviderFactory,
    RequestyProvider,
)
from .usage import CacheUsagePolicy, EstimatedCacheUsage

__all__ = [
    "Gateway",
    "BaseProvider",
    "ProviderFactory",
    "AnthropicProvider",
    "BedrockProvider",
    "OpenAIProvider",
    "OpenAINativeProvider",
    "NebiusProvider",
    "RequestyProvider",
    "MockProvider",
    "CacheUsagePolicy",
    "EstimatedCacheUsage",
]
