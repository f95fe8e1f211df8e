"""Switchboard - one streaming interface for many model backends.

Simple usage:
    from switchboard import Gateway, GatewaySettings, ConversationMessage

    gateway = Gateway(GatewaySettings.from_env())
    async for event in gateway.create_message(
        "You are terse.", [ConversationMessage.user("What is 2+2?")]
    ):
        print(event)
"""

__version__ = "0.1.0"

# Types
from .types import (
    ApiProvider,
    ContentPart,
    ConversationMessage,
    GatewaySettings,
    ImagePart,
    ReasoningEffort,
    TextPart,
)

# Events
from .events import ReasoningDelta, StreamEvent, TextDelta, UsageReport, parse_event

# Exceptions
from .exceptions import (
    ConfigurationError,
    GatewayError,
    ProviderError,
    ProviderNotFoundError,
    RetryExhaustedError,
    StreamInterruptedError,
    SwitchboardError,
    TransientProviderError,
)

# Models
from .models import ModelInfo, ResolvedModel, calculate_cost, resolve_model

# Control
from .control import RetryConfig, RetryStrategy, is_transient_error, with_retry

# Credentials
from .credentials import AwsCredentials, CredentialResolver, ProfileCredentialResolver

# Gateway
from .gateway import BaseProvider, Gateway, MockProvider, ProviderFactory

# Utils
from .utils import StructuredLogger, configure_logging, get_logger

__all__ = [
    "__version__",
    # Types
    "ApiProvider",
    "ContentPart",
    "ConversationMessage",
    "GatewaySettings",
    "ImagePart",
    "ReasoningEffort",
    "TextPart",
    # Events
    "ReasoningDelta",
    "StreamEvent",
    "TextDelta",
    "UsageReport",
    "parse_event",
    # Exceptions
    "ConfigurationError",
    "GatewayError",
    "ProviderError",
    "ProviderNotFoundError",
    "RetryExhaustedError",
    "StreamInterruptedError",
    "SwitchboardError",
    "TransientProviderError",
    # Models
    "ModelInfo",
    "ResolvedModel",
    "calculate_cost",
    "resolve_model",
    # Control
    "RetryConfig",
    "RetryStrategy",
    "is_transient_error",
    "with_retry",
    # Credentials
    "AwsCredentials",
    "CredentialResolver",
    "ProfileCredentialResolver",
    # Gateway
    "BaseProvider",
    "Gateway",
    "MockProvider",
    "ProviderFactory",
    # Utils
    "StructuredLogger",
    "configure_logging",
    "get_logger",
]
