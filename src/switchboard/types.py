"""Core types and data models for Switchboard."""

import os
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .control.retry import RetryConfig


# =============================================================================
# Enums
# =============================================================================


class ApiProvider(str, Enum):
    """Supported backend families."""

    ANTHROPIC = "anthropic"
    BEDROCK = "bedrock"
    OPENAI = "openai"
    OPENAI_NATIVE = "openai-native"
    NEBIUS = "nebius"
    REQUESTY = "requesty"
    MOCK = "mock"


ReasoningEffort = Literal["low", "medium", "high"]


# =============================================================================
# Conversation
# =============================================================================


class TextPart(BaseModel):
    """A plain text part of a message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """A base64-encoded image part of a message."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    media_type: str = "image/png"
    data: str

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


class ConversationMessage(BaseModel):
    """A message in the conversation history.

    Content is either a plain string or an ordered list of parts.
    """

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str | list[ContentPart]

    @classmethod
    def user(cls, content: str | list[Any]) -> "ConversationMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str | list[Any]) -> "ConversationMessage":
        return cls(role="assistant", content=content)


# =============================================================================
# Settings
# =============================================================================


class GatewaySettings(BaseSettings):
    """Configuration for one gateway session.

    Fields are read from ``SWITCHBOARD_*`` environment variables unless given
    explicitly. Settings are frozen: a Gateway never changes them mid-stream.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOARD_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        arbitrary_types_allowed=True,
        protected_namespaces=("settings_",),
    )

    provider: ApiProvider = ApiProvider.ANTHROPIC
    api_key: str | None = Field(default=None, repr=False)
    base_url: str | None = None
    model_id: str | None = None

    # AWS / Bedrock
    aws_access_key: str | None = Field(default=None, repr=False)
    aws_secret_key: str | None = Field(default=None, repr=False)
    aws_session_token: str | None = Field(default=None, repr=False)
    aws_region: str = "us-west-2"
    aws_use_profile: bool = False
    aws_profile: str | None = None
    aws_use_cross_region_inference: bool = False

    # Azure OpenAI
    azure_api_version: str = "2024-08-01-preview"

    # Feature flags. None means "use the model table's value".
    supports_prompt_cache: bool | None = None
    supports_computer_use: bool | None = None
    reasoning_effort: ReasoningEffort = "medium"
    thinking_budget_tokens: int | None = Field(default=None, ge=1024)

    request_timeout: float = Field(default=600.0, gt=0)
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @classmethod
    def from_env(cls, prefix: str = "SWITCHBOARD_", **overrides: Any) -> "GatewaySettings":
        """Build settings from environment variables.

        ``SWITCHBOARD_PROVIDER``, ``SWITCHBOARD_MODEL_ID`` and friends map onto
        the field of the same name. API keys fall back to the vendor's usual
        variable (``OPENAI_API_KEY``, ``ANTHROPIC_API_KEY``, ...) and the region
        to ``AWS_REGION``.

        Example:
            settings = GatewaySettings.from_env(model_id="gpt-4o")
        """
        settings = cls(_env_prefix=prefix, **overrides)
        fallback: dict[str, Any] = {}

        if settings.api_key is None:
            key_var = _VENDOR_KEY_VARS.get(settings.provider)
            if key_var and os.environ.get(key_var):
                fallback["api_key"] = os.environ[key_var]

        explicit_region = "aws_region" in overrides or os.environ.get(f"{prefix}AWS_REGION")
        if not explicit_region and os.environ.get("AWS_REGION"):
            fallback["aws_region"] = os.environ["AWS_REGION"]

        return settings.model_copy(update=fallback) if fallback else settings


_VENDOR_KEY_VARS = {
    ApiProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    ApiProvider.OPENAI: "OPENAI_API_KEY",
    ApiProvider.OPENAI_NATIVE: "OPENAI_API_KEY",
    ApiProvider.NEBIUS: "NEBIUS_API_KEY",
    ApiProvider.REQUESTY: "REQUESTY_API_KEY",
}
