"""OpenAI platform provider implementation for Switchboard Gateway."""

from typing import Any

from ...models import ResolvedModel
from ...transform import SystemProjection
from ...types import ApiProvider
from .openai_compatible import OpenAICompatibleProvider

# Earliest reasoning models: no system prompt, no streaming, fixed temperature
NO_STREAM_MODELS = frozenset({"o1-preview", "o1-mini"})

# Reasoning models that take the system prompt as a developer message
DEVELOPER_ROLE_MODELS = frozenset({"o1", "o3-mini"})


class OpenAINativeProvider(OpenAICompatibleProvider):
    """OpenAI API provider for api.openai.com models.

    Request shape depends on the model:
    - o1-preview / o1-mini: system prompt merged into the first user message,
      one blocking call, one TextDelta then one UsageReport.
    - o1 / o3-mini: developer-role system prompt plus ``reasoning_effort``.
    - everything else: system-role prompt, ``temperature=0``.
    """

    provider_type = ApiProvider.OPENAI_NATIVE
    model_family = "openai-native"

    def _projection(self, model: ResolvedModel) -> SystemProjection:
        if model.id in NO_STREAM_MODELS:
            return SystemProjection.MERGED_USER
        if model.id in DEVELOPER_ROLE_MODELS:
            return SystemProjection.DEVELOPER
        return SystemProjection.SYSTEM

    def _uses_streaming(self, model: ResolvedModel) -> bool:
        return model.id not in NO_STREAM_MODELS

    def _extra_params(self, model: ResolvedModel) -> dict[str, Any]:
        if model.id in NO_STREAM_MODELS:
            return {}
        if model.id in DEVELOPER_ROLE_MODELS:
            return {"reasoning_effort": self._settings.reasoning_effort}
        return {"temperature": 0}
