"""Requesty router provider implementation for Switchboard Gateway.

Requesty proxies many vendors behind an OpenAI-compatible API and reports
Anthropic cache usage in ``prompt_tokens_details`` (``caching_tokens`` for
writes, ``cached_tokens`` for reads).
"""

from ...types import ApiProvider
from .openai_compatible import OpenAICompatibleProvider

REQUESTY_BASE_URL = "https://router.requesty.ai/v1"


class RequestyProvider(OpenAICompatibleProvider):
    """Requesty router provider.

    Models are opaque router ids, so capabilities fall back to the sane
    defaults unless settings override them.
    """

    provider_type = ApiProvider.REQUESTY
    model_family = "requesty"
    default_base_url = REQUESTY_BASE_URL
    default_headers = {
        "HTTP-Referer": "https://github.com/switchboard-llm/switchboard",
        "X-Title": "Switchboard",
    }
