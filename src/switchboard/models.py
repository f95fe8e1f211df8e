"""Model capability tables and resolution.

Tables are built once at import time and wrapped in read-only mappings, so
they can be shared across concurrent sessions without locking.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict

from .events import UsageReport


class ModelInfo(BaseModel):
    """Static capability and pricing data for one model.

    Prices are USD per million tokens.
    """

    model_config = ConfigDict(frozen=True)

    max_tokens: int = -1
    context_window: int = 128_000
    supports_images: bool = False
    supports_computer_use: bool = False
    supports_prompt_cache: bool = False
    input_price: float = 0.0
    output_price: float = 0.0
    cache_writes_price: float | None = None
    cache_reads_price: float | None = None
    reasoning: bool = False
    description: str | None = None


@dataclass(frozen=True)
class ResolvedModel:
    """The effective model identifier and its capabilities."""

    id: str
    info: ModelInfo


# Used when no table knows the requested model. max_tokens=-1 leaves the
# output limit to the backend.
OPENAI_MODEL_INFO_SANE_DEFAULTS = ModelInfo(
    max_tokens=-1,
    context_window=128_000,
    supports_images=True,
    supports_prompt_cache=False,
    input_price=0.0,
    output_price=0.0,
)


# =============================================================================
# Anthropic
# =============================================================================

ANTHROPIC_DEFAULT_MODEL_ID = "claude-3-5-sonnet-20241022"

ANTHROPIC_MODELS: Mapping[str, ModelInfo] = MappingProxyType({
    "claude-3-7-sonnet-20250219": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_computer_use=True,
        supports_prompt_cache=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
        reasoning=True,
    ),
    "claude-3-5-sonnet-20241022": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_computer_use=True,
        supports_prompt_cache=True,
        input_price=3.0,
        output_price=15.0,
        cache_writes_price=3.75,
        cache_reads_price=0.3,
    ),
    "claude-3-5-haiku-20241022": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=False,
        supports_prompt_cache=True,
        input_price=0.8,
        output_price=4.0,
        cache_writes_price=1.0,
        cache_reads_price=0.08,
    ),
    "claude-3-opus-20240229": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=True,
        input_price=15.0,
        output_price=75.0,
        cache_writes_price=18.75,
        cache_reads_price=1.5,
    ),
    "claude-3-haiku-20240307": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=True,
        input_price=0.25,
        output_price=1.25,
        cache_writes_price=0.3,
        cache_reads_price=0.03,
    ),
})


# =============================================================================
# AWS Bedrock
# =============================================================================

BEDROCK_DEFAULT_MODEL_ID = "anthropic.claude-3-5-sonnet-20241022-v2:0"

BEDROCK_MODELS: Mapping[str, ModelInfo] = MappingProxyType({
    "anthropic.claude-3-5-sonnet-20241022-v2:0": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_computer_use=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=15.0,
    ),
    "anthropic.claude-3-5-haiku-20241022-v1:0": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=1.0,
        output_price=5.0,
    ),
    "anthropic.claude-3-5-sonnet-20240620-v1:0": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=15.0,
    ),
    "anthropic.claude-3-opus-20240229-v1:0": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=15.0,
        output_price=75.0,
    ),
    "anthropic.claude-3-sonnet-20240229-v1:0": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=15.0,
    ),
    "anthropic.claude-3-haiku-20240307-v1:0": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=0.25,
        output_price=1.25,
    ),
})


# =============================================================================
# GCP Vertex (Anthropic models, proxied by OpenAI-compatible endpoints)
# =============================================================================

VERTEX_MODELS: Mapping[str, ModelInfo] = MappingProxyType({
    "claude-3-5-sonnet-v2@20241022": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_computer_use=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=15.0,
    ),
    "claude-3-5-sonnet@20240620": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=15.0,
    ),
    "claude-3-5-haiku@20241022": ModelInfo(
        max_tokens=8192,
        context_window=200_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=1.0,
        output_price=5.0,
    ),
    "claude-3-opus@20240229": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=15.0,
        output_price=75.0,
    ),
    "claude-3-haiku@20240307": ModelInfo(
        max_tokens=4096,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=0.25,
        output_price=1.25,
    ),
})


# =============================================================================
# OpenAI
# =============================================================================

OPENAI_NATIVE_DEFAULT_MODEL_ID = "gpt-4o"

OPENAI_NATIVE_MODELS: Mapping[str, ModelInfo] = MappingProxyType({
    "o3-mini": ModelInfo(
        max_tokens=100_000,
        context_window=200_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=1.1,
        output_price=4.4,
        reasoning=True,
    ),
    "o1": ModelInfo(
        max_tokens=100_000,
        context_window=200_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=15.0,
        output_price=60.0,
        reasoning=True,
    ),
    "o1-preview": ModelInfo(
        max_tokens=32_768,
        context_window=128_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=15.0,
        output_price=60.0,
        reasoning=True,
    ),
    "o1-mini": ModelInfo(
        max_tokens=65_536,
        context_window=128_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=3.0,
        output_price=12.0,
        reasoning=True,
    ),
    "gpt-4o": ModelInfo(
        max_tokens=4096,
        context_window=128_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=5.0,
        output_price=15.0,
    ),
    "gpt-4o-mini": ModelInfo(
        max_tokens=16_384,
        context_window=128_000,
        supports_images=True,
        supports_prompt_cache=False,
        input_price=0.15,
        output_price=0.6,
    ),
})


# =============================================================================
# Nebius AI Studio
# =============================================================================

NEBIUS_DEFAULT_URL = "https://api.studio.nebius.ai/v1"
NEBIUS_DEFAULT_MODEL_ID = "Qwen/Qwen2.5-32B-Instruct-fast"

NEBIUS_MODELS: Mapping[str, ModelInfo] = MappingProxyType({
    "deepseek-ai/DeepSeek-V3": ModelInfo(
        max_tokens=32_000,
        context_window=96_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=0.5,
        output_price=1.5,
    ),
    "deepseek-ai/DeepSeek-R1": ModelInfo(
        max_tokens=32_000,
        context_window=96_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=0.8,
        output_price=2.4,
        reasoning=True,
    ),
    "Qwen/Qwen2.5-32B-Instruct-fast": ModelInfo(
        max_tokens=8192,
        context_window=32_768,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=0.13,
        output_price=0.4,
    ),
    "Qwen/Qwen2.5-Coder-32B-Instruct-fast": ModelInfo(
        max_tokens=8192,
        context_window=128_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=0.1,
        output_price=0.3,
    ),
    "meta-llama/Meta-Llama-3.1-70B-Instruct-fast": ModelInfo(
        max_tokens=8192,
        context_window=128_000,
        supports_images=False,
        supports_prompt_cache=False,
        input_price=0.25,
        output_price=0.75,
    ),
})


# =============================================================================
# Resolution
# =============================================================================


@dataclass(frozen=True)
class ModelFamily:
    """Lookup order and default model for one backend family."""

    name: str
    tables: tuple[Mapping[str, ModelInfo], ...]
    default_id: str = ""
    default_info: ModelInfo = OPENAI_MODEL_INFO_SANE_DEFAULTS


MODEL_FAMILIES: Mapping[str, ModelFamily] = MappingProxyType({
    "anthropic": ModelFamily(
        "anthropic",
        (ANTHROPIC_MODELS,),
        ANTHROPIC_DEFAULT_MODEL_ID,
        ANTHROPIC_MODELS[ANTHROPIC_DEFAULT_MODEL_ID],
    ),
    "bedrock": ModelFamily(
        "bedrock",
        (BEDROCK_MODELS,),
        BEDROCK_DEFAULT_MODEL_ID,
        BEDROCK_MODELS[BEDROCK_DEFAULT_MODEL_ID],
    ),
    "vertex": ModelFamily("vertex", (VERTEX_MODELS,)),
    # OpenAI-compatible endpoints frequently proxy other vendors' ids
    "openai": ModelFamily("openai", (OPENAI_NATIVE_MODELS, BEDROCK_MODELS, VERTEX_MODELS)),
    "openai-native": ModelFamily(
        "openai-native",
        (OPENAI_NATIVE_MODELS,),
        OPENAI_NATIVE_DEFAULT_MODEL_ID,
        OPENAI_NATIVE_MODELS[OPENAI_NATIVE_DEFAULT_MODEL_ID],
    ),
    "nebius": ModelFamily(
        "nebius",
        (NEBIUS_MODELS,),
        NEBIUS_DEFAULT_MODEL_ID,
        NEBIUS_MODELS[NEBIUS_DEFAULT_MODEL_ID],
    ),
    "requesty": ModelFamily("requesty", ()),
    "mock": ModelFamily("mock", (), "mock-model"),
})


def lookup_model_info(model_id: str, family: str) -> ModelInfo | None:
    """Find a table entry for ``model_id`` in the family's lookup order."""
    for table in MODEL_FAMILIES[family].tables:
        if model_id in table:
            return table[model_id]
    return None


def resolve_model(
    requested_id: str | None,
    family: str,
    *,
    supports_prompt_cache: bool | None = None,
    supports_computer_use: bool | None = None,
) -> ResolvedModel:
    """Map a requested model id to its effective id and capabilities.

    Lookup order is the family's own table, then the tables it is known to
    proxy, then OPENAI_MODEL_INFO_SANE_DEFAULTS. The requested id is kept
    even when nothing matches. An empty id selects the family default.

    Overrides that are not None replace the table fields they control. When
    prompt caching is switched on, missing cache prices default to 0.

    Args:
        requested_id: Model id from configuration, may be empty.
        family: Key into MODEL_FAMILIES (usually the provider name).
        supports_prompt_cache: Deployment-specific prompt caching flag.
        supports_computer_use: Deployment-specific computer use flag.

    Returns:
        ResolvedModel, never None.

    Raises:
        KeyError: If the family is unknown.
    """
    model_family = MODEL_FAMILIES[family]

    if not requested_id:
        model_id = model_family.default_id
        info = model_family.default_info
    else:
        model_id = requested_id
        info = lookup_model_info(requested_id, family) or OPENAI_MODEL_INFO_SANE_DEFAULTS

    updates: dict[str, object] = {}
    if supports_computer_use is not None:
        updates["supports_computer_use"] = supports_computer_use
    if supports_prompt_cache is not None:
        updates["supports_prompt_cache"] = supports_prompt_cache
        if supports_prompt_cache:
            updates["cache_writes_price"] = info.cache_writes_price or 0.0
            updates["cache_reads_price"] = info.cache_reads_price or 0.0

    if updates:
        info = info.model_copy(update=updates)

    return ResolvedModel(id=model_id, info=info)


_REASONING_ID_MARKERS = ("deepseek-reasoner", "deepseek-r1")


def requires_r1_format(model_id: str) -> bool:
    """True for reasoning-only models that reject a system role."""
    lowered = model_id.lower()
    return any(marker in lowered for marker in _REASONING_ID_MARKERS)


def calculate_cost(info: ModelInfo, usage: UsageReport) -> float:
    """Calculate the cost in dollars of one usage report."""
    cost = usage.input_tokens * info.input_price + usage.output_tokens * info.output_price
    if usage.cache_write_tokens:
        cost += usage.cache_write_tokens * (info.cache_writes_price or 0.0)
    if usage.cache_read_tokens:
        cost += usage.cache_read_tokens * (info.cache_reads_price or 0.0)
    return cost / 1_000_000
