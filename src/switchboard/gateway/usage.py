"""Usage reporting and cache-token accounting.

Some OpenAI-compatible backends accept cache markers but never report cache
reads or writes. For those, EstimatedCacheUsage fills the gap with a fixed
fraction of the prompt tokens. This is a rough placeholder, not an accounting
contract; swap the policy once a backend exposes real counters.
"""

import math
from dataclasses import dataclass
from typing import Protocol

from ..events import UsageReport
from .chunks import OpenAIUsage


class CacheUsagePolicy(Protocol):
    """Estimates (cache_write_tokens, cache_read_tokens) from prompt tokens."""

    def estimate(self, prompt_tokens: int) -> tuple[int, int]: ...


@dataclass(frozen=True)
class EstimatedCacheUsage:
    """Attributes fixed shares of the prompt to cache writes and reads."""

    write_ratio: float = 0.2
    read_ratio: float = 0.1

    def estimate(self, prompt_tokens: int) -> tuple[int, int]:
        return (
            math.floor(prompt_tokens * self.write_ratio),
            math.floor(prompt_tokens * self.read_ratio),
        )


DEFAULT_CACHE_POLICY = EstimatedCacheUsage()


def usage_report(
    usage: OpenAIUsage,
    cache_requested: bool = False,
    policy: CacheUsagePolicy = DEFAULT_CACHE_POLICY,
) -> UsageReport:
    """Build the UsageReport for one usage-bearing chunk.

    Native cache counters are used whenever present. Otherwise, if caching
    was requested, ``policy`` estimates them.
    """
    write = usage.cache_write_tokens
    read = usage.cache_read_tokens

    if not usage.has_native_cache_counters and cache_requested:
        write, read = policy.estimate(usage.prompt_tokens)

    return UsageReport(
        input_tokens=usage.prompt_tokens,
        output_tokens=usage.completion_tokens,
        cache_write_tokens=write,
        cache_read_tokens=read,
    )
