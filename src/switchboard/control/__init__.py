"""Switchboard Control Layer.

Provides the retry policy applied around every provider call.
"""

from .retry import RetryConfig, RetryStrategy, is_transient_error, with_retry

__all__ = [
    "RetryConfig",
    "RetryStrategy",
    "is_transient_error",
    "with_retry",
]
