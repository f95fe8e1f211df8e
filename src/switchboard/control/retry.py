"""Retry strategy for Switchboard.

Wraps the call-issuing step of a provider stream with bounded retries and
exponential backoff. Only failures that happen before the first event is
delivered are retried; once the caller has seen output the attempt is
committed.
"""

import asyncio
import functools
import logging
import random
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable

import anthropic
import httpx
import openai

from ..exceptions import (
    ConfigurationError,
    ProviderError,
    RetryExhaustedError,
    StreamInterruptedError,
    TransientProviderError,
)

logger = logging.getLogger(__name__)

_TRANSIENT_STATUS_CODES = frozenset({408, 409, 429})

_TRANSIENT_TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    openai.APIConnectionError,  # includes APITimeoutError
    anthropic.APIConnectionError,
    httpx.TimeoutException,
    httpx.NetworkError,
    asyncio.TimeoutError,
)


def _unwrap(error: Exception) -> Exception:
    """Follow ProviderError.original_error down to the transport error."""
    seen = 0
    while (
        isinstance(error, ProviderError)
        and not isinstance(error, TransientProviderError)
        and error.original_error is not None
        and seen < 5
    ):
        error = error.original_error
        seen += 1
    return error


def is_transient_error(error: Exception) -> bool:
    """Return True for rate limits, timeouts and server faults."""
    if isinstance(error, ConfigurationError):
        return False
    if isinstance(error, TransientProviderError):
        return True

    error = _unwrap(error)
    if isinstance(error, _TRANSIENT_TRANSPORT_ERRORS):
        return True
    if isinstance(error, (openai.APIStatusError, anthropic.APIStatusError)):
        status = error.status_code
        return status in _TRANSIENT_STATUS_CODES or status >= 500
    return False


def _retry_after(error: Exception) -> float | None:
    """Seconds requested by the server's retry-after header, if any."""
    error = _unwrap(error)
    response = getattr(error, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(float(value), 0.0)
    except (TypeError, ValueError):
        return None


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 3  # attempts = max_retries + 1
    initial_delay: float = 1.0  # seconds
    max_delay: float = 10.0  # seconds
    exponential_base: float = 2.0
    jitter: bool = True  # Add randomness to delay

    # Decides which failures are worth another attempt
    retryable: Callable[[Exception], bool] = field(default=is_transient_error)

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1


class RetryStrategy:
    """Handles retry logic for provider streams.

    Retry state lives entirely inside one wrapped invocation, so a single
    strategy can be shared by concurrent streams.

    Example:
        strategy = RetryStrategy(config=RetryConfig(max_retries=2))

        @strategy.wrap_stream
        async def events():
            ...

        async for event in events():
            ...
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        on_retry: Callable[[int, Exception, float], None] | None = None,
    ):
        """Initialize retry strategy.

        Args:
            config: Retry configuration.
            on_retry: Callback on retry (attempt, error, delay).
        """
        self._config = config or RetryConfig()
        self._on_retry = on_retry

    @property
    def config(self) -> RetryConfig:
        return self._config

    def _should_retry(self, error: Exception) -> bool:
        """Determine if error should be retried."""
        if isinstance(error, ConfigurationError):
            return False
        return self._config.retryable(error)

    def _calculate_delay(self, attempt: int, error: Exception | None = None) -> float:
        """Calculate delay before next retry."""
        if error is not None:
            requested = _retry_after(error)
            if requested is not None:
                return min(requested, self._config.max_delay)

        delay = self._config.initial_delay * (
            self._config.exponential_base ** (attempt - 1)
        )
        delay = min(delay, self._config.max_delay)

        if self._config.jitter:
            delay = delay * (0.5 + random.random())

        return delay

    def wrap_stream(
        self, func: Callable[..., AsyncIterator[Any]]
    ) -> Callable[..., AsyncIterator[Any]]:
        """Wrap an async generator function with retry logic.

        The wrapped generator re-issues ``func`` while it fails before
        yielding anything. A failure after the first yielded item raises
        StreamInterruptedError and is never retried.
        """

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> AsyncIterator[Any]:
            max_attempts = self._config.max_attempts

            for attempt in range(1, max_attempts + 1):
                delivered = 0
                try:
                    async with aclosing(func(*args, **kwargs)) as stream:
                        async for item in stream:
                            delivered += 1
                            yield item
                    return

                except Exception as e:
                    if delivered:
                        logger.error(f"Stream failed after {delivered} events: {e}")
                        raise StreamInterruptedError(delivered, e) from e

                    logger.warning(f"Attempt {attempt} failed: {e}")

                    if not self._should_retry(e):
                        logger.error(f"Non-retryable error: {e}")
                        raise

                    if attempt >= max_attempts:
                        raise RetryExhaustedError(attempt, e) from e

                    delay = self._calculate_delay(attempt, e)
                    logger.info(f"Retrying in {delay:.2f}s (attempt {attempt + 1}/{max_attempts})")

                    if self._on_retry:
                        self._on_retry(attempt, e, delay)

                    await asyncio.sleep(delay)

        return wrapper


# Convenience function
def with_retry(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 10.0,
) -> Callable:
    """Decorator factory for retrying async generator functions.

    Example:
        @with_retry(max_retries=3)
        async def stream_events():
            ...
    """
    config = RetryConfig(
        max_retries=max_retries,
        initial_delay=initial_delay,
        max_delay=max_delay,
    )
    strategy = RetryStrategy(config=config)
    return strategy.wrap_stream
