"""Custom exceptions for Switchboard."""


class SwitchboardError(Exception):
    """Base exception for all Switchboard errors."""

    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(SwitchboardError):
    """Raised when settings or credentials are missing or invalid.

    Always raised before any network call is issued and never retried.
    """

    def __init__(self, message: str, setting: str | None = None):
        self.setting = setting
        super().__init__(message)


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(SwitchboardError):
    """Base exception for gateway errors."""

    pass


class ProviderError(GatewayError):
    """Raised when a provider call fails."""

    def __init__(self, provider: str, message: str, original_error: Exception | None = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(f"Provider '{provider}' error: {message}")


class TransientProviderError(ProviderError):
    """A provider failure that is safe to retry (rate limit, timeout, 5xx)."""

    pass


class ProviderNotFoundError(GatewayError):
    """Raised when a requested provider is not registered."""

    def __init__(self, provider: str, available: list[str] | None = None):
        self.provider = provider
        self.available = available or []
        listing = ", ".join(self.available) if self.available else "none"
        super().__init__(f"Provider '{provider}' not found. Available providers: {listing}")


class RetryExhaustedError(GatewayError):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Retry exhausted after {attempts} attempts: {last_error}")


class StreamInterruptedError(GatewayError):
    """Raised when a stream fails after events were already delivered.

    Events yielded before the failure remain valid.
    """

    def __init__(self, events_delivered: int, original_error: Exception):
        self.events_delivered = events_delivered
        self.original_error = original_error
        super().__init__(
            f"Stream interrupted after {events_delivered} events: {original_error}"
        )
