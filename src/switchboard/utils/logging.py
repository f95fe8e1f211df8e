"""Logging utilities for Switchboard.

The library never configures logging on import. Applications call
``configure_logging`` once, or attach their own handlers to the
``switchboard`` logger.
"""

import logging
import sys
from typing import Any

ROOT_LOGGER_NAME = "switchboard"


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Configure logging for Switchboard.

    Calling this again replaces the handler installed by the previous call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_string: Custom format string.
        handler: Custom handler. Defaults to a stderr StreamHandler.

    Returns:
        The configured ``switchboard`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if format_string is None:
        format_string = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(logging.Formatter(format_string))
    handler._switchboard_handler = True  # type: ignore[attr-defined]

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_switchboard_handler", False):
            logger.removeHandler(existing)

    logger.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a Switchboard component.

    Args:
        name: Component name (e.g., "gateway", "retry").
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class StructuredLogger:
    """Logger that appends ``key=value`` context to every message.

    Example:
        log = StructuredLogger("gateway").bind(provider="anthropic")
        log.debug("Starting stream", model="claude-3-5-sonnet-20241022")
        # Starting stream | provider=anthropic model=claude-3-5-sonnet-20241022
    """

    def __init__(self, name: str, context: dict[str, Any] | None = None):
        self._logger = get_logger(name)
        self._context: dict[str, Any] = dict(context or {})

    @property
    def context(self) -> dict[str, Any]:
        return dict(self._context)

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Return a new logger with extra context; this one is unchanged."""
        bound = StructuredLogger.__new__(StructuredLogger)
        bound._logger = self._logger
        bound._context = {**self._context, **kwargs}
        return bound

    def _format_message(self, message: str, **kwargs: Any) -> str:
        data = {**self._context, **kwargs}
        if data:
            pairs = [f"{k}={v}" for k, v in data.items()]
            return f"{message} | {' '.join(pairs)}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(self._format_message(message, **kwargs))
