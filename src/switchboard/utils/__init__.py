"""Utility helpers for Switchboard."""

from .logging import StructuredLogger, configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "StructuredLogger"]
