"""Shared fixtures for the Switchboard test suite."""

import pytest

from switchboard.control.retry import RetryConfig
from switchboard.types import ConversationMessage


@pytest.fixture
def no_delay_retry() -> RetryConfig:
    return RetryConfig(max_retries=2, initial_delay=0, jitter=False)


@pytest.fixture
def conversation() -> list[ConversationMessage]:
    return [
        ConversationMessage.user("Hello"),
        ConversationMessage.assistant("Hi! How can I help?"),
        ConversationMessage.user("Summarize this file."),
    ]
