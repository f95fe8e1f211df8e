"""Tests for the Gateway dispatcher and provider factory."""

import logging

import pytest

from fakes import FakeAnthropicClient, FakeOpenAIClient, collect, openai_delta, openai_usage, rate_limit_error
from switchboard import (
    ApiProvider,
    ConversationMessage,
    Gateway,
    GatewaySettings,
    MockProvider,
    ProviderFactory,
    RetryConfig,
    RetryExhaustedError,
    StreamInterruptedError,
    TextDelta,
    UsageReport,
)
from switchboard.exceptions import ConfigurationError
from switchboard.gateway.providers import (
    AnthropicProvider,
    BedrockProvider,
    NebiusProvider,
    OpenAINativeProvider,
    OpenAIProvider,
    RequestyProvider,
)
from switchboard.utils.logging import StructuredLogger, configure_logging, get_logger

FAST_RETRY = RetryConfig(max_retries=2, initial_delay=0, jitter=False)


class TestProviderFactory:
    """Tests for provider registration."""

    def test_every_provider_is_registered(self):
        expected = {
            "anthropic": AnthropicProvider,
            "bedrock": BedrockProvider,
            "openai": OpenAIProvider,
            "openai-native": OpenAINativeProvider,
            "nebius": NebiusProvider,
            "requesty": RequestyProvider,
            "mock": MockProvider,
        }
        for name, provider_class in expected.items():
            assert ProviderFactory.is_registered(name)
            provider = ProviderFactory.create(name, GatewaySettings(provider=name))
            assert type(provider) is provider_class

        assert set(ProviderFactory.list_providers()) == {p.value for p in ApiProvider}

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            ProviderFactory.create("nope", GatewaySettings())


class TestGateway:
    """Tests for Gateway.create_message."""

    def test_selects_provider_from_settings(self):
        gateway = Gateway(GatewaySettings(provider="nebius", api_key="k"))

        assert isinstance(gateway.provider, NebiusProvider)
        assert gateway.get_model().id == "Qwen/Qwen2.5-32B-Instruct-fast"

    def test_bedrock_receives_credential_resolver(self):
        resolver = object()
        gateway = Gateway(GatewaySettings(provider="bedrock"), credential_resolver=resolver)
        assert gateway.provider._credential_resolver is resolver

    @pytest.mark.asyncio
    async def test_relays_events_unchanged(self, conversation):
        client = FakeOpenAIClient([openai_delta("a"), openai_delta("b"), openai_usage(10, 2)])
        gateway = Gateway(GatewaySettings(provider="openai", api_key="k", retry=FAST_RETRY), client=client)

        events = await collect(gateway.create_message("sys", conversation))

        assert events == [TextDelta(text="a"), TextDelta(text="b"), UsageReport(input_tokens=10, output_tokens=2)]

    @pytest.mark.asyncio
    async def test_transient_failures_are_retried(self, conversation):
        client = FakeOpenAIClient(rate_limit_error(), [openai_delta("ok")])
        gateway = Gateway(GatewaySettings(provider="openai", api_key="k", retry=FAST_RETRY), client=client)

        assert await collect(gateway.create_message("sys", conversation)) == [TextDelta(text="ok")]
        assert len(client.calls) == 2

    @pytest.mark.asyncio
    async def test_always_failing_backend(self, conversation):
        client = FakeOpenAIClient(rate_limit_error())
        gateway = Gateway(GatewaySettings(provider="openai", api_key="k", retry=FAST_RETRY), client=client)

        with pytest.raises(RetryExhaustedError):
            await collect(gateway.create_message("sys", conversation))
        assert len(client.calls) == FAST_RETRY.max_retries + 1

    @pytest.mark.asyncio
    async def test_mid_stream_failure(self, conversation):
        client = FakeOpenAIClient([openai_delta("partial"), rate_limit_error()])
        gateway = Gateway(GatewaySettings(provider="openai", api_key="k", retry=FAST_RETRY), client=client)

        received = []
        with pytest.raises(StreamInterruptedError):
            async for event in gateway.create_message("sys", conversation):
                received.append(event)

        assert received == [TextDelta(text="partial")]
        assert len(client.calls) == 1
        assert client.streams[0].closed

    @pytest.mark.asyncio
    async def test_stop_after_first_event(self, conversation):
        client = FakeAnthropicClient([{"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": "a"}}] * 3)
        gateway = Gateway(GatewaySettings(api_key="k", retry=FAST_RETRY), client=client)

        stream = gateway.create_message("sys", conversation)
        first = await stream.__anext__()
        await stream.aclose()

        assert first == TextDelta(text="a")
        assert len(client.calls) == 1
        assert client.streams[0].closed

    @pytest.mark.asyncio
    async def test_configuration_error_is_not_retried(self, conversation):
        gateway = Gateway(GatewaySettings(provider="openai", retry=FAST_RETRY))

        with pytest.raises(ConfigurationError):
            await collect(gateway.create_message("sys", conversation))


class TestMockProvider:
    """Tests for MockProvider through the Gateway."""

    @pytest.mark.asyncio
    async def test_default_response(self):
        provider = MockProvider(default_response="Hello there friend")
        gateway = Gateway(provider.settings, provider=provider)

        events = await collect(gateway.create_message("sys", [ConversationMessage.user("hi")]))

        assert "".join(e.text for e in events if isinstance(e, TextDelta)) == "Hello there friend"
        assert events[-1] == UsageReport(input_tokens=100, output_tokens=50)
        assert provider.call_log[0].system_prompt == "sys"

    @pytest.mark.asyncio
    async def test_scripted_failures_are_retried(self):
        settings = GatewaySettings(provider="mock", retry=FAST_RETRY)
        provider = MockProvider(settings, events=[TextDelta(text="ok")], fail_times=2)
        gateway = Gateway(settings, provider=provider)

        assert await collect(gateway.create_message("sys", [])) == [TextDelta(text="ok")]
        assert provider.call_count == 3

    @pytest.mark.asyncio
    async def test_interruption_after_partial_output(self):
        settings = GatewaySettings(provider="mock", retry=FAST_RETRY)
        provider = MockProvider(settings, default_response="one two three", fail_after=1)
        gateway = Gateway(settings, provider=provider)

        with pytest.raises(StreamInterruptedError) as exc_info:
            await collect(gateway.create_message("sys", []))

        assert exc_info.value.events_delivered == 1
        assert provider.call_count == 1


class TestLogging:
    """Tests for logging helpers."""

    def test_get_logger_namespaces(self):
        assert get_logger("gateway").name == "switchboard.gateway"
        assert get_logger("switchboard.retry").name == "switchboard.retry"

    def test_configure_logging_replaces_handler(self):
        first = logging.NullHandler()
        second = logging.NullHandler()

        configure_logging("DEBUG", handler=first)
        logger = configure_logging("INFO", handler=second)

        assert second in logger.handlers
        assert first not in logger.handlers
        assert logger.level == logging.INFO
        logger.removeHandler(second)
        logger.propagate = True

    def test_structured_logger_context(self, caplog):
        log = StructuredLogger("test").bind(provider="mock")

        with caplog.at_level(logging.INFO, logger="switchboard.test"):
            log.info("Starting stream", model="m")

        assert "Starting stream | provider=mock model=m" in caplog.text
        assert log.bind(extra=1).context == {"provider": "mock", "extra": 1}
        assert log.context == {"provider": "mock"}
