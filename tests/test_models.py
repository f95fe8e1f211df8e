"""Tests for model capability resolution and settings."""

import pytest
from pydantic import ValidationError

from switchboard.events import UsageReport
from switchboard.models import (
    ANTHROPIC_DEFAULT_MODEL_ID,
    ANTHROPIC_MODELS,
    BEDROCK_MODELS,
    OPENAI_MODEL_INFO_SANE_DEFAULTS,
    OPENAI_NATIVE_MODELS,
    ModelInfo,
    calculate_cost,
    requires_r1_format,
    resolve_model,
)
from switchboard.types import ApiProvider, GatewaySettings


class TestResolveModel:
    """Tests for resolve_model."""

    def test_known_id_returns_table_entry_unchanged(self):
        resolved = resolve_model("claude-3-opus-20240229", "anthropic")

        assert resolved.id == "claude-3-opus-20240229"
        assert resolved.info == ANTHROPIC_MODELS["claude-3-opus-20240229"]

    def test_empty_id_selects_family_default(self):
        for requested in (None, ""):
            resolved = resolve_model(requested, "anthropic")
            assert resolved.id == ANTHROPIC_DEFAULT_MODEL_ID
            assert resolved.info == ANTHROPIC_MODELS[ANTHROPIC_DEFAULT_MODEL_ID]

    def test_unknown_id_keeps_id_and_uses_sane_defaults(self):
        resolved = resolve_model("my-finetune", "openai")

        assert resolved.id == "my-finetune"
        assert resolved.info == OPENAI_MODEL_INFO_SANE_DEFAULTS

    def test_openai_family_checks_proxied_tables(self):
        bedrock_id = "anthropic.claude-3-5-sonnet-20241022-v2:0"

        assert resolve_model(bedrock_id, "openai").info == BEDROCK_MODELS[bedrock_id]
        assert resolve_model("gpt-4o-mini", "openai").info == OPENAI_NATIVE_MODELS["gpt-4o-mini"]

    def test_prompt_cache_override_defaults_prices(self):
        resolved = resolve_model("my-finetune", "openai", supports_prompt_cache=True)

        assert resolved.info.supports_prompt_cache is True
        assert resolved.info.cache_writes_price == 0
        assert resolved.info.cache_reads_price == 0

    def test_override_keeps_existing_prices(self):
        resolved = resolve_model("claude-3-5-sonnet-20241022", "anthropic", supports_prompt_cache=True)
        assert resolved.info.cache_writes_price == 3.75

    def test_overrides_can_switch_features_off(self):
        resolved = resolve_model(
            "claude-3-5-sonnet-20241022",
            "anthropic",
            supports_prompt_cache=False,
            supports_computer_use=False,
        )
        assert resolved.info.supports_prompt_cache is False
        assert resolved.info.supports_computer_use is False
        # Table is untouched
        assert ANTHROPIC_MODELS["claude-3-5-sonnet-20241022"].supports_prompt_cache is True

    def test_unknown_family(self):
        with pytest.raises(KeyError):
            resolve_model("x", "nope")


class TestHelpers:
    """Tests for requires_r1_format and calculate_cost."""

    @pytest.mark.parametrize("model_id,expected", [
        ("deepseek-reasoner", True),
        ("deepseek-ai/DeepSeek-R1", True),
        ("deepseek-chat", False),
        ("gpt-4o", False),
    ])
    def test_requires_r1_format(self, model_id, expected):
        assert requires_r1_format(model_id) is expected

    def test_calculate_cost(self):
        info = ModelInfo(input_price=3.0, output_price=15.0, cache_writes_price=3.75, cache_reads_price=0.3)
        usage = UsageReport(
            input_tokens=1_000_000,
            output_tokens=100_000,
            cache_write_tokens=200_000,
            cache_read_tokens=100_000,
        )
        assert calculate_cost(info, usage) == pytest.approx(3.0 + 1.5 + 0.75 + 0.03)


class TestGatewaySettings:
    """Tests for GatewaySettings."""

    def test_defaults(self):
        settings = GatewaySettings()

        assert settings.provider == ApiProvider.ANTHROPIC
        assert settings.aws_region == "us-west-2"
        assert settings.retry.max_retries == 3

    def test_settings_are_frozen(self):
        settings = GatewaySettings()
        with pytest.raises(ValidationError):
            settings.model_id = "other"

    def test_secrets_hidden_from_repr(self):
        settings = GatewaySettings(api_key="sk-secret", aws_secret_key="aws-secret")
        assert "sk-secret" not in repr(settings)
        assert "aws-secret" not in repr(settings)

    def test_thinking_budget_minimum(self):
        with pytest.raises(ValidationError):
            GatewaySettings(thinking_budget_tokens=100)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SWITCHBOARD_PROVIDER", "bedrock")
        monkeypatch.setenv("SWITCHBOARD_AWS_USE_CROSS_REGION_INFERENCE", "true")
        monkeypatch.setenv("SWITCHBOARD_SUPPORTS_PROMPT_CACHE", "0")
        monkeypatch.setenv("AWS_REGION", "eu-central-1")

        settings = GatewaySettings.from_env()

        assert settings.provider == ApiProvider.BEDROCK
        assert settings.aws_use_cross_region_inference is True
        assert settings.supports_prompt_cache is False
        assert settings.aws_region == "eu-central-1"

    def test_from_env_vendor_key_fallback_and_overrides(self, monkeypatch):
        monkeypatch.delenv("SWITCHBOARD_API_KEY", raising=False)
        monkeypatch.delenv("SWITCHBOARD_PROVIDER", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")

        settings = GatewaySettings.from_env(provider="openai-native", model_id="o1")

        assert settings.api_key == "sk-openai"
        assert settings.provider == ApiProvider.OPENAI_NATIVE
        assert settings.model_id == "o1"

    def test_constructor_reads_prefixed_env(self, monkeypatch):
        monkeypatch.setenv("SWITCHBOARD_MODEL_ID", "gpt-4o-mini")
        monkeypatch.setenv("SWITCHBOARD_REQUEST_TIMEOUT", "30")

        settings = GatewaySettings(provider="openai")

        assert settings.model_id == "gpt-4o-mini"
        assert settings.request_timeout == 30.0
        assert GatewaySettings(model_id="explicit").model_id == "explicit"

    def test_from_env_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("GW_PROVIDER", "nebius")
        monkeypatch.setenv("GW_API_KEY", "k-prefixed")
        monkeypatch.setenv("NEBIUS_API_KEY", "k-vendor")
        monkeypatch.setenv("GW_AWS_REGION", "us-east-1")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")

        settings = GatewaySettings.from_env(prefix="GW_")

        assert settings.provider == ApiProvider.NEBIUS
        assert settings.api_key == "k-prefixed"
        assert settings.aws_region == "us-east-1"

    def test_from_env_rejects_bad_values(self, monkeypatch):
        monkeypatch.setenv("SWITCHBOARD_REASONING_EFFORT", "extreme")

        with pytest.raises(ValidationError):
            GatewaySettings.from_env()
