"""Tests for canonical stream events."""

import pytest
from pydantic import ValidationError

from switchboard.events import ReasoningDelta, TextDelta, UsageReport, parse_event


class TestWireShape:
    """Tests for the host-facing dict form."""

    def test_text_delta(self):
        assert TextDelta(text="hi").to_wire() == {"type": "text", "text": "hi"}

    def test_reasoning_delta_uses_reasoning_key(self):
        assert ReasoningDelta(text="hmm").to_wire() == {"type": "reasoning", "reasoning": "hmm"}

    def test_usage_report_is_camel_case_and_omits_missing_counters(self):
        wire = UsageReport(input_tokens=100, output_tokens=20).to_wire()
        assert wire == {"type": "usage", "inputTokens": 100, "outputTokens": 20}

    def test_usage_report_keeps_zero_counters(self):
        wire = UsageReport(input_tokens=1, output_tokens=2, cache_write_tokens=0, cache_read_tokens=0).to_wire()
        assert wire["cacheWriteTokens"] == 0
        assert wire["cacheReadTokens"] == 0


class TestParseEvent:
    """Tests for parse_event."""

    def test_round_trip_each_variant(self):
        events = [
            TextDelta(text="a"),
            ReasoningDelta(text="b"),
            UsageReport(input_tokens=3, output_tokens=4, cache_read_tokens=1),
        ]
        for event in events:
            assert parse_event(event.to_wire()) == event

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            parse_event({"type": "tool_call", "name": "x"})


class TestImmutability:
    """Events are frozen once built."""

    def test_cannot_mutate(self):
        event = TextDelta(text="a")
        with pytest.raises(ValidationError):
            event.text = "b"
