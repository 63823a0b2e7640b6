"""Tests for the LangFuse tracer"""

import pytest

from promptura.config import Settings
from promptura.observability.tracer import LangFuseTracer


class FakeTrace:
    def __init__(self, events):
        self.events = events

    def event(self, name, metadata):
        self.events.append((name, metadata))


class FakeLangfuse:
    def __init__(self):
        self.events = []
        self.flushes = 0

    def trace(self, name):
        return FakeTrace(self.events)

    def flush(self):
        self.flushes += 1


@pytest.mark.asyncio
async def test_tracer_disabled_without_keys():
    tracer = LangFuseTracer(Settings())
    await tracer.initialize()

    assert tracer.enabled is False
    assert tracer.client is None
    # No client, nothing to do
    tracer.trace_generation("few-shot", "fallback", reason="Rate limit exceeded")
    tracer.flush()


def test_trace_generation_records_source_and_reason():
    tracer = LangFuseTracer(Settings(langfuse_secret_key="sk", langfuse_public_key="pk"))
    tracer.client = FakeLangfuse()

    tracer.trace_generation("few-shot", "fallback", target_model="gpt-4", reason="Rate limit exceeded")
    tracer.trace_generation("role-based", "remote", latency_ms=12.5)

    (first_name, first_meta), (second_name, second_meta) = tracer.client.events
    assert first_name == "fallback"
    assert first_meta["reason"] == "Rate limit exceeded"
    assert first_meta["target_model"] == "gpt-4"
    assert second_name == "remote_success"
    assert second_meta["latency_ms"] == 12.5


def test_trace_error_records_status():
    tracer = LangFuseTracer(Settings(langfuse_secret_key="sk", langfuse_public_key="pk"))
    tracer.client = FakeLangfuse()

    tracer.trace_error("Invalid API key", status=401)

    assert tracer.client.events == [("remote_error", {"error": "Invalid API key", "status": 401, "target_model": None})]
