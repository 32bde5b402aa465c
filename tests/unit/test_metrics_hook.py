"""Tests for the MetricsHook protocol and its wiring through the client.

Covers:
  - Protocol conformance (isinstance, structural subtyping)
  - NoopMetricsHook behaviour
  - Every documented metric name is emitted by a full client round-trip
"""
from __future__ import annotations

from typing import Any

from conftest import WEBHOOK_URL, HttpRecorder

from imgcast.client import ImgcastClient
from imgcast.config import ImgcastConfig
from imgcast.observability.metrics import MetricsHook, NoopMetricsHook

# ---------------------------------------------------------------------------
# Recording hook for integration tests
# ---------------------------------------------------------------------------


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    @property
    def names(self) -> set[str]:
        return {c["name"] for c in self.increments + self.timings}


def _client(storage, notifier, metrics, http: HttpRecorder) -> ImgcastClient:
    config = ImgcastConfig(webhook_url=WEBHOOK_URL, metrics=metrics)
    client = ImgcastClient(storage, config=config, notifier=notifier)
    client._uploader._transport._client = http.client()
    return client


class TestMetricsHookProtocol:
    def test_noop_is_instance_of_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_recording_hook_is_instance_of_protocol(self):
        assert isinstance(RecordingMetricsHook(), MetricsHook)

    def test_class_missing_timing_is_not_instance(self):
        class PartialHook:
            def increment(self, name, value=1, tags=None):
                pass

            def histogram(self, name, value, tags=None):
                pass

        assert not isinstance(PartialHook(), MetricsHook)

    def test_counter_and_timing_are_enough(self):
        class MinimalHook:
            def increment(self, name, value=1, tags=None):
                pass

            def timing(self, name, ms, tags=None):
                pass

        assert isinstance(MinimalHook(), MetricsHook)

    def test_noop_discards(self):
        hook = NoopMetricsHook()
        assert hook.increment("x") is None
        assert hook.timing("x", 1.0) is None
        assert hook.timing("x", 1.0, tags={"a": "b"}) is None


class TestMetricsWiring:
    def test_success_path_emits_all_success_metrics(self, storage, notifier):
        metrics = RecordingMetricsHook()
        _client(storage, notifier, metrics, HttpRecorder()).upload_path("attachments/cat.png")
        assert {
            "imgcast.resolve_total",
            "imgcast.upload_success_total",
            "imgcast.upload_duration_ms",
            "imgcast.request_duration_ms",
        } <= metrics.names

    def test_resolve_strategy_tag(self, storage, notifier):
        metrics = RecordingMetricsHook()
        _client(storage, notifier, metrics, HttpRecorder()).upload_rendered(
            "https://example.com/x/pic.png",
        )
        resolve = [c for c in metrics.increments if c["name"] == "imgcast.resolve_total"]
        assert resolve[0]["tags"] == {"strategy": "filename_scan"}

    def test_failure_paths(self, storage, notifier):
        metrics = RecordingMetricsHook()
        client = _client(storage, notifier, metrics, HttpRecorder(status=502))
        client.upload_path("missing.png")
        client.upload_path("attachments/cat.png")
        assert "imgcast.resolve_failure_total" in metrics.names
        failures = [c for c in metrics.increments if c["name"] == "imgcast.upload_failure_total"]
        assert failures[0]["tags"] == {"reason": "remote_rejected"}
