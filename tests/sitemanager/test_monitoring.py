"""Tests for the botocore slow-call hooks."""

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest
from botocore.hooks import HierarchicalEmitter

from sitemanager import monitoring


def _instrumented_client(threshold: float) -> SimpleNamespace:
    client = SimpleNamespace(meta=SimpleNamespace(events=HierarchicalEmitter()))
    monitoring.setup_call_monitoring(client, slow_call_threshold=threshold)
    return client


def _emit_call(
    client: SimpleNamespace, monkeypatch: pytest.MonkeyPatch, duration: float
) -> None:
    ticks = iter([10.0, 10.0 + duration])
    clock = SimpleNamespace(perf_counter=lambda: next(ticks))
    monkeypatch.setattr(monitoring, "time", clock)
    context: dict[str, object] = {}
    model = SimpleNamespace(name="Query")
    client.meta.events.emit(
        "before-call.dynamodb.Query", model=model, params={}, context=context
    )
    client.meta.events.emit(
        "after-call.dynamodb.Query",
        http_response=None,
        parsed={},
        model=model,
        context=context,
    )


def test_slow_calls_are_logged_as_warnings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    client = _instrumented_client(threshold=0.5)

    with caplog.at_level(logging.WARNING, logger="sitemanager.monitoring"):
        _emit_call(client, monkeypatch, duration=1.25)

    assert "Slow DynamoDB call detected (1.250s): Query" in caplog.text


def test_fast_calls_stay_quiet(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    client = _instrumented_client(threshold=0.5)

    with caplog.at_level(logging.WARNING, logger="sitemanager.monitoring"):
        _emit_call(client, monkeypatch, duration=0.1)

    assert "Slow DynamoDB call" not in caplog.text


def test_clients_without_events_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="sitemanager.monitoring"):
        monitoring.setup_call_monitoring(object())

    assert "skipping call monitoring" in caplog.text
