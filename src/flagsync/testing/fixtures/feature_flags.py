"""Testing fixtures – fake fetcher, virtual scheduler and metrics."""
from __future__ import annotations

import pytest

from flagsync.application.scheduler import InMemoryScheduler
from flagsync.testing.fakes import FakeFlagFetcher, FakeMetricsRegistry


@pytest.fixture
def fake_fetcher() -> FakeFlagFetcher:
    """Authority knowing ``new-ui`` (on) and ``beta`` (off)."""
    return FakeFlagFetcher({"new-ui": True, "beta": False})


@pytest.fixture
def fake_scheduler() -> InMemoryScheduler:
    return InMemoryScheduler()


@pytest.fixture
def fake_metrics() -> FakeMetricsRegistry:
    return FakeMetricsRegistry()
