"""Testing fakes – in-memory doubles for flagsync ports."""
from flagsync.kernel.time import FrozenClock
from flagsync.testing.fakes.clock import FAKE_NOW, FakeClock
from flagsync.testing.fakes.feature_flags import FakeFlagFetcher
from flagsync.testing.fakes.metrics import FakeMetricsRegistry

__all__ = ["FAKE_NOW", "FakeClock", "FakeFlagFetcher", "FakeMetricsRegistry", "FrozenClock"]
