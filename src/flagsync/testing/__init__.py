"""Testing support – fakes and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["flagsync.testing.fixtures"]
"""

from flagsync.testing.fakes import FakeClock, FakeFlagFetcher, FakeMetricsRegistry

__all__ = ["FakeClock", "FakeFlagFetcher", "FakeMetricsRegistry"]
