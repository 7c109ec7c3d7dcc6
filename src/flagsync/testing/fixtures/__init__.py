"""Testing fixtures – pytest fixtures for fake doubles.

Register in ``conftest.py``::

    pytest_plugins = ["flagsync.testing.fixtures"]
"""
from flagsync.testing.fixtures.clock import fake_clock
from flagsync.testing.fixtures.feature_flags import fake_fetcher, fake_metrics, fake_scheduler

__all__ = ["fake_clock", "fake_fetcher", "fake_metrics", "fake_scheduler"]
