"""Resilience – retry backed by tenacity."""
from flagsync.resilience.retry.tenacity_adapter import TenacityRetryPolicy

__all__ = ["TenacityRetryPolicy"]
