"""Resilience – retry policies for remote flag fetches."""

from flagsync.resilience.retry import TenacityRetryPolicy

__all__ = ["TenacityRetryPolicy"]
