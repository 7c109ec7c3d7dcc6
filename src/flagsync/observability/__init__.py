"""Observability – structured logging and metrics ports."""

from flagsync.observability.logging import JsonLoggerFactory, SensitiveFieldsFilter, get_logger
from flagsync.observability.metrics import Metrics, NoopMetrics

__all__ = [
    "JsonLoggerFactory",
    "Metrics",
    "NoopMetrics",
    "SensitiveFieldsFilter",
    "get_logger",
]
