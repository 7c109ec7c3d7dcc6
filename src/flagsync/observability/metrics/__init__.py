"""Observability – metrics ports."""
from flagsync.observability.metrics.ports import Counter, Gauge, Histogram, Labels, Metrics, NoopMetrics

__all__ = ["Counter", "Gauge", "Histogram", "Labels", "Metrics", "NoopMetrics"]
