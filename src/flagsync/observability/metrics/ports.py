"""Observability – Counter, Histogram, Gauge and Metrics ports."""
from __future__ import annotations

import abc

Labels = dict[str, str]


class Counter(abc.ABC):
    """Monotonically increasing counter."""

    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: Labels | None = None) -> None: ...


class Histogram(abc.ABC):
    """Distribution / latency histogram."""

    @abc.abstractmethod
    def record(self, value: float, labels: Labels | None = None) -> None: ...


class Gauge(abc.ABC):
    """Last-value gauge."""

    @abc.abstractmethod
    def set(self, value: float, labels: Labels | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments.

    Instruments are requested once (at service construction) and reused.
    """

    @abc.abstractmethod
    def counter(self, name: str, description: str = "", unit: str = "") -> Counter: ...

    @abc.abstractmethod
    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram: ...

    @abc.abstractmethod
    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge: ...


class _NoopInstrument(Counter, Histogram, Gauge):
    def add(self, value: float = 1.0, labels: Labels | None = None) -> None:
        pass

    def record(self, value: float, labels: Labels | None = None) -> None:
        pass

    def set(self, value: float, labels: Labels | None = None) -> None:
        pass


class NoopMetrics(Metrics):
    """Silent metrics used when no backend is configured."""

    _instrument = _NoopInstrument()

    def counter(self, name: str, description: str = "", unit: str = "") -> Counter:
        return self._instrument

    def histogram(self, name: str, description: str = "", unit: str = "ms") -> Histogram:
        return self._instrument

    def gauge(self, name: str, description: str = "", unit: str = "") -> Gauge:
        return self._instrument


__all__ = ["Counter", "Gauge", "Histogram", "Labels", "Metrics", "NoopMetrics"]
