"""Numeric cell store backing every metric handle.

`MetricStore` keeps one `Series` per (type, name). A series holds one float
cell per label-value tuple and supports the primitive mutations the metric
types build on (get/set/add/sub/reset). Rendering is delegated to
prometheus_client: the store registers a custom collector on a
`CollectorRegistry` and `metrics()` returns `generate_latest` output.

Pass an existing CollectorRegistry (for example the prometheus_client default
``REGISTRY``) to publish the series next to other collectors of the process.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Literal

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.registry import Collector

logger = logging.getLogger(__name__)

StoreType = Literal['gauge', 'counter']
Labels = Mapping[str, str]

STORE_TYPES: tuple[StoreType, ...] = ('gauge', 'counter')


class Series:
    """A named family of float cells keyed by label values."""

    def __init__(self, type: StoreType, name: str, help: str, labelnames: Sequence[str] = ()):
        if type not in STORE_TYPES:
            raise ValueError(f"unsupported series type: {type}")
        self.type = type
        self.name = name
        self.help = help
        self.labelnames = tuple(labelnames)
        self._lock = threading.Lock()
        self._values: dict[tuple[str, ...], float] = {}

    def _key(self, labels: Labels | None) -> tuple[str, ...]:
        labels = labels or {}
        if set(labels) != set(self.labelnames):
            raise ValueError(
                f"{self.name}: expected labels {list(self.labelnames)}, got {sorted(labels)}"
            )
        return tuple(str(labels[n]) for n in self.labelnames)

    def get(self, labels: Labels | None = None) -> float | None:
        key = self._key(labels)
        with self._lock:
            return self._values.get(key)

    def set(self, value: float, labels: Labels | None = None) -> None:
        key = self._key(labels)
        with self._lock:
            self._values[key] = float(value)

    def add(self, value: float = 1.0, labels: Labels | None = None) -> None:
        key = self._key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) + float(value)

    def sub(self, value: float = 1.0, labels: Labels | None = None) -> None:
        key = self._key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) - float(value)

    def reset(self) -> None:
        """Zero every cell ever written, whoever wrote it."""
        with self._lock:
            for key in self._values:
                self._values[key] = 0.0

    def samples(self) -> list[tuple[dict[str, str], float]]:
        with self._lock:
            items = list(self._values.items())
        return [(dict(zip(self.labelnames, key)), value) for key, value in items]

    def to_family(self) -> GaugeMetricFamily | CounterMetricFamily:
        family_cls = GaugeMetricFamily if self.type == 'gauge' else CounterMetricFamily
        family = family_cls(self.name, self.help, labels=self.labelnames)
        with self._lock:
            items = list(self._values.items())
        for key, value in items:
            family.add_metric(list(key), value)
        return family

    def __repr__(self) -> str:  # pragma: no cover - debug aid
        return f"Series(type={self.type!r}, name={self.name!r}, labelnames={self.labelnames!r})"


class _StoreCollector(Collector):
    """Exports the store's series to prometheus_client at collect time."""

    def __init__(self, store: MetricStore):
        self._store = store

    def describe(self) -> Iterable:
        # Names change at runtime; an empty describe keeps the registry from
        # checking duplicates against a stale snapshot.
        return iter(())

    def collect(self) -> Iterator:
        for series in self._store.series():
            yield series.to_family()


class MetricStore:
    """Create-or-get store of `Series`, rendered through prometheus_client."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry if registry is not None else CollectorRegistry(auto_describe=False)
        self._lock = threading.Lock()
        self._series: dict[tuple[str, str], Series] = {}
        self.registry.register(_StoreCollector(self))

    def create(self, type: StoreType, name: str, help: str, labelnames: Sequence[str] = ()) -> Series:
        """Return the series for (type, name), creating it when absent."""
        with self._lock:
            series = self._series.get((type, name))
            if series is None:
                series = Series(type, name, help, labelnames)
                self._series[(type, name)] = series
                logger.debug("Created %s series %s labels=%s", type, name, list(series.labelnames))
            return series

    def get(self, type: StoreType, name: str) -> Series | None:
        with self._lock:
            return self._series.get((type, name))

    def series(self) -> list[Series]:
        with self._lock:
            return list(self._series.values())

    @property
    def data(self) -> dict[str, dict[str, Series]]:
        """Series grouped by type then name."""
        out: dict[str, dict[str, Series]] = {t: {} for t in STORE_TYPES}
        for s in self.series():
            out[s.type][s.name] = s
        return out

    def clear(self) -> None:
        with self._lock:
            dropped = len(self._series)
            self._series.clear()
        logger.debug("Metric store cleared (series=%s)", dropped)

    def metrics(self) -> str:
        """Render the whole registry in Prometheus text exposition format."""
        return generate_latest(self.registry).decode('utf-8')


__all__ = ["MetricStore", "Series", "StoreType", "Labels", "STORE_TYPES"]
