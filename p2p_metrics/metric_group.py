"""Labeled gauge handle: one cell per key under a single label."""
from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from typing import Any

from .calculated import Calculators, GroupCalculated, GroupCalculator
from .metric import StopTimer
from .store import MetricStore
from .utils.metrics_utils import decrement_gauge, magnitude, normalise_string


class PrometheusMetricGroup(GroupCalculated):
    """Gauge keyed by ``label``.

    `increment` / `decrement` treat any non-numeric value (``True``, ``False``,
    ``None``...) as a step of one; `increment_keys` / `decrement_keys` are the
    explicit unit-step forms.
    """

    def __init__(self, name: str, store: MetricStore, *, help: str | None = None,
                 label: str | None = None, calculate: GroupCalculator | None = None):
        self.name = normalise_string(name)
        self.help = normalise_string(help or self.name)
        self.label = normalise_string(label or self.name)
        self.calculators: Calculators[Mapping[str, float]] = Calculators(self.name)
        if calculate is not None:
            self.calculators.add(calculate)
        self._series = store.create('gauge', self.name, self.help, [self.label])

    def _labels(self, key: str) -> dict[str, str]:
        return {self.label: key}

    def update(self, values: Mapping[str, float]) -> None:
        for key, value in values.items():
            self._series.set(value, self._labels(key))

    def increment(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self._series.add(magnitude(value), self._labels(key))

    def decrement(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            decrement_gauge(self._series, magnitude(value), self._labels(key))

    def increment_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._series.add(1, self._labels(key))

    def decrement_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            decrement_gauge(self._series, 1, self._labels(key))

    def reset(self) -> None:
        self._series.reset()

    def timer(self, key: str) -> StopTimer:
        """Start a timer for ``key``; calling the result records elapsed seconds."""
        start = time.perf_counter()

        def _stop() -> None:
            self._series.set(time.perf_counter() - start, self._labels(key))
        return _stop

    def get(self, key: str) -> float | None:
        return self._series.get(self._labels(key))


__all__ = ["PrometheusMetricGroup"]
