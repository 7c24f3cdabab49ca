"""Scalar gauge handle."""
from __future__ import annotations

import time
from collections.abc import Callable

from .calculated import Calculators, ScalarCalculated, ScalarCalculator
from .store import MetricStore
from .utils.metrics_utils import decrement_gauge, normalise_string

StopTimer = Callable[[], None]


class PrometheusMetric(ScalarCalculated):
    """Single-value gauge. Push via update/increment/decrement, pull via calculators."""

    def __init__(self, name: str, store: MetricStore, *, help: str | None = None,
                 calculate: ScalarCalculator | None = None):
        self.name = normalise_string(name)
        self.help = normalise_string(help or self.name)
        self.calculators: Calculators[float] = Calculators(self.name)
        if calculate is not None:
            self.calculators.add(calculate)
        self._series = store.create('gauge', self.name, self.help)

    def update(self, value: float) -> None:
        self._series.set(value)

    def increment(self, value: float = 1) -> None:
        self._series.add(value)

    def decrement(self, value: float = 1) -> None:
        decrement_gauge(self._series, value)

    def reset(self) -> None:
        self._series.reset()

    def timer(self) -> StopTimer:
        """Start a timer; the returned callable sets the gauge to elapsed seconds."""
        start = time.perf_counter()

        def _stop() -> None:
            self._series.set(time.perf_counter() - start)
        return _stop

    def get(self) -> float | None:
        return self._series.get()


__all__ = ["PrometheusMetric", "StopTimer"]
