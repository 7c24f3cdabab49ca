"""Scalar counter handle."""
from __future__ import annotations

from .calculated import Calculators, ScalarCalculated, ScalarCalculator
from .store import MetricStore
from .utils.metrics_utils import normalise_string


class PrometheusCounter(ScalarCalculated):
    """Single-value counter.

    The cell is a plain number: `decrement` is allowed, `increment` only
    refuses negative steps.
    """

    def __init__(self, name: str, store: MetricStore, *, help: str | None = None,
                 calculate: ScalarCalculator | None = None):
        self.name = normalise_string(name)
        self.help = normalise_string(help or self.name)
        self.calculators: Calculators[float] = Calculators(self.name)
        if calculate is not None:
            self.calculators.add(calculate)
        self._series = store.create('counter', self.name, self.help)

    def increment(self, value: float = 1) -> None:
        if value < 0:
            raise ValueError(f"{self.name}: counters can only be incremented by non-negative amounts")
        self._series.add(value)

    def decrement(self, value: float = 1) -> None:
        self._series.sub(value)

    def reset(self) -> None:
        self._series.reset()

    def get(self) -> float | None:
        return self._series.get()


__all__ = ["PrometheusCounter"]
