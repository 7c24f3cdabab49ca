"""Labeled counter handle."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .calculated import Calculators, GroupCalculated, GroupCalculator
from .store import MetricStore
from .utils.metrics_utils import magnitude, normalise_string


class PrometheusCounterGroup(GroupCalculated):
    """Counter keyed by ``label``; non-numeric values count as one."""

    def __init__(self, name: str, store: MetricStore, *, help: str | None = None,
                 label: str | None = None, calculate: GroupCalculator | None = None):
        self.name = normalise_string(name)
        self.help = normalise_string(help or self.name)
        self.label = normalise_string(label or self.name)
        self.calculators: Calculators[Mapping[str, float]] = Calculators(self.name)
        if calculate is not None:
            self.calculators.add(calculate)
        self._series = store.create('counter', self.name, self.help, [self.label])

    def increment(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            inc = magnitude(value)
            if inc < 0:
                raise ValueError(f"{self.name}: counters can only be incremented by non-negative amounts")
            self._series.add(inc, {self.label: key})

    def decrement(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            self._series.sub(magnitude(value), {self.label: key})

    def increment_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._series.add(1, {self.label: key})

    def decrement_keys(self, keys: Iterable[str]) -> None:
        for key in keys:
            self._series.sub(1, {self.label: key})

    def reset(self) -> None:
        self._series.reset()

    def get(self, key: str) -> float | None:
        return self._series.get({self.label: key})


__all__ = ["PrometheusCounterGroup"]
