"""Calculated-metric capability shared by every metric type.

A metric owns a `Calculators` list of zero-argument callables. Before a scrape
the registry awaits `Calculators.run()` and the metric folds the results into
its series: scalar kinds sum the results, group kinds merge them per key.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Generic, TypeVar, Union

from .errors import CalculatorError

logger = logging.getLogger(__name__)

T = TypeVar('T')

CalculateMetric = Callable[[], Union[T, Awaitable[T]]]
ScalarCalculator = CalculateMetric[float]
GroupCalculator = CalculateMetric[Mapping[str, float]]


async def _invoke(calculator: CalculateMetric[T]) -> T:
    result = calculator()
    if inspect.isawaitable(result):
        return await result
    return result


class Calculators(Generic[T]):
    """Ordered, append-only list of calculators owned by one metric."""

    def __init__(self, metric_name: str):
        self.metric_name = metric_name
        self._calculators: list[CalculateMetric[T]] = []

    def add(self, calculator: CalculateMetric[T]) -> None:
        self._calculators.append(calculator)

    def __len__(self) -> int:
        return len(self._calculators)

    def __bool__(self) -> bool:
        return bool(self._calculators)

    async def run(self, on_result: Callable[[T], None] | None = None) -> list[T]:
        """Invoke every calculator concurrently and return their results.

        ``on_result`` is applied to each result as soon as its calculator
        finishes, so writes from successful calculators survive a sibling's
        failure. The first failure is re-raised as `CalculatorError`.
        """
        async def _one(calculator: CalculateMetric[T]) -> T:
            value = await _invoke(calculator)
            if on_result is not None:
                on_result(value)
            return value

        try:
            return list(await asyncio.gather(*(_one(c) for c in list(self._calculators))))
        except Exception as exc:
            logger.warning("Calculator failed for metric %s: %s", self.metric_name, exc)
            raise CalculatorError(self.metric_name, exc) from exc


class CalculatedMetric:
    """Mixin giving a metric `add_calculator` / `calculate` over `self.calculators`."""

    calculators: Calculators

    def add_calculator(self, calculator: CalculateMetric) -> None:
        self.calculators.add(calculator)

    async def calculate(self) -> None:  # pragma: no cover - overridden
        raise NotImplementedError


class ScalarCalculated(CalculatedMetric):
    """Scalar kinds: overwrite the value with the sum of all calculators."""

    async def calculate(self) -> None:
        if not self.calculators:
            return
        values = await self.calculators.run()
        self._series.set(sum(values))  # type: ignore[attr-defined]


class GroupCalculated(CalculatedMetric):
    """Group kinds: each calculator's mapping overwrites its keys, last write wins."""

    async def calculate(self) -> None:
        if not self.calculators:
            return
        await self.calculators.run(self._apply)

    def _apply(self, values: Mapping[str, float]) -> None:
        for key, value in values.items():
            self._series.set(value, {self.label: key})  # type: ignore[attr-defined]


__all__ = [
    "CalculateMetric",
    "ScalarCalculator",
    "GroupCalculator",
    "Calculators",
    "CalculatedMetric",
    "ScalarCalculated",
    "GroupCalculated",
]
