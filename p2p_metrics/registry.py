"""Name -> metric table with register-or-reuse semantics.

Every facade writes into a `MetricRegistry`. The first registration of a
(normalized) name creates the handle; later registrations of the same name
and kind get that same handle back, with any new calculator appended, so
independent modules can report into one metric. Registering a known name under
another kind raises `KindMismatchError`.
"""
from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .calculated import CalculateMetric
from .errors import KindMismatchError, NamingError
from .store import StoreType
from .utils.metrics_utils import normalise_string

logger = logging.getLogger(__name__)


class MetricKind(str, Enum):
    gauge = "gauge"
    counter = "counter"
    gauge_group = "gauge_group"
    counter_group = "counter_group"

    @property
    def store_type(self) -> StoreType:
        return 'counter' if self in (MetricKind.counter, MetricKind.counter_group) else 'gauge'

    @property
    def label(self) -> str:
        return self.value.replace('_', ' ')


@dataclass
class MetricRecord:
    name: str
    kind: MetricKind
    metric: Any

    @property
    def help(self) -> str:
        return self.metric.help


def validate_name(name: str | None, kind: MetricKind) -> str:
    if name is None or not str(name).strip():
        raise NamingError(f"{kind.label.capitalize()} name is required")
    return normalise_string(str(name))


class MetricRegistry:
    """Process-wide table of registered metrics."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, MetricRecord] = {}
        self._shared: dict[str, Any] = {}

    def register(self, name: str, kind: MetricKind, factory: Callable[[], Any],
                 calculate: CalculateMetric | None = None) -> Any:
        """Return the handle for ``name``, building it with ``factory`` if new."""
        key = validate_name(name, kind)
        with self._lock:
            record = self._records.get(key)
            if record is not None:
                if record.kind is not kind:
                    raise KindMismatchError(key, record.kind.value, kind.value)
                logger.debug("Reuse existing %s %s", kind.label, key)
                if calculate is not None:
                    record.metric.add_calculator(calculate)
                return record.metric
            logger.debug("Register %s %s", kind.label, key)
            metric = factory()
            self._records[key] = MetricRecord(key, kind, metric)
            return metric

    def get(self, name: str) -> MetricRecord | None:
        with self._lock:
            return self._records.get(normalise_string(name))

    def records(self) -> list[MetricRecord]:
        with self._lock:
            return list(self._records.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def shared(self, name: str, factory: Callable[[], Any]) -> tuple[Any, bool]:
        """Table-scoped companion object for ``name``, built once per table.

        Returns ``(obj, created)``. Facades over the same table get the same
        object; `clear` drops it together with the records.
        """
        key = normalise_string(name)
        with self._lock:
            if key in self._shared:
                return self._shared[key], False
            obj = self._shared[key] = factory()
            return obj, True

    def clear(self) -> None:
        with self._lock:
            self._records.clear()
            self._shared.clear()

    async def calculate_all(self) -> None:
        """Run `calculate()` on every record concurrently and wait for all of them."""
        await asyncio.gather(*(record.metric.calculate() for record in self.records()))


__all__ = ["MetricKind", "MetricRecord", "MetricRegistry", "validate_name"]
