"""Construction options for `PrometheusMetrics`.

Environment flags (truthy set {"1","true","yes","on"}):
  P2P_METRICS_PRESERVE_EXISTING  keep metrics already in the shared table
  P2P_METRICS_DISABLE_MEMORY     do not register the memory gauge group
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .utils.env_flags import is_truthy_env

if TYPE_CHECKING:  # pragma: no cover
    from prometheus_client import CollectorRegistry

    from .registry import MetricRegistry
    from .store import MetricStore

MemoryCalculator = Callable[[], Mapping[str, float]]


@dataclass
class MetricsInit:
    # Store to write into; a bare prometheus_client CollectorRegistry is wrapped
    registry: MetricStore | CollectorRegistry | None = None
    # When False, construction clears the shared table and the store
    preserve_existing_metrics: bool = False
    calculate_memory: MemoryCalculator | None = None
    collect_memory: bool = True
    # Defaults to the process-wide table
    table: MetricRegistry | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> MetricsInit:
        values: dict[str, Any] = {
            'preserve_existing_metrics': is_truthy_env('P2P_METRICS_PRESERVE_EXISTING'),
            'collect_memory': not is_truthy_env('P2P_METRICS_DISABLE_MEMORY'),
        }
        values.update(overrides)
        return cls(**values)


__all__ = ["MetricsInit", "MemoryCalculator"]
