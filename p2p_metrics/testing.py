"""Testing helpers for metrics isolation.

`isolated_metrics()` yields a facade bound to its own registry table and
store, so tests never see registrations made elsewhere in the process and
never clear the process-wide table.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .config import MetricsInit
from .prometheus import PrometheusMetrics
from .registry import MetricRegistry
from .store import MetricStore

logger = logging.getLogger(__name__)


@contextmanager
def isolated_metrics(**overrides: Any) -> Iterator[PrometheusMetrics]:
    init = MetricsInit(
        registry=MetricStore(),
        table=MetricRegistry(),
        calculate_memory=lambda: {},
    )
    metrics = PrometheusMetrics(init, **overrides)
    try:
        yield metrics
    finally:
        metrics.table.clear()
        metrics.store.clear()
        logger.debug("isolated metrics torn down")


__all__ = ["isolated_metrics"]
