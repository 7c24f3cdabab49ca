"""p2p_metrics public interface.

Stable import surface:
    from p2p_metrics import PrometheusMetrics, prometheus_metrics, MetricsInit
    from p2p_metrics import NamingError, KindMismatchError, CalculatorError
"""
from __future__ import annotations

from ._singleton import clear_default_registry, get_default_registry
from .config import MetricsInit
from .counter import PrometheusCounter
from .counter_group import PrometheusCounterGroup
from .errors import CalculatorError, KindMismatchError, MetricsError, NamingError
from .metric import PrometheusMetric
from .metric_group import PrometheusMetricGroup
from .prometheus import (
    MEMORY_METRIC,
    TRANSFER_METRIC,
    PrometheusMetrics,
    RegistryMetricData,
    prometheus_metrics,
)
from .registry import MetricKind, MetricRecord, MetricRegistry
from .store import MetricStore, Series
from .tracking import TransferStats, TransferTotals
from .utils.metrics_utils import normalise_string

__version__ = "0.1.0"

__all__ = [
    "PrometheusMetrics",
    "prometheus_metrics",
    "MetricsInit",
    "RegistryMetricData",
    "PrometheusMetric",
    "PrometheusCounter",
    "PrometheusMetricGroup",
    "PrometheusCounterGroup",
    "MetricKind",
    "MetricRecord",
    "MetricRegistry",
    "MetricStore",
    "Series",
    "TransferStats",
    "TransferTotals",
    "normalise_string",
    "get_default_registry",
    "clear_default_registry",
    "MetricsError",
    "NamingError",
    "KindMismatchError",
    "CalculatorError",
    "TRANSFER_METRIC",
    "MEMORY_METRIC",
    "__version__",
]
