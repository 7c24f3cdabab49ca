"""Prometheus metrics facade.

`PrometheusMetrics` is what application code talks to:

    metrics = PrometheusMetrics()
    peers = metrics.register_metric('libp2p_peers')
    peers.update(12)
    metrics.register_metric_group('dialer_pending', label='kind',
                                  calculate=lambda: {'dial': queue.pending})
    text = await metrics.get_metrics()

Registrations go through a shared `MetricRegistry` (register-or-reuse by
name); values live in a `MetricStore` rendered by prometheus_client. A scrape
first awaits every metric's calculators, then renders.
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ._singleton import get_default_registry
from .calculated import GroupCalculator, ScalarCalculator
from .config import MetricsInit
from .counter import PrometheusCounter
from .counter_group import PrometheusCounterGroup
from .memory import calculate_memory as _default_calculate_memory
from .metric import PrometheusMetric
from .metric_group import PrometheusMetricGroup
from .registry import MetricKind, MetricRegistry
from .store import MetricStore, Series, StoreType
from .tracking import TransferTotals, negotiated_protocol, track_stream

logger = logging.getLogger(__name__)

TRANSFER_METRIC = 'libp2p_data_transfer_bytes_total'
TRANSFER_LABEL = 'protocol'
MEMORY_METRIC = 'python_memory_usage_bytes'
MEMORY_LABEL = 'memory'


@dataclass
class RegistryMetricData:
    kind: StoreType
    help: str
    instance: Series


class PrometheusMetrics:
    """Metrics facade over one registry table and one store."""

    def __init__(self, init: MetricsInit | None = None, **overrides: Any):
        init = init if init is not None else MetricsInit.from_env()
        if overrides:
            init = dataclasses.replace(init, **overrides)

        if isinstance(init.registry, MetricStore):
            self.store = init.registry
        else:
            self.store = MetricStore(init.registry)
        self.table: MetricRegistry = init.table if init.table is not None else get_default_registry()

        if not init.preserve_existing_metrics:
            logger.info("Clearing existing metrics")
            self.table.clear()
            self.store.clear()

        # one accumulator per table, shared by every facade that taps streams into it
        self._transfer, created = self.table.shared(TRANSFER_METRIC, TransferTotals)
        self._transfer_stats = self._transfer.stats

        logger.info("Collecting data transfer metrics")
        self.register_counter_group(TRANSFER_METRIC, label=TRANSFER_LABEL,
                                    calculate=self._transfer if created else None)

        if init.collect_memory:
            logger.info("Collecting memory metrics")
            self.register_metric_group(
                MEMORY_METRIC,
                label=MEMORY_LABEL,
                calculate=init.calculate_memory or _default_calculate_memory,
            )

    # ------------------------------------------------------------------
    # Data transfer tracking
    # ------------------------------------------------------------------
    def track_multiaddr_connection(self, conn: Any) -> None:
        """Count every byte through a raw connection under ``global``."""
        track_stream(conn, 'global', self._transfer_stats)

    def track_protocol_stream(self, stream: Any, connection: Any = None) -> None:
        """Count bytes of a stream under its negotiated protocol.

        Streams whose protocol is not known yet are left alone.
        """
        protocol = negotiated_protocol(stream)
        if protocol is None:
            logger.debug("Protocol not negotiated for stream %r; not tracking", stream)
            return
        track_stream(stream, protocol, self._transfer_stats)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def register_metric(self, name: str, *, help: str | None = None,
                        label: str | None = None, calculate: ScalarCalculator | None = None) -> PrometheusMetric:
        """Register or reuse a gauge. ``label`` is ignored for scalar metrics."""
        return self.table.register(
            name, MetricKind.gauge,
            lambda: PrometheusMetric(name, self.store, help=help, calculate=calculate),
            calculate,
        )

    def register_metric_group(self, name: str, *, help: str | None = None, label: str | None = None,
                              calculate: GroupCalculator | None = None) -> PrometheusMetricGroup:
        return self.table.register(
            name, MetricKind.gauge_group,
            lambda: PrometheusMetricGroup(name, self.store, help=help, label=label, calculate=calculate),
            calculate,
        )

    def register_counter(self, name: str, *, help: str | None = None,
                         label: str | None = None, calculate: ScalarCalculator | None = None) -> PrometheusCounter:
        """Register or reuse a counter. ``label`` is ignored.

        Samples are exposed with a ``_total`` suffix (``bar`` renders as
        ``bar_total 1.0``); a name already ending in ``_total`` is not suffixed
        twice.
        """
        return self.table.register(
            name, MetricKind.counter,
            lambda: PrometheusCounter(name, self.store, help=help, calculate=calculate),
            calculate,
        )

    def register_counter_group(self, name: str, *, help: str | None = None, label: str | None = None,
                               calculate: GroupCalculator | None = None) -> PrometheusCounterGroup:
        """Register or reuse a labelled counter.

        Like `register_counter`, samples carry the ``_total`` suffix:
        ``increment({"http": True})`` on ``bar`` with label ``proto`` renders
        as ``bar_total{proto="http"} 1.0``.
        """
        return self.table.register(
            name, MetricKind.counter_group,
            lambda: PrometheusCounterGroup(name, self.store, help=help, label=label, calculate=calculate),
            calculate,
        )

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    async def _update_metrics(self) -> None:
        await self.table.calculate_all()

    async def get_metrics(self) -> str:
        """Refresh calculated metrics and return the Prometheus text report."""
        await self._update_metrics()
        return self.store.metrics()

    async def get_metrics_as_map(self) -> dict[str, RegistryMetricData]:
        """Refresh calculated metrics and return name -> {kind, help, instance}."""
        await self._update_metrics()
        out: dict[str, RegistryMetricData] = {}
        for typed in self.store.data.values():
            for name, series in typed.items():
                out[name] = RegistryMetricData(series.type, series.help, series)
        return out


def prometheus_metrics(init: MetricsInit | None = None, **overrides: Any) -> Callable[[], PrometheusMetrics]:
    """Deferred constructor, for wiring code that builds components later."""
    def _build() -> PrometheusMetrics:
        return PrometheusMetrics(init, **overrides)
    return _build


__all__ = [
    "PrometheusMetrics",
    "RegistryMetricData",
    "prometheus_metrics",
    "TRANSFER_METRIC",
    "MEMORY_METRIC",
]
