"""p2p_metrics exception hierarchy.

A small exception tree so callers can tell naming mistakes, registration
clashes and failing calculators apart.
"""
from __future__ import annotations


class MetricsError(Exception):
    """Base class for all p2p_metrics exceptions."""


class NamingError(MetricsError, ValueError):
    """Metric name missing or blank."""


class KindMismatchError(MetricsError, TypeError):
    """A name is already registered under a different metric kind."""

    def __init__(self, name: str, existing: str, requested: str):
        super().__init__(
            f"metric {name!r} is already registered as {existing}, cannot register it as {requested}"
        )
        self.name = name
        self.existing = existing
        self.requested = requested


class CalculatorError(MetricsError):
    """A calculator raised while refreshing a metric before a scrape."""

    def __init__(self, metric: str, cause: BaseException):
        super().__init__(f"calculator for metric {metric!r} failed: {cause}")
        self.metric = metric


__all__ = [
    "MetricsError",
    "NamingError",
    "KindMismatchError",
    "CalculatorError",
]
