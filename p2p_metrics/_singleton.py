"""Process-wide MetricRegistry anchor.

Facades that are not handed an explicit table share this one, so independent
components of a process that register the same metric name end up with the
same handle.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .registry import MetricRegistry

REGISTRY_SINGLETON: MetricRegistry | None = None
_REGISTRY_LOCK = threading.Lock()


def get_default_registry() -> MetricRegistry:
    """Return the process-wide table, creating it on first use."""
    global REGISTRY_SINGLETON  # noqa: PLW0603
    if REGISTRY_SINGLETON is not None:
        return REGISTRY_SINGLETON
    with _REGISTRY_LOCK:
        if REGISTRY_SINGLETON is None:
            from .registry import MetricRegistry
            REGISTRY_SINGLETON = MetricRegistry()
        return REGISTRY_SINGLETON


def clear_default_registry() -> None:
    """Forget the process-wide table; the next lookup builds a fresh one."""
    global REGISTRY_SINGLETON  # noqa: PLW0603
    with _REGISTRY_LOCK:
        REGISTRY_SINGLETON = None


__all__ = ["get_default_registry", "clear_default_registry"]
