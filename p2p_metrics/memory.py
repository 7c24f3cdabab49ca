"""Default memory sampler for the built-in memory gauge group."""
from __future__ import annotations

import psutil


def calculate_memory() -> dict[str, float]:
    """Resident and virtual memory of the current process, in bytes."""
    p = psutil.Process()
    with p.oneshot():
        mem = p.memory_info()
    return {
        'rss': float(mem.rss),
        'vms': float(mem.vms),
    }


__all__ = ["calculate_memory"]
