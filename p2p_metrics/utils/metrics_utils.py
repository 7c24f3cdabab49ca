"""Small helpers shared by every metric type."""
from __future__ import annotations

import re
from numbers import Real
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from ..store import Labels, Series


_INVALID_CHARS = re.compile(r'[^a-zA-Z0-9_]')
_UNDERSCORE_RUNS = re.compile(r'_+')


def normalise_string(value: str) -> str:
    """Turn an arbitrary string into a valid metric or label name.

    See https://prometheus.io/docs/concepts/data_model/#metric-names-and-labels
    for the naming rules.
    """
    return _UNDERSCORE_RUNS.sub('_', _INVALID_CHARS.sub('_', value))


def magnitude(value: Any) -> float:
    """Return the step for a group increment/decrement.

    Real numbers are used as-is; flags and anything else count as one.
    """
    if isinstance(value, Real) and not isinstance(value, bool):
        return float(value)
    return 1.0


def decrement_gauge(gauge: Series, dec: float, labels: Labels | None = None) -> None:
    """Decrement a gauge, treating an unset cell as zero."""
    if gauge.get(labels) is None:
        gauge.set(-dec, labels)
        return
    gauge.sub(dec, labels)


__all__ = ["normalise_string", "magnitude", "decrement_gauge"]
