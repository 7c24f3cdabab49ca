# Utils module for p2p_metrics
from .env_flags import is_truthy, is_truthy_env
from .metrics_utils import decrement_gauge, magnitude, normalise_string

__all__ = [
    "is_truthy", "is_truthy_env",
    "decrement_gauge", "magnitude", "normalise_string",
]
