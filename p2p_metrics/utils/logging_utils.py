"""Unified logging setup for applications embedding p2p_metrics.

Library modules only ever call ``logging.getLogger(__name__)``; this helper is
for the process that owns the root logger (services, scripts, tests).
"""
from __future__ import annotations

import json
import logging
import sys

from .env_flags import is_truthy_env

DEFAULT_FORMAT = '%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s'

SUPPRESSED_LOGGERS = [
    'asyncio',
]


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'ts': record.created,
            'level': record.levelname,
            'logger': record.name,
            'thread': record.threadName,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = 'INFO', fmt: str = DEFAULT_FORMAT, stream=None) -> logging.Logger:
    """Configure root logging.

    Replaces any existing root handlers so repeated calls do not duplicate
    output. Set P2P_METRICS_JSON_LOGS=1 to emit JSON lines instead of ``fmt``.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(log_level)
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.flush()
        h.close()

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setLevel(log_level)
    if is_truthy_env('P2P_METRICS_JSON_LOGS'):
        console.setFormatter(JsonFormatter())
    else:
        console.setFormatter(logging.Formatter(fmt))
    root.addHandler(console)

    for name in SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


__all__ = ["setup_logging", "JsonFormatter", "DEFAULT_FORMAT"]
