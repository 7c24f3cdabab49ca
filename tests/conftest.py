"""Pytest configuration & shared fixtures for p2p_metrics.

Every test that needs a facade gets one bound to a private table and store
(`isolated_metrics`) so registrations never leak between tests.
"""
from __future__ import annotations

import pytest

from p2p_metrics import clear_default_registry
from p2p_metrics.testing import isolated_metrics


@pytest.fixture()
def metrics():
    with isolated_metrics() as m:
        yield m


@pytest.fixture(autouse=True)
def _fresh_default_registry():
    clear_default_registry()
    yield
    clear_default_registry()
