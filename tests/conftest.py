"""
Shared fixtures for the PRW test suite.

Puts the repository root on sys.path so the flat component modules import
without installation.
"""

import logging
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from component_7_domain_builders import ChainBuilder  # noqa: E402
from prw_config import reset_config  # noqa: E402


@pytest.fixture
def rng():
    """Seeded generator so random walks are reproducible."""
    return random.Random(1234)


@pytest.fixture
def chain_problem():
    """init {f0}, goal {f2}, step_0: f0 -> f1, step_1: f1 -> f2."""
    return ChainBuilder.create_problem(2)


@pytest.fixture(autouse=True)
def fresh_config():
    """Process-wide config must not leak between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_logging():
    """Snapshot root/performance logger handlers; setup_logging() replaces them."""
    root = logging.getLogger()
    perf = logging.getLogger("prw.performance")
    saved = (list(root.handlers), root.level, list(perf.handlers), perf.propagate)
    yield
    for handler in root.handlers:
        if handler not in saved[0]:
            handler.close()
    for handler in perf.handlers:
        if handler not in saved[2]:
            handler.close()
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    perf.handlers[:] = saved[2]
    perf.propagate = saved[3]
