"""
Unit test fixtures for pure functions and isolated components.

This module provides minimal fixtures for fast unit tests that work on
already normalized data rather than raw traces.
"""

import pytest

from tfprof_viewer.core import ExecutorLines


@pytest.fixture
def window_structure() -> tuple:
    """Structural index e1 [w0, w1, w2], e2 [w3, w4]."""
    return (
        ExecutorLines("e1", ("w0", "w1", "w2")),
        ExecutorLines("e2", ("w3", "w4")),
    )
