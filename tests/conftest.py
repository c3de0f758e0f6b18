"""
Pytest configuration and shared fixtures for tfprof_viewer tests.

This module provides:
- Isolated log directory and settings file for every test session
- Sample raw traces (hand-written and generated)
- Engine fixtures with default settings
"""

import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Keep Qt headless and logs out of the user's cache before anything imports them
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("TFPROF_LOG_DIR", tempfile.mkdtemp(prefix="tfprof-logs-"))

from builders import TraceBuilder  # noqa: E402

from tfprof_viewer.core import TimelineEngine  # noqa: E402
from tfprof_viewer.utils import settings as settings_module  # noqa: E402
from tfprof_viewer.utils.settings import Settings  # noqa: E402


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the settings file at a temp dir and drop the cached instance."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(settings_module, "CONFIG_DIR", str(config_dir))
    monkeypatch.setattr(settings_module, "CONFIG_FILE", str(config_dir / "settings.json"))
    monkeypatch.setattr(settings_module, "_settings", None)
    yield config_dir / "settings.json"


# =============================================================================
# Sample traces
# =============================================================================


@pytest.fixture
def sample_raw() -> list:
    """Two executors, five worker lines, spanning [0, 30].

    Line order: 0/0, 0/1, 1/0, 1/1 (idle), 1/2.
    """
    return (
        TraceBuilder()
        .executor("0")
        .worker("0")
        .segment(0, 10, "static", "init")
        .segment(12, 17, "subflow", "spawn")
        .segment(20, 23, "static", "finish")
        .worker("1")
        .segment(5, 9, "cudaflow", "kernel")
        .executor("1")
        .worker("0")
        .segment(2, 30, "module", "pipeline")
        .worker("1")
        .worker("2")
        .segment(1, 4, "condition", "branch")
        .build()
    )


@pytest.fixture
def window_raw() -> list:
    """Executors e1 [w0, w1, w2] and e2 [w3, w4], one segment per line."""
    builder = TraceBuilder()
    for executor, workers in (("e1", ("w0", "w1", "w2")), ("e2", ("w3", "w4"))):
        builder.executor(executor)
        for i, worker in enumerate(workers):
            builder.worker(worker).segment(i, i + 1, "static", f"{worker}-task")
    return builder.build()


@pytest.fixture
def trace_builder():
    """Factory for building custom raw traces."""
    return TraceBuilder


# =============================================================================
# Engine
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def engine(settings) -> TimelineEngine:
    """Engine without any trace ingested."""
    return TimelineEngine(settings)


@pytest.fixture
def loaded_engine(engine, sample_raw) -> TimelineEngine:
    """Engine with sample_raw ingested."""
    engine.ingest(sample_raw)
    return engine
