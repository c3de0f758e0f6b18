"""
Test Data Builders - Fluent API for creating raw trace data.

Usage:
    from builders import TraceBuilder

    raw = TraceBuilder().executor("0").worker("0").segment(0, 10).build()
"""

from .trace import TraceBuilder

__all__ = ["TraceBuilder"]
