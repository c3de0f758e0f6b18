"""
Logging context for tfprof viewer.

Tags every record emitted while a trace is being processed with that trace's id.
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Generator, Optional

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context."""
    return trace_id_var.get()


def generate_trace_id() -> str:
    """Generate a new trace ID (shortened UUID, 8 characters)."""
    return uuid.uuid4().hex[:8]


@contextmanager
def log_context(
    trace_id: Optional[str] = None, auto_trace_id: bool = False
) -> Generator[Optional[str], None, None]:
    """Set the trace ID for the duration of the block.

    Args:
        trace_id: Trace ID to set. If None and auto_trace_id is True, generates one.
        auto_trace_id: If True, auto-generate trace_id if not provided.

    Yields:
        The active trace ID.

    Example:
        with log_context(auto_trace_id=True) as trace_id:
            logger.info("Ingesting trace %s", trace_id)
    """
    if trace_id is None and auto_trace_id:
        trace_id = generate_trace_id()

    token = trace_id_var.set(trace_id) if trace_id is not None else None
    try:
        yield trace_id_var.get()
    finally:
        if token is not None:
            trace_id_var.reset(token)


class ContextFilter(logging.Filter):
    """Logging filter that adds the active trace ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = trace_id_var.get()
        return True
