"""
Errors raised by the timeline engine.

Both errors derive from ValueError: they describe bad input handed to the
engine, never an internal failure.
"""


class TraceViewerError(ValueError):
    """Base class for all engine errors."""


class MalformedTraceError(TraceViewerError):
    """Raw trace data failed validation.

    Raised for unknown categories, bad spans or missing fields. The ingestion
    that raised it is aborted as a whole and previously ingested state is left
    untouched.
    """


class InvalidViewportRequestError(TraceViewerError):
    """A viewport request was rejected before touching any state."""
