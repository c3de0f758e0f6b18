"""
Structured logging for tfprof viewer.

Everything logs under the ``tfprof`` logger. Records go to a human-readable
and a JSON Lines file (both rotated) and optionally to stderr; see config.py
for the environment variables.

Usage:
    from tfprof_viewer.utils.logger import debug, info, warning, log_context

    with log_context(auto_trace_id=True):
        info("Ingested trace", extra={"lines": 120, "segments": 5000})

Records inside a log_context carry its trace id, so every line logged while
one trace is ingested can be grepped together.
"""

import logging
from typing import Any, Optional

from .config import LogConfig, ensure_log_directory, get_config
from .context import ContextFilter, generate_trace_id, get_trace_id, log_context
from .handlers import setup_handlers

ROOT_LOGGER_NAME = "tfprof"

_initialized = False


def setup_logging(config: Optional[LogConfig] = None) -> logging.Logger:
    """Configure the ``tfprof`` logger; safe to call again to reconfigure.

    get_logger() runs this lazily with the environment config when the
    application did not.
    """
    global _initialized

    config = config or get_config()
    ensure_log_directory(config)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    setup_handlers(logger, config)

    # On the handlers, so records from child loggers are tagged as well
    context_filter = ContextFilter()
    for handler in logger.handlers:
        handler.addFilter(context_filter)

    logger.propagate = False
    _initialized = True
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """The ``tfprof`` logger, or its ``tfprof.<name>`` child."""
    if not _initialized:
        setup_logging()
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


def _log(level: int, msg: str, args: tuple, kwargs: dict) -> None:
    # Report the caller's file:line, not this module's
    kwargs.setdefault("stacklevel", 3)
    get_logger().log(level, msg, *args, **kwargs)


def debug(msg: str, *args: Any, **kwargs: Any) -> None:
    _log(logging.DEBUG, msg, args, kwargs)


def info(msg: str, *args: Any, **kwargs: Any) -> None:
    _log(logging.INFO, msg, args, kwargs)


def warning(msg: str, *args: Any, **kwargs: Any) -> None:
    _log(logging.WARNING, msg, args, kwargs)


def error(msg: str, *args: Any, **kwargs: Any) -> None:
    _log(logging.ERROR, msg, args, kwargs)


__all__ = [
    "debug",
    "info",
    "warning",
    "error",
    "ROOT_LOGGER_NAME",
    "setup_logging",
    "get_logger",
    "LogConfig",
    "get_config",
    "log_context",
    "get_trace_id",
    "generate_trace_id",
    "ContextFilter",
]
