"""
Log handlers for tfprof viewer.

Two rotating files (human-readable and JSON Lines) always receive every
record; stderr output is optional.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import LogConfig, ensure_log_directory, get_config
from .formatters import HumanFormatter, JsonFormatter


def _rotating_handler(
    path: Path, max_bytes: int, backups: int, formatter: logging.Formatter
) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def create_file_handler(config: LogConfig) -> RotatingFileHandler:
    """Rotating handler writing the human-readable log."""
    ensure_log_directory(config)
    return _rotating_handler(
        config.human_log_path,
        config.human_log_max_bytes,
        config.human_log_backup_count,
        HumanFormatter(),
    )


def create_json_handler(config: LogConfig) -> RotatingFileHandler:
    """Rotating handler writing the JSON Lines log."""
    ensure_log_directory(config)
    return _rotating_handler(
        config.json_log_path,
        config.json_log_max_bytes,
        config.json_log_backup_count,
        JsonFormatter(),
    )


def create_console_handler(config: LogConfig) -> logging.StreamHandler:
    """stderr handler: warnings and above, everything in debug mode."""
    handler = logging.StreamHandler(sys.stderr)
    debug_mode = config.default_level == logging.DEBUG
    handler.setLevel(logging.DEBUG if debug_mode else logging.WARNING)
    handler.setFormatter(HumanFormatter())
    return handler


def setup_handlers(
    logger: logging.Logger,
    config: Optional[LogConfig] = None,
    include_console: Optional[bool] = None,
) -> None:
    """Replace the logger's handlers with the configured set.

    Args:
        logger: The logger to configure.
        config: Optional LogConfig. If not provided, uses get_config().
        include_console: Override config.console_enabled when not None.
    """
    config = config or get_config()
    if include_console is None:
        include_console = config.console_enabled

    # Close replaced handlers so repeated setup does not leak file handles
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(create_file_handler(config))
    logger.addHandler(create_json_handler(config))
    if include_console:
        logger.addHandler(create_console_handler(config))

    logger.setLevel(config.default_level)
