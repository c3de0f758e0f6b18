"""
Logging configuration for tfprof viewer, read from the environment.

    TFPROF_DEBUG        1/true/yes: DEBUG level and stderr output
    TFPROF_LOG_LEVEL    debug, info, warning, error or critical
    TFPROF_LOG_CONSOLE  1/true/yes or 0/false/no: force stderr output on/off
    TFPROF_LOG_DIR      directory for the log files
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEBUG_ENV = "TFPROF_DEBUG"
LOG_LEVEL_ENV = "TFPROF_LOG_LEVEL"
LOG_CONSOLE_ENV = "TFPROF_LOG_CONSOLE"
LOG_DIR_ENV = "TFPROF_LOG_DIR"

LOG_DIR = Path.home() / ".cache" / "tfprof-viewer" / "logs"

HUMAN_LOG_FILE = "tfprof-viewer.log"
JSON_LOG_FILE = "tfprof-viewer.json"

LOG_LEVEL_MAP = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def _env_flag(name: str) -> Optional[bool]:
    """True/False for a recognised boolean value, None when unset or unknown."""
    value = os.environ.get(name, "").strip().lower()
    if value in ("1", "true", "yes"):
        return True
    if value in ("0", "false", "no"):
        return False
    return None


@dataclass
class LogConfig:
    """Where logs go, how large they grow and what level they record."""

    log_dir: Path = field(default_factory=lambda: LOG_DIR)
    human_log_max_bytes: int = 10 * 1024 * 1024
    human_log_backup_count: int = 5
    json_log_max_bytes: int = 20 * 1024 * 1024
    json_log_backup_count: int = 3
    default_level: int = logging.INFO
    console_enabled: bool = False

    @property
    def human_log_path(self) -> Path:
        return self.log_dir / HUMAN_LOG_FILE

    @property
    def json_log_path(self) -> Path:
        return self.log_dir / JSON_LOG_FILE


def get_config() -> LogConfig:
    """Build a LogConfig from the TFPROF_* environment variables."""
    config = LogConfig()

    if _env_flag(DEBUG_ENV):
        config.default_level = logging.DEBUG
        config.console_enabled = True

    level = os.environ.get(LOG_LEVEL_ENV, "").strip().lower()
    if level in LOG_LEVEL_MAP:
        config.default_level = LOG_LEVEL_MAP[level]

    console = _env_flag(LOG_CONSOLE_ENV)
    if console is not None:
        config.console_enabled = console

    log_dir = os.environ.get(LOG_DIR_ENV)
    if log_dir:
        config.log_dir = Path(log_dir)

    return config


def ensure_log_directory(config: Optional[LogConfig] = None) -> Path:
    """Create the log directory if needed and return it."""
    log_dir = config.log_dir if config else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir
