"""
Log formatters for tfprof viewer.

Both formatters render the same record fields: the active trace id from
ContextFilter plus any engine fields passed through ``extra``, e.g.

    debug("Viewport update", extra={"revision": 4, "viewport": {...}})
"""

import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any

# Record attributes the engine attaches through `extra`, in output order
CONTEXT_FIELDS = ("trace_id", "revision", "viewport", "lines", "segments")


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context fields present on the record, skipping unset ones."""
    context = {}
    for name in CONTEXT_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return context


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class HumanFormatter(logging.Formatter):
    """One line per record, columns separated by ``|``.

    Example:
        2024-01-15 14:23:45.123 | INFO  | tfprof               | engine.py:196 | Ingested trace [trace=1a2b3c4d lines=5]
    """

    LEVEL_WIDTH = 5
    NAME_WIDTH = 20

    def format(self, record: logging.LogRecord) -> str:
        stamp = _timestamp(record)
        columns = [
            stamp.strftime("%Y-%m-%d %H:%M:%S.") + f"{int(record.msecs):03d}",
            record.levelname.ljust(self.LEVEL_WIDTH),
            self._shorten_name(record.name),
            f"{record.filename}:{record.lineno}",
            record.getMessage() + self._context_suffix(record),
        ]
        text = " | ".join(columns)

        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text

    def _context_suffix(self, record: logging.LogRecord) -> str:
        context = record_context(record)
        if not context:
            return ""
        labels = {"trace_id": "trace"}
        pairs = " ".join(f"{labels.get(k, k)}={v}" for k, v in context.items())
        return f" [{pairs}]"

    def _shorten_name(self, name: str) -> str:
        """Fit a logger name into NAME_WIDTH, keeping its first and last part."""
        width = self.NAME_WIDTH
        if len(name) <= width:
            return name.ljust(width)

        first, _, rest = name.partition(".")
        last = rest.rpartition(".")[2]
        shortened = f"{first}...{last}"
        if rest and len(shortened) <= width:
            return shortened.ljust(width)
        return name[: width - 3] + "..."


class JsonFormatter(logging.Formatter):
    """JSON Lines formatter: one object per record.

    Keys: timestamp, level, logger, message, file, line, function, the
    context fields that are set, and exception when exc_info is present.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }
        entry.update(record_context(record))

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": [
                    line
                    for chunk in traceback.format_exception(exc_type, exc_value, exc_tb)
                    for line in chunk.splitlines()
                    if line.strip()
                ]
                if exc_tb
                else [],
            }

        return json.dumps(entry, ensure_ascii=False, default=str)
