"""
Trace normalizer - turns raw nested tfprof JSON into query-friendly forms.

Input shape (one entry per executor):

    [
        {
            "executor": "0",
            "data": [
                {
                    "worker": "0",
                    "data": [
                        {"span": [0, 10], "type": "static", "name": "task_a"},
                    ],
                },
            ],
        },
    ]

The whole input is validated and built before anything is returned, so a
failure leaves no partially normalized state behind.
"""

import json
import math
from pathlib import Path
from typing import Any, Union

from .errors import MalformedTraceError
from .models import (
    CATEGORIES,
    LINE_KEY_SEPARATOR,
    AggregateRow,
    Category,
    ExecutorLines,
    NormalizedTrace,
    Segment,
)


def _require(record: Any, key: str, where: str) -> Any:
    if not isinstance(record, dict):
        kind = type(record).__name__
        raise MalformedTraceError(f"{where}: expected an object, got {kind}")
    if key not in record:
        raise MalformedTraceError(f"{where}: missing required field '{key}'")
    return record[key]


def _require_list(record: Any, key: str, where: str) -> list:
    value = _require(record, key, where)
    if not isinstance(value, list):
        raise MalformedTraceError(f"{where}: field '{key}' must be a list")
    return value


def _parse_id(value: Any, where: str) -> str:
    """Executor and worker ids are strings; integer ids are accepted as-is."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedTraceError(f"{where}: id must be a string, got {value!r}")
    text = str(value)
    if LINE_KEY_SEPARATOR in text:
        raise MalformedTraceError(
            f"{where}: id {text!r} contains reserved separator '{LINE_KEY_SEPARATOR}'"
        )
    return text


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return False


def _parse_segment(record: Any, executor: str, worker: str, where: str) -> Segment:
    span = _require(record, "span", where)
    raw_type = _require(record, "type", where)
    name = _require(record, "name", where)

    if not isinstance(span, (list, tuple)) or len(span) != 2:
        raise MalformedTraceError(f"{where}: span must be a [start, end] pair")
    start, end = span
    if not (_is_number(start) and _is_number(end)):
        raise MalformedTraceError(f"{where}: span values must be finite numbers")
    if start > end:
        raise MalformedTraceError(f"{where}: span start {start} is after end {end}")

    category = Category.parse(raw_type)
    if category is None:
        raise MalformedTraceError(f"{where}: unrecognized category {raw_type!r}")

    if not isinstance(name, str):
        raise MalformedTraceError(f"{where}: name must be a string")

    return Segment(
        executor=executor,
        worker=worker,
        start=start,
        end=end,
        category=category,
        name=name,
    )


def normalize_trace(raw: Any) -> NormalizedTrace:
    """Validate raw trace data and build every derived representation.

    Args:
        raw: Sequence of executor records as decoded from tfprof JSON.

    Returns:
        NormalizedTrace holding the structural index, flat segment list,
        aggregate rows and global time bounds (None for an empty trace).

    Raises:
        MalformedTraceError: If any record fails validation.
    """
    if not isinstance(raw, (list, tuple)):
        raise MalformedTraceError("trace must be a list of executor records")

    structure: list[ExecutorLines] = []
    segments: list[Segment] = []
    rows: list[AggregateRow] = []
    t_min = None
    t_max = None

    for i, executor_record in enumerate(raw):
        where = f"executor[{i}]"
        executor = _parse_id(_require(executor_record, "executor", where), where)
        workers: list[str] = []

        for j, worker_record in enumerate(_require_list(executor_record, "data", where)):
            worker_where = f"{where}.worker[{j}]"
            worker = _parse_id(
                _require(worker_record, "worker", worker_where), worker_where
            )
            workers.append(worker)

            durations = {category: 0.0 for category in CATEGORIES}
            busy = 0.0
            records = _require_list(worker_record, "data", worker_where)

            for k, segment_record in enumerate(records):
                segment = _parse_segment(
                    segment_record, executor, worker, f"{worker_where}.segment[{k}]"
                )
                segments.append(segment)

                if t_min is None or segment.start < t_min:
                    t_min = segment.start
                if t_max is None or segment.end > t_max:
                    t_max = segment.end

                durations[segment.category] += segment.duration
                busy += segment.duration

            rows.append(
                AggregateRow(
                    executor=executor,
                    worker=worker,
                    tasks=len(records),
                    durations=durations,
                    busy=busy,
                )
            )

        structure.append(ExecutorLines(executor=executor, lines=tuple(workers)))

    return NormalizedTrace(
        structure=tuple(structure),
        segments=tuple(segments),
        rows=tuple(rows),
        t_min=t_min,
        t_max=t_max,
    )


def parse_trace(text: str) -> NormalizedTrace:
    """Decode tfprof JSON text and normalize it."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedTraceError(f"invalid JSON: {e}") from e
    return normalize_trace(raw)


def load_trace(path: Union[str, Path]) -> NormalizedTrace:
    """Read and normalize a tfprof JSON file."""
    return parse_trace(Path(path).read_text(encoding="utf-8"))
