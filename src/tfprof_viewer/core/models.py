"""
Data models for the tfprof timeline engine
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

# Joins executor and worker ids into one line key. Ids containing it are
# rejected at ingestion so keys can always be split back apart.
LINE_KEY_SEPARATOR = "+&+"

TimeRange = tuple[Optional[float], Optional[float]]
LineRange = tuple[Optional[int], Optional[int]]


class Category(Enum):
    """Task categories, in legend/stacking order."""

    STATIC = "static"
    SUBFLOW = "subflow"
    CUDAFLOW = "cudaflow"
    CONDITION = "condition"
    MODULE = "module"

    @classmethod
    def parse(cls, value: object) -> Optional["Category"]:
        """Return the category named by value, or None if it names none."""
        if isinstance(value, cls):
            return value
        for category in cls:
            if category.value == value:
                return category
        return None


# Fixed order shared by ingestion, aggregation and rendering
CATEGORIES: tuple[Category, ...] = tuple(Category)


def line_key(executor: str, worker: str) -> str:
    """Build the composite key identifying a worker line."""
    return f"{executor}{LINE_KEY_SEPARATOR}{worker}"


def split_line_key(key: str) -> tuple[str, str]:
    """Split a line key back into (executor, worker)."""
    executor, _, worker = key.partition(LINE_KEY_SEPARATOR)
    return executor, worker


@dataclass(frozen=True)
class Segment:
    """One unit of timed work on a worker line"""

    executor: str
    worker: str
    start: float
    end: float
    category: Category
    name: str

    @property
    def span(self) -> tuple[float, float]:
        return (self.start, self.end)

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def line_key(self) -> str:
        return line_key(self.executor, self.worker)

    @property
    def identity(self) -> tuple[str, str, str, float]:
        """Key used by the rendering layer to diff segments between frames."""
        return (self.executor, self.worker, self.category.value, self.start)

    def to_dict(self) -> dict:
        return {
            "executor": self.executor,
            "worker": self.worker,
            "span": [self.start, self.end],
            "type": self.category.value,
            "name": self.name,
        }


@dataclass(frozen=True)
class ExecutorLines:
    """An executor and the ordered worker lines it owns"""

    executor: str
    lines: tuple[str, ...] = ()

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def keys(self) -> list[str]:
        return [line_key(self.executor, worker) for worker in self.lines]

    def to_dict(self) -> dict:
        return {"executor": self.executor, "lines": list(self.lines)}


@dataclass(frozen=True)
class AggregateRow:
    """Per-worker totals used by the bar chart"""

    executor: str
    worker: str
    tasks: int
    durations: dict[Category, float] = field(default_factory=dict)
    busy: float = 0.0

    @property
    def key(self) -> str:
        return line_key(self.executor, self.worker)

    def get(self, category: Category) -> float:
        return self.durations.get(category, 0.0)

    def to_dict(self) -> dict:
        result: dict = {
            "executor": self.executor,
            "worker": self.worker,
            "tasks": self.tasks,
        }
        for category in CATEGORIES:
            result[category.value] = self.get(category)
        result["busy"] = self.busy
        return result


@dataclass(frozen=True)
class NormalizedTrace:
    """Everything derived from one ingestion.

    Held as a single object so a structural index is never paired with
    segments or rows from another ingestion.
    """

    structure: tuple[ExecutorLines, ...] = ()
    segments: tuple[Segment, ...] = ()
    rows: tuple[AggregateRow, ...] = ()
    t_min: Optional[float] = None
    t_max: Optional[float] = None

    @property
    def total_lines(self) -> int:
        return sum(entry.line_count for entry in self.structure)

    @property
    def executors(self) -> list[str]:
        return [entry.executor for entry in self.structure]

    @property
    def time_bounds(self) -> TimeRange:
        return (self.t_min, self.t_max)

    @property
    def is_empty(self) -> bool:
        return not self.structure


def _endpoint_matches(a: Optional[float], b: Optional[float], epsilon: float) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return a == b or abs(a - b) < epsilon


@dataclass(frozen=True)
class Viewport:
    """Current time range and line range.

    Line endpoints may be None, meaning unbounded in that direction.
    """

    time_range: TimeRange = (None, None)
    line_range: LineRange = (None, None)

    @property
    def lines_unbounded(self) -> bool:
        return self.line_range[0] is None and self.line_range[1] is None

    def matches(self, other: "Viewport", epsilon: float) -> bool:
        """True if all four endpoints are equal or within epsilon."""
        pairs = zip(
            self.time_range + self.line_range, other.time_range + other.line_range
        )
        return all(_endpoint_matches(a, b, epsilon) for a, b in pairs)

    def to_dict(self) -> dict:
        return {
            "time_range": list(self.time_range),
            "line_range": list(self.line_range),
        }
