"""
Line-window filter.

Worker lines are addressed by a global index: executor 0's workers occupy
[0, n0), executor 1's occupy [n0, n0 + n1), and so on. Given a line range in
that space, the filter returns the visible (executor, lines) entries with the
executor grouping kept intact.
"""

from dataclasses import dataclass
from typing import Sequence

from .models import ExecutorLines, LineRange


@dataclass(frozen=True)
class LineWindow:
    """Visible subset of the structural index"""

    entries: tuple[ExecutorLines, ...] = ()
    visible_lines: int = 0

    @property
    def executors(self) -> list[str]:
        return [entry.executor for entry in self.entries]

    def keys(self) -> list[str]:
        """Flattened line keys, top to bottom."""
        return line_keys(self.entries)


def count_lines(structure: Sequence[ExecutorLines]) -> int:
    return sum(entry.line_count for entry in structure)


def line_keys(entries: Sequence[ExecutorLines]) -> list[str]:
    keys: list[str] = []
    for entry in entries:
        keys.extend(entry.keys())
    return keys


def filter_lines(
    structure: Sequence[ExecutorLines], line_range: LineRange
) -> LineWindow:
    """Restrict the structural index to a window of global line indices.

    Args:
        structure: Ordered executor entries from the normalizer.
        line_range: (lo, hi) inclusive; None means unbounded on that side.

    Returns:
        LineWindow whose entries hold exactly visible_lines lines.
    """
    total = count_lines(structure)
    lo, hi = line_range

    if lo is None and hi is None:
        return LineWindow(entries=tuple(structure), visible_lines=total)

    offset = 0 if lo is None else max(0, lo)
    end = total if hi is None else hi + 1
    budget = max(0, end - offset)

    entries: list[ExecutorLines] = []
    remaining = budget

    for entry in structure:
        if remaining <= 0:
            break

        lines = entry.lines
        # Whole executor lies before the window
        if offset >= len(lines):
            offset -= len(lines)
            continue

        # Window ends inside this executor
        if len(lines) - offset >= remaining:
            entries.append(
                ExecutorLines(entry.executor, lines[offset : offset + remaining])
            )
            remaining = 0
            break

        taken = lines[offset:]
        entries.append(ExecutorLines(entry.executor, taken))
        remaining -= len(taken)
        offset = 0

    return LineWindow(entries=tuple(entries), visible_lines=budget - remaining)
