"""
Bar aggregator - stacked per-worker time breakdown by category.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..utils.settings import Settings
from .models import CATEGORIES, AggregateRow, Category
from .scales import BandScale, LinearScale


@dataclass(frozen=True)
class BarStack:
    """One worker's bar: a (bottom, top) pair per stacked category"""

    row: AggregateRow
    segments: tuple[tuple[float, float], ...]

    @property
    def key(self) -> str:
        return self.row.key

    @property
    def top(self) -> float:
        return self.segments[-1][1] if self.segments else 0.0


@dataclass(frozen=True)
class BarSeries:
    """Stacked bars plus the value-axis maximum"""

    keys: tuple[Category, ...] = CATEGORIES
    stacks: tuple[BarStack, ...] = ()
    max_value: float = 0.0
    executor: Optional[str] = None
    category: Optional[Category] = None

    @property
    def is_empty(self) -> bool:
        return not self.stacks

    def layer(self, category: Category) -> list[tuple[float, float]]:
        """All bars' segments for one category, in row order."""
        i = self.keys.index(category)
        return [stack.segments[i] for stack in self.stacks]

    def to_dict(self) -> dict:
        return {
            "executor": self.executor,
            "category": self.category.value if self.category else None,
            "keys": [key.value for key in self.keys],
            "max_value": self.max_value,
            "bars": [
                {
                    "executor": stack.row.executor,
                    "worker": stack.row.worker,
                    "segments": [list(segment) for segment in stack.segments],
                }
                for stack in self.stacks
            ],
        }


def stack_bars(
    rows: Sequence[AggregateRow],
    executor: Optional[str] = None,
    category: Union[Category, str, None] = None,
) -> BarSeries:
    """Filter aggregate rows and stack their category durations.

    Args:
        rows: Aggregate rows from the normalizer.
        executor: Keep only this executor's rows (None keeps all).
        category: Stack only this category (None stacks all, in order).

    Returns:
        BarSeries. Filters matching nothing give an empty series.
    """
    selected: Optional[Category] = None
    if category is not None:
        selected = Category.parse(category)
        if selected is None:
            return BarSeries(keys=(), executor=executor)

    keys = CATEGORIES if selected is None else (selected,)
    stacks = []
    for row in rows:
        if executor is not None and row.executor != executor:
            continue
        segments = []
        offset = 0.0
        for key in keys:
            value = row.get(key)
            segments.append((offset, offset + value))
            offset += value
        stacks.append(BarStack(row=row, segments=tuple(segments)))

    if not stacks:
        max_value = 0.0
    elif selected is not None:
        max_value = max(stack.row.get(selected) for stack in stacks)
    else:
        max_value = max(stack.row.busy for stack in stacks)

    return BarSeries(
        keys=keys,
        stacks=tuple(stacks),
        max_value=max_value,
        executor=executor,
        category=selected,
    )


@dataclass(frozen=True)
class BarLayout:
    x: BandScale
    y: LinearScale


def layout_bars(series: BarSeries, settings: Settings) -> BarLayout:
    """Scales placing the bars inside the bar chart margins."""
    return BarLayout(
        x=BandScale(
            domain=tuple(stack.key for stack in series.stacks),
            range=(
                float(settings.bar_left_margin),
                float(settings.bar_width - settings.bar_right_margin),
            ),
            padding=0.5,
        ),
        y=LinearScale(
            domain=(0.0, series.max_value),
            range=(
                float(settings.bar_height - settings.bar_bottom_margin),
                float(settings.bar_top_margin),
            ),
        ),
    )
