"""
Plot dimensions and content geometry.

Boxes are expressed in plot coordinates: (0, 0) is the top-left corner of the
plot area, inside the margins.
"""

from dataclasses import dataclass
from typing import Optional

from ..utils.settings import Settings
from .models import ExecutorLines, Segment
from .scales import TimelineScales

# Share of a line slot filled by its segments
LANE_FILL = 0.8

# Segments never shrink below this many pixels
MIN_SEGMENT_WIDTH = 1.0


@dataclass(frozen=True)
class Dimensions:
    """Overall chart size and the plot area inside the margins"""

    width: float
    height: float
    plot_width: float
    plot_height: float
    left: float
    top: float
    visible_lines: int

    @classmethod
    def compute(cls, settings: Settings, visible_lines: int) -> "Dimensions":
        plot_width = settings.width - settings.left_margin - settings.right_margin
        plot_height = visible_lines * settings.max_line_height
        return cls(
            width=settings.width,
            height=plot_height + settings.top_margin + settings.bottom_margin,
            plot_width=plot_width,
            plot_height=plot_height,
            left=settings.left_margin,
            top=settings.top_margin,
            visible_lines=visible_lines,
        )

    @property
    def lane_height(self) -> float:
        if self.visible_lines <= 0:
            return 0.0
        return self.plot_height / self.visible_lines * LANE_FILL

    def clamp_point(self, x: float, y: float) -> tuple[float, float]:
        """Clamp a point to the plot area."""
        return (
            max(0.0, min(self.plot_width, x)),
            max(0.0, min(self.plot_height, y)),
        )


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float
    height: float


def segment_box(
    segment: Segment, scales: TimelineScales, dimensions: Dimensions
) -> Optional[Box]:
    """Rectangle of a segment, or None if its line is not visible."""
    center = scales.lines(segment.line_key)
    if center is None or scales.time is None:
        return None
    x0 = scales.time(segment.start)
    x1 = scales.time(segment.end)
    lane = dimensions.lane_height
    return Box(
        x=x0,
        y=center - lane / 2,
        width=max(MIN_SEGMENT_WIDTH, x1 - x0),
        height=lane,
    )


def executor_band(
    entry: ExecutorLines, scales: TimelineScales, dimensions: Dimensions
) -> Optional[Box]:
    """Background band spanning an executor's visible lines."""
    center = scales.groups(entry.executor)
    if center is None or dimensions.visible_lines <= 0:
        return None
    height = dimensions.plot_height * entry.line_count / dimensions.visible_lines
    return Box(x=0.0, y=center - height / 2, width=dimensions.plot_width, height=height)
