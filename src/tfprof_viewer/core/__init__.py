"""
Viewport and aggregation engine for tfprof execution traces.
"""

from .bars import BarLayout, BarSeries, BarStack, layout_bars, stack_bars
from .engine import TimelineEngine, TimelineSnapshot
from .errors import InvalidViewportRequestError, MalformedTraceError, TraceViewerError
from .labels import AxisLabels, reduce_label
from .models import (
    CATEGORIES,
    AggregateRow,
    Category,
    ExecutorLines,
    NormalizedTrace,
    Segment,
    Viewport,
    line_key,
    split_line_key,
)
from .normalizer import load_trace, normalize_trace, parse_trace
from .scales import (
    BandScale,
    LinearScale,
    OrdinalScale,
    PointScale,
    TimelineScales,
    derive_scales,
    invert_ordinal,
    num_xticks,
)
from .window import LineWindow, filter_lines

__all__ = [
    "AggregateRow",
    "AxisLabels",
    "BandScale",
    "BarLayout",
    "BarSeries",
    "BarStack",
    "CATEGORIES",
    "Category",
    "ExecutorLines",
    "InvalidViewportRequestError",
    "LineWindow",
    "LinearScale",
    "MalformedTraceError",
    "NormalizedTrace",
    "OrdinalScale",
    "PointScale",
    "Segment",
    "TimelineEngine",
    "TimelineScales",
    "TimelineSnapshot",
    "TraceViewerError",
    "Viewport",
    "derive_scales",
    "filter_lines",
    "invert_ordinal",
    "layout_bars",
    "line_key",
    "load_trace",
    "normalize_trace",
    "num_xticks",
    "parse_trace",
    "reduce_label",
    "split_line_key",
    "stack_bars",
]
