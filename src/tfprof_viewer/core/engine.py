"""
Timeline engine - owns the viewport and everything derived from it.

All state lives in one immutable TimelineSnapshot. Every accepted change
builds a complete new snapshot and swaps it in with a single assignment, so a
reader holding a snapshot never sees a window from one ingestion paired with
rows or scales from another.

Mutation only happens through ingest(), set_viewport(), reset_viewport() and
filter_bar(). set_viewport() drops requests that match the current viewport
(exactly or within epsilon), which is what breaks the feedback cycle between
a drag-zoom on the detail view and the overview brush.
"""

import math
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional, Sequence, Union

from ..utils.logger import debug, info, warning, log_context
from ..utils.settings import Settings, get_settings
from .bars import BarSeries, stack_bars
from .errors import InvalidViewportRequestError, MalformedTraceError
from .labels import AxisLabels, group_axis_labels, line_axis_labels
from .layout import Box, Dimensions, executor_band, segment_box
from .models import (
    Category,
    ExecutorLines,
    LineRange,
    NormalizedTrace,
    Segment,
    TimeRange,
    Viewport,
)
from .normalizer import normalize_trace
from .scales import (
    LinearScale,
    OrdinalScale,
    PointScale,
    TimelineScales,
    derive_scales,
    num_xticks,
)
from .window import LineWindow, filter_lines

SnapshotListener = Callable[["TimelineSnapshot"], None]
ZoomRequest = tuple[TimeRange, LineRange]


@dataclass(frozen=True)
class TimelineSnapshot:
    """Read-only state published to the rendering layer"""

    revision: int
    trace: NormalizedTrace
    viewport: Viewport
    window: LineWindow
    dimensions: Dimensions
    scales: TimelineScales
    overview: Optional[LinearScale]
    line_labels: AxisLabels
    group_labels: AxisLabels
    bars: BarSeries

    @property
    def visible_lines(self) -> int:
        return self.window.visible_lines

    @property
    def total_lines(self) -> int:
        return self.trace.total_lines

    @property
    def time_bounds(self) -> TimeRange:
        return self.trace.time_bounds

    @property
    def time_scale(self) -> Optional[LinearScale]:
        return self.scales.time

    @property
    def line_scale(self) -> PointScale:
        return self.scales.lines

    @property
    def group_scale(self) -> OrdinalScale:
        return self.scales.groups

    @property
    def time_ticks(self) -> list[float]:
        """Tick values for the time axis at the current plot width."""
        if self.scales.time is None:
            return []
        return self.scales.time.ticks(num_xticks(self.dimensions.plot_width))

    @property
    def overview_selection(self) -> TimeRange:
        """Brush selection on the overview, in time units."""
        return self.viewport.time_range


def _is_real(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _as_pair(value: Any, name: str) -> tuple[Any, Any]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise InvalidViewportRequestError(f"{name} must be a pair, got {value!r}")
    return value[0], value[1]


def _as_line_index(value: Any, total: int) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidViewportRequestError(f"line index must be an integer, got {value!r}")
    if not 0 <= value < total:
        raise InvalidViewportRequestError(
            f"line index {value} outside [0, {total})"
        )
    return value


class TimelineEngine:
    """Viewport state manager for one trace at a time.

    Example:
        engine = TimelineEngine()
        engine.add_listener(render)
        engine.ingest(raw_trace)
        engine.set_viewport((10.0, 50.0), (0, 99))
        engine.reset_viewport()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._listeners: list[SnapshotListener] = []
        self._snapshot = self._build(
            revision=0,
            trace=NormalizedTrace(),
            viewport=Viewport(),
            bars=BarSeries(),
        )

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def snapshot(self) -> TimelineSnapshot:
        return self._snapshot

    @property
    def trace(self) -> NormalizedTrace:
        return self._snapshot.trace

    @property
    def viewport(self) -> Viewport:
        return self._snapshot.viewport

    @property
    def epsilon(self) -> float:
        return self._settings.viewport_epsilon

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback receiving every newly published snapshot."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SnapshotListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def ingest(self, raw: Any) -> NormalizedTrace:
        """Replace the current trace and reset the viewport and bar filters.

        Args:
            raw: Raw tfprof trace data, or an already normalized trace.

        Returns:
            The ingested NormalizedTrace.

        Raises:
            MalformedTraceError: If the trace fails validation; prior state is
                left untouched.
        """
        with log_context(auto_trace_id=True):
            if isinstance(raw, NormalizedTrace):
                trace = raw
            else:
                try:
                    trace = normalize_trace(raw)
                except MalformedTraceError as e:
                    warning("Rejected trace: %s", e)
                    raise

            info(
                "Ingested trace: %d executors, bounds=%s",
                len(trace.structure),
                trace.time_bounds,
                extra={"lines": trace.total_lines, "segments": len(trace.segments)},
            )
            bounds: TimeRange = (None, None)
            if trace.t_min is not None and trace.t_max is not None:
                bounds = (float(trace.t_min), float(trace.t_max))
            self._commit(
                trace=trace,
                viewport=Viewport(bounds, (None, None)),
                bars=stack_bars(trace.rows),
            )
        return trace

    def set_viewport(self, time_range: Sequence, line_range: Sequence) -> None:
        """Move the viewport.

        Requests matching the current viewport on all four endpoints (exactly
        or within epsilon) are ignored. Accepted requests refilter the lines,
        recompute dimensions and scales, then publish a new snapshot.

        Args:
            time_range: (t_min, t_max) with t_min <= t_max.
            line_range: (lo, hi) global line indices; None means unbounded.

        Raises:
            InvalidViewportRequestError: If the request is out of range or
                malformed; the viewport is left unchanged.
        """
        try:
            requested = self._validate(time_range, line_range)
        except InvalidViewportRequestError as e:
            warning("Rejected viewport request: %s", e)
            raise

        current = self._snapshot
        if requested.matches(current.viewport, self.epsilon):
            debug(
                "Skipped viewport update",
                extra={"revision": current.revision, "viewport": requested.to_dict()},
            )
            return

        debug(
            "Viewport update",
            extra={"revision": current.revision + 1, "viewport": requested.to_dict()},
        )
        self._commit(trace=current.trace, viewport=requested, bars=current.bars)

    def reset_viewport(self) -> None:
        """Show the whole trace."""
        self.set_viewport(self.trace.time_bounds, (None, None))

    def filter_bar(
        self,
        executor: Optional[str] = None,
        category: Union[Category, str, None] = None,
    ) -> BarSeries:
        """Restack the bar chart for an executor and/or category selection."""
        if executor is not None:
            # Ids are stored as strings
            executor = str(executor)
        current = self._snapshot
        series = stack_bars(current.trace.rows, executor, category)
        self._snapshot = replace(current, revision=current.revision + 1, bars=series)
        self._publish(self._snapshot)
        return series

    # -------------------------------------------------------------------------
    # Requests from interactive controls
    # -------------------------------------------------------------------------

    def zoom_request_from_drag(
        self, start: tuple[float, float], end: tuple[float, float]
    ) -> Optional[ZoomRequest]:
        """Translate a drag rectangle on the plot into a viewport request.

        Args:
            start: (x, y) where the drag began, in plot pixels.
            end: (x, y) where it was released.

        Returns:
            (time_range, line_range), or None for a click without movement or
            when nothing is displayed.
        """
        snapshot = self._snapshot
        time_scale = snapshot.time_scale
        lines = snapshot.line_scale
        if time_scale is None or not lines.domain:
            return None

        dims = snapshot.dimensions
        x0, y0 = dims.clamp_point(*start)
        x1, y1 = dims.clamp_point(*end)
        if (x0, y0) == (x1, y1):
            return None

        offset = snapshot.viewport.line_range[0] or 0
        left, right = sorted((x0, x1))
        top, bottom = sorted((y0, y1))
        time_range = (time_scale.invert(left), time_scale.invert(right))
        line_range = (
            lines.index(lines.invert(top)) + offset,
            lines.index(lines.invert(bottom)) + offset,
        )
        return time_range, line_range

    def zoom_request_from_brush(
        self, selection: Optional[tuple[float, float]]
    ) -> Optional[ZoomRequest]:
        """Translate an overview brush selection (pixels) into a request.

        A cleared brush (None) selects the whole time domain. The line range
        is kept as is.
        """
        overview = self._snapshot.overview
        if overview is None:
            return None
        if selection is None:
            time_range = overview.domain
        else:
            left, right = sorted(selection)
            time_range = (overview.invert(left), overview.invert(right))
        return time_range, self._snapshot.viewport.line_range

    # -------------------------------------------------------------------------
    # Content for the rendering layer
    # -------------------------------------------------------------------------

    def visible_segments(self, max_elems: Optional[int] = None) -> list[Segment]:
        """Segments on visible lines overlapping the current time range."""
        snapshot = self._snapshot
        time_scale = snapshot.time_scale
        if time_scale is None:
            return []

        t_min, t_max = time_scale.domain
        min_duration = self._settings.min_segment_duration
        lines = snapshot.line_scale
        result = []
        for segment in snapshot.trace.segments:
            if max_elems is not None and len(result) >= max_elems:
                break
            if (
                segment.line_key in lines
                and segment.end >= t_min
                and segment.start <= t_max
                and segment.duration >= min_duration
            ):
                result.append(segment)
        return result

    def segment_boxes(
        self, max_elems: Optional[int] = None
    ) -> list[tuple[Segment, Box]]:
        snapshot = self._snapshot
        boxes = []
        for segment in self.visible_segments(max_elems):
            box = segment_box(segment, snapshot.scales, snapshot.dimensions)
            if box is not None:
                boxes.append((segment, box))
        return boxes

    def executor_bands(self) -> list[tuple[ExecutorLines, Box]]:
        snapshot = self._snapshot
        bands = []
        for entry in snapshot.window.entries:
            box = executor_band(entry, snapshot.scales, snapshot.dimensions)
            if box is not None:
                bands.append((entry, box))
        return bands

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _validate(self, time_range: Sequence, line_range: Sequence) -> Viewport:
        t_min, t_max = _as_pair(time_range, "time range")
        lo, hi = _as_pair(line_range, "line range")
        trace = self._snapshot.trace

        if t_min is None and t_max is None and trace.t_min is None:
            # Nothing ingested yet, or an empty trace
            times: TimeRange = (None, None)
        else:
            if not (_is_real(t_min) and _is_real(t_max)):
                raise InvalidViewportRequestError(
                    f"time range endpoints must be finite numbers, got {time_range!r}"
                )
            if t_min > t_max:
                raise InvalidViewportRequestError(
                    f"time range start {t_min} is after end {t_max}"
                )
            times = (float(t_min), float(t_max))

        total = trace.total_lines
        lines = (_as_line_index(lo, total), _as_line_index(hi, total))
        if lines[0] is not None and lines[1] is not None and lines[0] > lines[1]:
            raise InvalidViewportRequestError(
                f"line range start {lines[0]} is after end {lines[1]}"
            )

        return Viewport(time_range=times, line_range=lines)

    def _build(
        self,
        revision: int,
        trace: NormalizedTrace,
        viewport: Viewport,
        bars: BarSeries,
    ) -> TimelineSnapshot:
        # Order matters: scales are derived from the freshly filtered window
        window = filter_lines(trace.structure, viewport.line_range)
        dims = Dimensions.compute(self._settings, window.visible_lines)
        scales = derive_scales(
            viewport.time_range, window, dims.plot_width, dims.plot_height
        )

        overview = None
        if trace.t_min is not None and trace.t_max is not None:
            overview = LinearScale((trace.t_min, trace.t_max), (0.0, dims.plot_width))

        return TimelineSnapshot(
            revision=revision,
            trace=trace,
            viewport=viewport,
            window=window,
            dimensions=dims,
            scales=scales,
            overview=overview,
            line_labels=line_axis_labels(
                scales.lines.domain,
                dims.plot_height,
                self._settings.right_margin,
                self._settings.min_label_font,
            ),
            group_labels=group_axis_labels(
                scales.groups.domain, scales.groups.range, self._settings.left_margin
            ),
            bars=bars,
        )

    def _commit(
        self, trace: NormalizedTrace, viewport: Viewport, bars: BarSeries
    ) -> None:
        self._snapshot = self._build(
            revision=self._snapshot.revision + 1,
            trace=trace,
            viewport=viewport,
            bars=bars,
        )
        self._publish(self._snapshot)

    def _publish(self, snapshot: TimelineSnapshot) -> None:
        for listener in list(self._listeners):
            listener(snapshot)
