"""
Scale derivation for the timeline.

Scales are plain value objects: forward and inverse mappings between data
(times, line keys, executor ids) and plot pixels. They carry no reference to
engine state, so deriving them twice from the same window yields equal scales.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .models import TimeRange
from .window import LineWindow

# Tick step thresholds (same as d3-array)
_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def num_xticks(width: float) -> int:
    """Number of time-axis ticks that fit a plot of the given pixel width."""
    return max(2, min(12, _round_half_up(width * 0.012)))


def tick_increment(start: float, stop: float, count: int) -> float:
    """Tick step for [start, stop]; negative values encode 1/step."""
    if count <= 0:
        return 0.0
    step = (stop - start) / count
    if step <= 0 or not math.isfinite(step):
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10**power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        return factor * 10**power
    return -(10 ** -power) / factor


def ticks(start: float, stop: float, count: int) -> list[float]:
    """Round, evenly spaced values covering [start, stop]."""
    if count <= 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    if reverse:
        start, stop = stop, start

    increment = tick_increment(start, stop, count)
    if increment == 0:
        return []
    if increment > 0:
        first = math.ceil(start / increment)
        last = math.floor(stop / increment)
        values = [(first + i) * increment for i in range(last - first + 1)]
    else:
        increment = -increment
        first = math.ceil(start * increment)
        last = math.floor(stop * increment)
        values = [(first + i) / increment for i in range(last - first + 1)]

    return values[::-1] if reverse else values


def invert_ordinal(
    domain: Sequence[str], positions: Sequence[float], value: float
) -> Optional[str]:
    """Map a pixel position back to the nearest ordinal domain key.

    A two-element range over a domain of any other size is treated as the
    extent of evenly spaced points. Otherwise the positions are used as given
    and may be unevenly spaced, but must be ascending. The position is
    located in the interval whose boundaries are the midpoints between
    neighbouring points, and that interval's index is mapped proportionally
    into the domain. Positions past the last boundary clamp to the last key.

    Args:
        domain: Ordinal keys.
        positions: Pixel positions (or [start, stop] extent).
        value: Pixel position to invert.

    Returns:
        The matching domain key, or None for an empty domain.
    """
    n = len(domain)
    if n == 0:
        return None

    points = list(positions)
    if len(points) == 2 and n != 2:
        points = _spread(points[0], points[1], n)
    if not points:
        return domain[-1]

    index = len(points) - 1
    for i in range(len(points) - 1):
        if value <= (points[i] + points[i + 1]) / 2:
            index = i
            break

    return domain[min(n - 1, _round_half_up(index * n / len(points)))]


def _spread(start: float, stop: float, n: int) -> list[float]:
    """n evenly spaced points from start to stop (a lone point sits midway)."""
    if n == 1:
        return [(start + stop) / 2]
    step = (stop - start) / (n - 1)
    return [start + step * i for i in range(n)]


@dataclass(frozen=True)
class LinearScale:
    """Affine map between a numeric domain and a pixel range."""

    domain: tuple[float, float] = (0.0, 1.0)
    range: tuple[float, float] = (0.0, 1.0)
    clamp: bool = False

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = 0.5 if d0 == d1 else (value - d0) / (d1 - d0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return r0 + t * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        t = 0.5 if r0 == r1 else (pixel - r0) / (r1 - r0)
        if self.clamp:
            t = min(1.0, max(0.0, t))
        return d0 + t * (d1 - d0)

    def contains(self, value: float) -> bool:
        lo, hi = sorted(self.domain)
        return lo <= value <= hi

    def ticks(self, count: int = 10) -> list[float]:
        return ticks(self.domain[0], self.domain[1], count)


@dataclass(frozen=True)
class PointScale:
    """Ordinal keys evenly spaced across a pixel extent."""

    domain: tuple[str, ...] = ()
    range: tuple[float, float] = (0.0, 1.0)
    _positions: dict[str, float] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        points = _spread(self.range[0], self.range[1], len(self.domain))
        # First occurrence wins, matching ordinal lookups
        for key, point in zip(reversed(self.domain), reversed(points)):
            self._positions[key] = point

    def __call__(self, key: str) -> Optional[float]:
        """Pixel position of key, or None if it is not in the domain."""
        return self._positions.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._positions

    @property
    def step(self) -> float:
        n = len(self.domain)
        return (self.range[1] - self.range[0]) / (n - 1) if n > 1 else 0.0

    def positions(self) -> list[float]:
        return _spread(self.range[0], self.range[1], len(self.domain))

    def index(self, key: str) -> int:
        return self.domain.index(key)

    def invert(self, pixel: float) -> Optional[str]:
        return invert_ordinal(self.domain, self.range, pixel)


@dataclass(frozen=True)
class OrdinalScale:
    """Explicit key -> position mapping (used for executor groups)."""

    domain: tuple[str, ...] = ()
    range: tuple[float, ...] = ()

    def __call__(self, key: str) -> Optional[float]:
        try:
            return self.range[self.domain.index(key)]
        except (ValueError, IndexError):
            return None

    def invert(self, pixel: float) -> Optional[str]:
        return invert_ordinal(self.domain, self.range, pixel)


@dataclass(frozen=True)
class BandScale:
    """Band scale with equal inner and outer padding, centred in its range."""

    domain: tuple[str, ...] = ()
    range: tuple[float, float] = (0.0, 1.0)
    padding: float = 0.5

    @property
    def step(self) -> float:
        n = len(self.domain)
        r0, r1 = self.range
        return (r1 - r0) / max(1.0, n - self.padding + self.padding * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, key: str) -> Optional[float]:
        try:
            i = self.domain.index(key)
        except ValueError:
            return None
        n = len(self.domain)
        r0, r1 = self.range
        start = r0 + (r1 - r0 - self.step * (n - self.padding)) * 0.5
        return start + self.step * i


@dataclass(frozen=True)
class TimelineScales:
    """Scales positioning timeline content inside the plot area"""

    time: Optional[LinearScale]
    lines: PointScale
    groups: OrdinalScale


def line_extent(line_count: int, plot_height: float) -> tuple[float, float]:
    """Pixel extent of line centres, leaving half a slot at both ends."""
    if line_count <= 0:
        return (0.0, 0.0)
    return (
        plot_height / line_count * 0.5,
        plot_height * (1 - 0.5 / line_count),
    )


def group_positions(window: LineWindow, plot_height: float) -> list[float]:
    """Vertical midpoint of each executor's visible lines."""
    if window.visible_lines <= 0:
        return [0.0 for _ in window.entries]
    positions = []
    seen = 0
    for entry in window.entries:
        positions.append(
            (seen + entry.line_count / 2) / window.visible_lines * plot_height
        )
        seen += entry.line_count
    return positions


def derive_scales(
    time_range: TimeRange,
    window: LineWindow,
    plot_width: float,
    plot_height: float,
) -> TimelineScales:
    """Build time, line and group scales for the current window.

    Args:
        time_range: Current (t_min, t_max); None endpoints yield no time scale.
        window: Visible lines from filter_lines().
        plot_width: Plot area width in pixels.
        plot_height: Plot area height in pixels.

    Returns:
        TimelineScales for the rendering layer.
    """
    t_min, t_max = time_range
    time_scale = None
    if t_min is not None and t_max is not None:
        time_scale = LinearScale((t_min, t_max), (0.0, plot_width), clamp=True)

    keys = tuple(window.keys())
    return TimelineScales(
        time=time_scale,
        lines=PointScale(keys, line_extent(len(keys), plot_height)),
        groups=OrdinalScale(
            tuple(window.executors), tuple(group_positions(window, plot_height))
        ),
    )
