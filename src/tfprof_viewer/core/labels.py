"""
Label compression and axis label layout.

Worker and executor names can be long; axis labels are squeezed into the
margins by keeping the head and tail of the name around an ellipsis.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from .models import split_line_key

ELLIPSIS = "..."

# Labels never grow past this size, however much room a line has
MAX_FONT_SIZE = 14.0

# Fraction of a slot's height a label may occupy
FONT_VERTICAL_MARGIN = 0.6


def reduce_label(label: str, max_chars: int) -> str:
    """Shorten label to roughly max_chars, keeping its head and tail.

    Args:
        label: Text to shorten.
        max_chars: Character budget.

    Returns:
        label itself if it fits; otherwise the first ceil(2/3 * max_chars)
        characters, an ellipsis and the last floor(1/3 * max_chars)
        characters. Budgets smaller than the ellipsis return as much of the
        head as the budget allows.
    """
    if len(label) <= max_chars:
        return label
    if max_chars < len(ELLIPSIS):
        return label[: max(0, max_chars)]

    head = math.ceil(max_chars * 2 / 3)
    tail = max_chars // 3
    return label[:head] + ELLIPSIS + label[len(label) - tail :]


@dataclass(frozen=True)
class AxisLabels:
    """Ticks to label and the text drawn for each"""

    tick_values: tuple[str, ...] = ()
    texts: tuple[str, ...] = ()
    font_size: float = 0.0
    max_chars: int = 0


def _chars_for(margin: float, font_size: float) -> int:
    if font_size <= 0:
        return 0
    return math.ceil(margin / (font_size / math.sqrt(2)))


def line_axis_labels(
    keys: Sequence[str],
    plot_height: float,
    margin: float,
    min_font: float = 2.0,
) -> AxisLabels:
    """Pick which worker lines get a label and how large it is drawn.

    When lines are too dense for min_font, only every n-th line is labelled.

    Args:
        keys: Line keys in display order.
        plot_height: Plot area height in pixels.
        margin: Horizontal room for the labels in pixels.
        min_font: Smallest legible font size.
    """
    if not keys or plot_height <= 0:
        return AxisLabels()

    ratio = max(
        1,
        math.ceil(
            len(keys) * min_font / math.sqrt(2) / plot_height / FONT_VERTICAL_MARGIN
        ),
    )
    tick_values = tuple(key for i, key in enumerate(keys) if i % ratio == 0)
    font_size = min(
        MAX_FONT_SIZE,
        plot_height / len(tick_values) * FONT_VERTICAL_MARGIN * math.sqrt(2),
    )
    max_chars = _chars_for(margin, font_size)

    return AxisLabels(
        tick_values=tick_values,
        texts=tuple(
            reduce_label(split_line_key(key)[1], max_chars) for key in tick_values
        ),
        font_size=font_size,
        max_chars=max_chars,
    )


def group_axis_labels(
    executors: Sequence[str], positions: Sequence[float], margin: float
) -> AxisLabels:
    """Size executor labels by the tightest gap between group midpoints."""
    if not executors or not positions:
        return AxisLabels()

    min_height = min(
        position - positions[i - 1] if i > 0 else position * 2
        for i, position in enumerate(positions)
    )
    font_size = min(MAX_FONT_SIZE, min_height * FONT_VERTICAL_MARGIN * math.sqrt(2))
    max_chars = _chars_for(margin, font_size)

    return AxisLabels(
        tick_values=tuple(executors),
        texts=tuple(reduce_label(executor, max_chars) for executor in executors),
        font_size=font_size,
        max_chars=max_chars,
    )
