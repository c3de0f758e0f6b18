"""CLI entry point for inspecting tfprof traces.

Usage:
    python -m tfprof_viewer <command> [options] <trace>

Commands:
    summary <trace>              - Bounds, visible window and bar series
    segments <trace>             - Visible segments and their plot boxes

Options:
    --lines LO:HI                - Line window (either side may be empty)
    --time T0:T1                 - Time window
    --executor E                 - Restrict the bar chart to one executor
    --category C                 - Restrict the bar chart to one category
    --limit N                    - Maximum segments to list
    --json                       - Output as JSON
"""

import argparse
import json
import sys
from typing import Callable, Optional

from .core import TimelineEngine, TraceViewerError, load_trace
from .utils.logger import error, setup_logging


def _parse_range(text: str, convert: Callable[[str], float]) -> tuple:
    parts = text.split(":")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"Invalid range: {text}. Expected LO:HI")
    try:
        return tuple(convert(part) if part.strip() else None for part in parts)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid range value: {e}") from e


def parse_line_range(text: str) -> tuple:
    """Parse LO:HI line indices, empty sides meaning unbounded."""
    return _parse_range(text, int)


def parse_time_range(text: str) -> tuple:
    """Parse T0:T1 times."""
    return _parse_range(text, float)


def output_result(result, as_json: bool = False):
    """Output result to stdout."""
    if as_json:
        print(json.dumps(result, indent=2))
    else:
        print(result)


def _load_engine(args) -> TimelineEngine:
    engine = TimelineEngine()
    trace = engine.ingest(load_trace(args.trace))
    if args.lines is not None or args.time is not None:
        time_range = args.time if args.time is not None else trace.time_bounds
        line_range = args.lines if args.lines is not None else (None, None)
        engine.set_viewport(time_range, line_range)
    return engine


def _format_summary(summary: dict) -> str:
    lines = [
        f"Trace: {summary['executors']} executors, {summary['total_lines']} lines, "
        f"{summary['segments']} segments",
        f"Bounds: {summary['bounds'][0]} .. {summary['bounds'][1]}",
        f"Viewport: time={summary['viewport']['time_range']} "
        f"lines={summary['viewport']['line_range']}",
        f"Visible lines: {summary['visible_lines']}",
    ]
    for entry in summary["window"]:
        lines.append(f"  {entry['executor']}: {', '.join(entry['lines'])}")

    bars = summary["bars"]
    lines.append(
        f"Bars (executor={bars['executor']}, category={bars['category']}): "
        f"max={bars['max_value']}"
    )
    for bar in bars["bars"]:
        values = ", ".join(
            f"{key}={top - bottom:g}"
            for key, (bottom, top) in zip(bars["keys"], bar["segments"])
        )
        lines.append(f"  {bar['executor']}/{bar['worker']}: {values}")
    return "\n".join(lines)


def cmd_summary(args):
    """Handle summary command."""
    engine = _load_engine(args)
    engine.filter_bar(args.executor, args.category)
    snapshot = engine.snapshot

    summary = {
        "executors": len(snapshot.trace.structure),
        "total_lines": snapshot.total_lines,
        "segments": len(snapshot.trace.segments),
        "bounds": list(snapshot.time_bounds),
        "viewport": snapshot.viewport.to_dict(),
        "visible_lines": snapshot.visible_lines,
        "window": [entry.to_dict() for entry in snapshot.window.entries],
        "time_ticks": snapshot.time_ticks,
        "bars": snapshot.bars.to_dict(),
    }
    output_result(summary if args.json else _format_summary(summary), args.json)


def cmd_segments(args):
    """Handle segments command."""
    engine = _load_engine(args)
    boxes = engine.segment_boxes(args.limit)

    if args.json:
        output_result(
            [
                {
                    **segment.to_dict(),
                    "box": [box.x, box.y, box.width, box.height],
                }
                for segment, box in boxes
            ],
            True,
        )
        return

    rows = []
    for segment, box in boxes:
        rows.append(
            f"{segment.executor}/{segment.worker} {segment.category.value:<9} "
            f"[{segment.start:g}, {segment.end:g}] {segment.name} "
            f"@ x={box.x:.1f} y={box.y:.1f} w={box.width:.1f}"
        )
    output_result("\n".join(rows) if rows else "No visible segments")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfprof-viewer",
        description="Inspect tfprof execution traces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_window_options(subparser):
        subparser.add_argument("trace", help="tfprof JSON trace file")
        subparser.add_argument("--json", action="store_true", help="Output as JSON")
        subparser.add_argument(
            "--lines", type=parse_line_range, help="Line window as LO:HI"
        )
        subparser.add_argument(
            "--time", type=parse_time_range, help="Time window as T0:T1"
        )

    summary_parser = subparsers.add_parser("summary", help="Summarize a trace")
    add_window_options(summary_parser)
    summary_parser.add_argument("--executor", help="Bar chart executor filter")
    summary_parser.add_argument("--category", help="Bar chart category filter")
    summary_parser.set_defaults(func=cmd_summary)

    segments_parser = subparsers.add_parser(
        "segments", help="List visible segments"
    )
    add_window_options(segments_parser)
    segments_parser.add_argument(
        "--limit", type=int, default=None, help="Maximum segments to list"
    )
    segments_parser.set_defaults(func=cmd_segments)

    return parser


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        args.func(args)
    except TraceViewerError as e:
        error("Command %s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError as e:
        print(f"File not found: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
