"""
Timeline controller - entry point for the widgets driving the engine.

The detail view (drag-zoom), the overview brush and the reset button each
react to the others' updates by sending a new request. Requests are queued
and applied one at a time: a request sent while a snapshot is being published
waits until that publication has finished. A cycle of echoed requests
therefore unrolls into a flat loop, which ends as soon as the engine drops a
request matching the current viewport.
"""

from collections import deque
from typing import Any, Callable, Optional, Sequence, Union

from ..core.engine import TimelineEngine, TimelineSnapshot
from ..core.errors import InvalidViewportRequestError, MalformedTraceError
from ..core.models import CATEGORIES, Category
from ..utils.logger import debug, error
from ..utils.settings import Settings
from .signals import TimelineSignals
from .styles import CATEGORY_COLORS


class TimelineController:
    """Serializes requests from linked controls into the engine.

    Emits TimelineSignals.snapshot_changed for every published snapshot.
    Rejected viewport requests are reported through request_rejected instead
    of being raised, since they usually arrive from signal handlers.
    """

    def __init__(
        self,
        engine: Optional[TimelineEngine] = None,
        settings: Optional[Settings] = None,
    ):
        self._engine = engine or TimelineEngine(settings)
        self.signals = TimelineSignals()
        self._pending: deque[Callable[[], None]] = deque()
        self._draining = False
        self._engine.add_listener(self._on_snapshot)

    @property
    def engine(self) -> TimelineEngine:
        return self._engine

    @property
    def snapshot(self) -> TimelineSnapshot:
        return self._engine.snapshot

    @property
    def pending_requests(self) -> int:
        return len(self._pending)

    def legend(self) -> list[tuple[Category, str]]:
        """Categories in display order with their colors."""
        return [(category, CATEGORY_COLORS[category]) for category in CATEGORIES]

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def load_trace(self, raw: Any) -> None:
        """Ingest a new trace.

        Failures are emitted through ingest_failed. When the ingestion runs
        immediately (not queued behind a publication) the error is also
        raised to the caller.

        Raises:
            MalformedTraceError: If the trace is rejected.
        """
        failures: list[MalformedTraceError] = []

        def ingest() -> None:
            try:
                self._engine.ingest(raw)
            except MalformedTraceError as e:
                self.signals.ingest_failed.emit(str(e))
                failures.append(e)

        self._submit(ingest)
        if failures:
            raise failures[0]

    def request_zoom(self, time_range: Sequence, line_range: Sequence) -> None:
        self._submit(lambda: self._engine.set_viewport(time_range, line_range))

    def request_reset(self) -> None:
        self._submit(self._engine.reset_viewport)

    def request_bar_filter(
        self,
        executor: Optional[str] = None,
        category: Union[Category, str, None] = None,
    ) -> None:
        self._submit(lambda: self._engine.filter_bar(executor, category))

    def drag_released(
        self, start: tuple[float, float], end: tuple[float, float]
    ) -> None:
        """Zoom to the rectangle dragged on the plot (plot pixel coordinates)."""

        def apply() -> None:
            request = self._engine.zoom_request_from_drag(start, end)
            if request is None:
                debug("Ignored drag without extent")
                return
            self._engine.set_viewport(*request)

        self._submit(apply)

    def brush_released(self, selection: Optional[tuple[float, float]]) -> None:
        """Zoom to the overview brush selection (pixels, None when cleared)."""

        def apply() -> None:
            request = self._engine.zoom_request_from_brush(selection)
            if request is not None:
                self._engine.set_viewport(*request)

        self._submit(apply)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _submit(self, action: Callable[[], None]) -> None:
        self._pending.append(action)
        if self._draining:
            debug("Queued request behind running update (%d pending)", len(self._pending))
            return

        self._draining = True
        try:
            while self._pending:
                self._run(self._pending.popleft())
        except Exception:
            # Queued requests were issued against the failed update
            if self._pending:
                error("Dropping %d queued requests after failed update", len(self._pending))
                self._pending.clear()
            raise
        finally:
            self._draining = False

    def _run(self, action: Callable[[], None]) -> None:
        try:
            action()
        except InvalidViewportRequestError as e:
            self.signals.request_rejected.emit(str(e))

    def _on_snapshot(self, snapshot: TimelineSnapshot) -> None:
        self.signals.snapshot_changed.emit(snapshot)
