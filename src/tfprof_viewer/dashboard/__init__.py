"""
tfprof viewer dashboard - PyQt6 bridge between the timeline widgets and
the engine.

- TimelineController: queues zoom, reset and bar filter requests
- TimelineSignals: snapshot and error notifications
- CATEGORY_COLORS: category palette shared by timeline and bar chart
"""

from .controller import TimelineController
from .signals import TimelineSignals
from .styles import CATEGORY_COLORS

__all__ = ["TimelineController", "TimelineSignals", "CATEGORY_COLORS"]
