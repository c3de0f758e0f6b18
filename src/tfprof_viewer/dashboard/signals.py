"""
Qt signals published by the timeline controller.

TimelineSignals carries every engine state change to the widgets that draw
the timeline, the overview brush and the bar chart.
"""

from PyQt6.QtCore import QObject, pyqtSignal


class TimelineSignals(QObject):
    """Signals for timeline state changes."""

    snapshot_changed = pyqtSignal(object)  # TimelineSnapshot
    ingest_failed = pyqtSignal(str)  # error message
    request_rejected = pyqtSignal(str)  # error message
