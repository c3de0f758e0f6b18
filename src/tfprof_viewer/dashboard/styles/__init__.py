"""
Dashboard styles - category palette for the timeline and bar chart.
"""

from .colors import CATEGORY_COLORS

__all__ = ["CATEGORY_COLORS"]
