"""
Timeline color palette.

One fixed color per task category, shared by the timeline segments, the
legend and the bar chart layers.
"""

from ...core.models import Category

CATEGORY_COLORS = {
    Category.STATIC: "#4682b4",  # Steel blue
    Category.SUBFLOW: "#ff7f0e",  # Orange
    Category.CUDAFLOW: "#6A0DAD",  # Purple
    Category.CONDITION: "#41A317",  # Green
    Category.MODULE: "#0000FF",  # Blue
}
