"""
Tests for core data models: categories, line keys and viewports.
"""

import sys

import pytest

from tfprof_viewer.core.models import (
    CATEGORIES,
    LINE_KEY_SEPARATOR,
    AggregateRow,
    Category,
    ExecutorLines,
    NormalizedTrace,
    Segment,
    Viewport,
    line_key,
    split_line_key,
)


class TestCategory:
    """Tests for the Category enumeration."""

    def test_fixed_order(self):
        """Categories keep the legend/stacking order."""
        assert [c.value for c in CATEGORIES] == [
            "static",
            "subflow",
            "cudaflow",
            "condition",
            "module",
        ]

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("static", Category.STATIC),
            ("module", Category.MODULE),
            (Category.SUBFLOW, Category.SUBFLOW),
            ("Static", None),
            ("gpu", None),
            (None, None),
            (3, None),
        ],
    )
    def test_parse(self, value, expected):
        assert Category.parse(value) is expected


class TestLineKey:
    """Tests for composite line keys."""

    def test_line_key_joins_with_separator(self):
        assert line_key("exec", "w1") == f"exec{LINE_KEY_SEPARATOR}w1"

    def test_split_line_key(self):
        assert split_line_key(line_key("a", "b")) == ("a", "b")

    def test_distinct_pairs_give_distinct_keys(self):
        """Concatenation-like collisions are avoided by the separator."""
        assert line_key("1", "23") != line_key("12", "3")


class TestSegment:
    """Tests for the Segment value object."""

    def test_derived_properties(self):
        segment = Segment("e", "w", 2.0, 7.5, Category.CUDAFLOW, "k")
        assert segment.span == (2.0, 7.5)
        assert segment.duration == 5.5
        assert segment.line_key == line_key("e", "w")
        assert segment.identity == ("e", "w", "cudaflow", 2.0)

    def test_is_immutable(self):
        segment = Segment("e", "w", 0, 1, Category.STATIC, "t")
        with pytest.raises(AttributeError):
            segment.start = 5  # type: ignore[misc]

    def test_to_dict_uses_raw_shape(self):
        segment = Segment("e", "w", 0, 1, Category.MODULE, "t")
        assert segment.to_dict() == {
            "executor": "e",
            "worker": "w",
            "span": [0, 1],
            "type": "module",
            "name": "t",
        }


class TestStructure:
    """Tests for ExecutorLines, AggregateRow and NormalizedTrace."""

    def test_executor_lines_keys(self):
        entry = ExecutorLines("e", ("a", "b"))
        assert entry.line_count == 2
        assert entry.keys() == [line_key("e", "a"), line_key("e", "b")]

    def test_aggregate_row_missing_category_is_zero(self):
        row = AggregateRow("e", "w", tasks=1, durations={Category.STATIC: 4.0}, busy=4.0)
        assert row.get(Category.STATIC) == 4.0
        assert row.get(Category.MODULE) == 0.0

    def test_aggregate_row_to_dict_lists_every_category(self):
        row = AggregateRow("e", "w", tasks=2, durations={Category.SUBFLOW: 1.5}, busy=1.5)
        data = row.to_dict()
        assert data["tasks"] == 2
        assert data["busy"] == 1.5
        assert [k for k in data if k in {c.value for c in CATEGORIES}] == [
            c.value for c in CATEGORIES
        ]

    def test_empty_trace(self):
        trace = NormalizedTrace()
        assert trace.is_empty
        assert trace.total_lines == 0
        assert trace.time_bounds == (None, None)


# =============================================================================
# Viewport equality
# =============================================================================


class TestViewportMatches:
    """Tests for Viewport.matches (exact or epsilon-close endpoints)."""

    EPS = sys.float_info.epsilon

    def test_identical(self):
        a = Viewport((0.0, 10.0), (None, 3))
        assert a.matches(Viewport((0.0, 10.0), (None, 3)), self.EPS)

    def test_within_epsilon(self):
        a = Viewport((0.0, 1.0), (0, 4))
        b = Viewport((self.EPS / 2, 1.0), (0, 4))
        assert a.matches(b, self.EPS)

    def test_beyond_epsilon(self):
        a = Viewport((0.0, 1.0), (0, 4))
        b = Viewport((0.0, 1.001), (0, 4))
        assert not a.matches(b, self.EPS)

    def test_exact_equality_without_tolerance(self):
        """Large equal values match even though abs diff < eps is not needed."""
        a = Viewport((1e300, 1e301), (None, None))
        assert a.matches(Viewport((1e300, 1e301), (None, None)), 0.0)

    @pytest.mark.parametrize(
        "other",
        [
            Viewport((0.0, 1.0), (0, None)),
            Viewport((0.0, 1.0), (None, 2)),
            Viewport((0.0, 1.0), (1, 2)),
        ],
    )
    def test_none_only_matches_none(self, other):
        assert not Viewport((0.0, 1.0), (None, None)).matches(other, 1e9)

    def test_lines_unbounded(self):
        assert Viewport().lines_unbounded
        assert not Viewport(line_range=(0, None)).lines_unbounded
