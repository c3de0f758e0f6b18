"""
Tests for the line-window filter.
"""

import pytest

from tfprof_viewer.core.models import ExecutorLines, line_key
from tfprof_viewer.core.normalizer import normalize_trace
from tfprof_viewer.core.window import count_lines, filter_lines, line_keys


def _as_dicts(window):
    return [entry.to_dict() for entry in window.entries]


class TestFilterLines:
    """Tests for filter_lines on the e1 [w0..w2], e2 [w3, w4] structure."""

    def test_window_across_executors(self, window_structure):
        """Range [1, 3] keeps e1's tail and e2's head."""
        window = filter_lines(window_structure, (1, 3))
        assert _as_dicts(window) == [
            {"executor": "e1", "lines": ["w1", "w2"]},
            {"executor": "e2", "lines": ["w3"]},
        ]
        assert window.visible_lines == 3

    def test_unbounded_returns_full_index(self, window_structure):
        window = filter_lines(window_structure, (None, None))
        assert window.entries == tuple(window_structure)
        assert window.visible_lines == 5

    def test_skips_whole_executor_before_window(self, window_structure):
        window = filter_lines(window_structure, (3, 4))
        assert _as_dicts(window) == [{"executor": "e2", "lines": ["w3", "w4"]}]

    def test_budget_ending_at_boundary_emits_no_empty_entry(self, window_structure):
        window = filter_lines(window_structure, (0, 2))
        assert _as_dicts(window) == [{"executor": "e1", "lines": ["w0", "w1", "w2"]}]

    def test_half_open_ranges(self, window_structure):
        assert filter_lines(window_structure, (None, 0)).keys() == [line_key("e1", "w0")]
        assert filter_lines(window_structure, (4, None)).keys() == [line_key("e2", "w4")]

    def test_negative_lo_clamps_to_zero(self, window_structure):
        window = filter_lines(window_structure, (-3, 1))
        assert window.keys() == [line_key("e1", "w0"), line_key("e1", "w1")]

    def test_range_past_the_end_is_empty(self, window_structure):
        window = filter_lines(window_structure, (7, 9))
        assert window.entries == ()
        assert window.visible_lines == 0

    def test_executors_without_workers_never_appear_in_window(self):
        structure = (
            ExecutorLines("empty"),
            ExecutorLines("a", ("x", "y")),
            ExecutorLines("also-empty"),
            ExecutorLines("b", ("z",)),
        )
        window = filter_lines(structure, (0, 2))
        assert window.executors == ["a", "b"]
        assert window.visible_lines == 3

    def test_fast_path_keeps_executors_without_workers(self):
        structure = (ExecutorLines("empty"), ExecutorLines("a", ("x",)))
        assert filter_lines(structure, (None, None)).executors == ["empty", "a"]

    def test_empty_structure(self):
        window = filter_lines((), (0, 3))
        assert window.entries == ()
        assert window.visible_lines == 0


class TestVisibleLineCount:
    """visible_lines == max(0, min(hi - lo + 1, total - lo)) for every range."""

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_count_matches_formula(self, trace_builder, seed):
        raw = trace_builder().random(executors=6, max_workers=5, seed=seed).build()
        structure = normalize_trace(raw).structure
        total = count_lines(structure)

        candidates = [None, -2, 0, 1, total // 2, total - 1, total, total + 3]
        for lo in candidates:
            for hi in candidates:
                window = filter_lines(structure, (lo, hi))
                start = 0 if lo is None else max(0, lo)
                count = (total if hi is None else hi + 1) - start
                expected = max(0, min(count, total - start))

                assert window.visible_lines == expected, (lo, hi)
                assert sum(e.line_count for e in window.entries) == expected
                if lo is not None or hi is not None:
                    assert all(e.line_count > 0 for e in window.entries)

    def test_window_is_contiguous_slice_of_all_keys(self, window_structure):
        keys = line_keys(window_structure)
        for lo in range(5):
            for hi in range(lo, 5):
                assert filter_lines(window_structure, (lo, hi)).keys() == keys[lo : hi + 1]


class TestHelpers:
    """Tests for count_lines and line_keys."""

    def test_count_lines(self, window_structure):
        assert count_lines(window_structure) == 5
        assert count_lines(()) == 0

    def test_line_keys_order(self, window_structure):
        assert line_keys(window_structure)[:2] == [
            line_key("e1", "w0"),
            line_key("e1", "w1"),
        ]
