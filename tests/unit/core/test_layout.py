"""
Tests for plot dimensions and content geometry.
"""

import pytest

from tfprof_viewer.core.layout import Dimensions, executor_band, segment_box
from tfprof_viewer.core.models import Category, ExecutorLines, Segment
from tfprof_viewer.core.scales import derive_scales
from tfprof_viewer.core.window import filter_lines
from tfprof_viewer.utils.settings import Settings


@pytest.fixture
def geometry(window_structure):
    """Full window of e1 [w0..w2], e2 [w3, w4] over times [0, 30]."""
    window = filter_lines(window_structure, (None, None))
    dims = Dimensions.compute(Settings(), window.visible_lines)
    scales = derive_scales((0.0, 30.0), window, dims.plot_width, dims.plot_height)
    return scales, dims


class TestDimensions:
    """Tests for Dimensions.compute."""

    def test_compute_from_settings(self):
        dims = Dimensions.compute(Settings(), 5)
        assert dims.plot_width == 1000
        assert dims.plot_height == 100
        assert dims.height == 156
        assert (dims.left, dims.top) == (100, 26)
        assert dims.lane_height == 16.0

    def test_no_lines(self):
        dims = Dimensions.compute(Settings(), 0)
        assert dims.plot_height == 0
        assert dims.lane_height == 0.0

    def test_clamp_point(self):
        dims = Dimensions.compute(Settings(), 5)
        assert dims.clamp_point(-5.0, 500.0) == (0.0, 100.0)
        assert dims.clamp_point(40.0, 60.0) == (40.0, 60.0)


class TestSegmentBox:
    """Tests for segment_box."""

    def test_box_position(self, geometry):
        scales, dims = geometry
        box = segment_box(Segment("e1", "w0", 0, 15, Category.STATIC, "t"), scales, dims)
        assert box.x == 0.0
        assert box.width == pytest.approx(500.0)
        assert box.y == pytest.approx(2.0)
        assert box.height == pytest.approx(16.0)

    def test_zero_length_keeps_minimum_width(self, geometry):
        scales, dims = geometry
        box = segment_box(Segment("e2", "w4", 9, 9, Category.MODULE, "t"), scales, dims)
        assert box.width == 1.0

    def test_hidden_line(self, geometry):
        scales, dims = geometry
        segment = Segment("e9", "w0", 0, 1, Category.STATIC, "t")
        assert segment_box(segment, scales, dims) is None


class TestExecutorBand:
    """Tests for executor_band."""

    def test_bands_tile_the_plot(self, geometry, window_structure):
        scales, dims = geometry
        first = executor_band(window_structure[0], scales, dims)
        second = executor_band(window_structure[1], scales, dims)
        assert (first.y, first.height) == pytest.approx((0.0, 60.0))
        assert (second.y, second.height) == pytest.approx((60.0, 40.0))
        assert first.width == dims.plot_width

    def test_unknown_executor(self, geometry):
        scales, dims = geometry
        assert executor_band(ExecutorLines("nope", ("x",)), scales, dims) is None
