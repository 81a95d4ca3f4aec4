"""Tests for the pan/zoom viewport."""

import pytest

from refgraph.core.viewport import Viewport, clamp


@pytest.fixture()
def vp():
    return Viewport(400, 300, min_scale=0.5, max_scale=3.0, sensitivity=0.001)


class TestTransform:
    def test_identity_by_default(self, vp):
        assert vp.screen_to_world(120, 80) == (120, 80)
        assert vp.world_to_screen(120, 80) == (120, 80)

    def test_round_trip_after_pan_and_zoom(self, vp):
        vp.offset_x, vp.offset_y, vp.scale = 35.0, -12.0, 1.7
        wx, wy = vp.screen_to_world(210, 95)
        sx, sy = vp.world_to_screen(wx, wy)
        assert sx == pytest.approx(210)
        assert sy == pytest.approx(95)

    def test_contains(self, vp):
        assert vp.contains(0, 0)
        assert vp.contains(400, 300)
        assert not vp.contains(-1, 10)
        assert not vp.contains(10, 301)


class TestZoom:
    @pytest.mark.parametrize(
        "sx,sy,delta",
        [(200, 150, -100), (10, 290, 250), (399, 1, -3000), (57, 133, 3000)],
    )
    def test_point_under_cursor_stays_put(self, vp, sx, sy, delta):
        vp.offset_x, vp.offset_y = 20.0, -40.0
        before = vp.screen_to_world(sx, sy)
        assert vp.zoom_at(sx, sy, delta)
        after = vp.screen_to_world(sx, sy)
        assert after[0] == pytest.approx(before[0])
        assert after[1] == pytest.approx(before[1])

    def test_scale_is_clamped(self, vp):
        for _ in range(50):
            vp.zoom_at(200, 150, -500)
            assert 0.5 <= vp.scale <= 3.0
        assert vp.scale == 3.0
        for _ in range(50):
            vp.zoom_at(200, 150, 500)
            assert 0.5 <= vp.scale <= 3.0
        assert vp.scale == 0.5

    def test_negative_delta_zooms_in(self, vp):
        vp.zoom_at(200, 150, -100)
        assert vp.scale == pytest.approx(1.1)

    def test_outside_bounds_is_ignored(self, vp):
        assert vp.zoom_at(-5, 50, -100) is False
        assert (vp.offset_x, vp.offset_y, vp.scale) == (0.0, 0.0, 1.0)

    def test_reset(self, vp):
        vp.zoom_at(100, 100, -800)
        vp.begin_pan(0, 0)
        vp.reset()
        assert (vp.offset_x, vp.offset_y, vp.scale) == (0.0, 0.0, 1.0)
        assert not vp.panning


class TestPan:
    def test_pan_moves_offset_by_pointer_delta(self, vp):
        assert vp.begin_pan(10, 10) == (0.0, 0.0)
        vp.pan_to(30, 50)
        assert (vp.offset_x, vp.offset_y) == (20, 40)
        vp.pan_to(0, 0)
        assert (vp.offset_x, vp.offset_y) == (-10, -10)
        vp.end_pan()
        vp.pan_to(100, 100)
        assert (vp.offset_x, vp.offset_y) == (-10, -10)

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2
