"""Tests for the per-frame scene model."""

import math

import pytest

from refgraph.core.scene import (
    NODE_ALPHA,
    NODE_ALPHA_DIMMED,
    Cursor,
    EdgeTier,
    SceneSettings,
    build_frame,
    year_radius,
)


def _frame(env, frame_count=0):
    return build_frame(env.graph, env.machine, env.viewport, frame_count, SceneSettings())


def _node(frame, node_id):
    return next(n for n in frame.nodes if n.node_id == node_id)


class TestYearRadius:
    def test_interpolates_between_bounds(self):
        s = SceneSettings()
        assert year_radius(2000, 2000, 2020, s) == 8.0
        assert year_radius(2010, 2000, 2020, s) == 10.0
        assert year_radius(2020, 2000, 2020, s) == 12.0

    def test_single_year_uses_midpoint(self):
        assert year_radius(2000, 2000, 2000, SceneSettings()) == 10.0


class TestEdges:
    def test_neutral_when_nothing_focused(self, env):
        frame = _frame(env)
        assert [e.tier for e in frame.edges] == [EdgeTier.NEUTRAL]
        assert frame.edges[0].alpha == 60

    def test_focus_on_isolated_node_dims_everything(self, env):
        env.bus.hover_start("c")
        frame = _frame(env)
        assert [e.tier for e in frame.edges] == [EdgeTier.DIMMED]
        assert _node(frame, "a").alpha == NODE_ALPHA_DIMMED
        assert _node(frame, "b").alpha == NODE_ALPHA_DIMMED
        assert _node(frame, "c").alpha == NODE_ALPHA

    def test_focus_emphasises_touching_edges_and_keeps_neighbours(self, env):
        env.machine.pointer_move(100, 100)
        frame = _frame(env)
        assert frame.edges[0].tier is EdgeTier.EMPHASIZED
        assert frame.edges[0].alpha == 180
        assert _node(frame, "b").alpha == NODE_ALPHA
        assert _node(frame, "c").alpha == NODE_ALPHA_DIMMED

    def test_stroke_scales_with_zoom(self, env):
        env.viewport.scale = 2.0
        assert _frame(env).stroke_width == 0.5


class TestNodes:
    def test_breathing_only_when_idle(self, env):
        idle = _frame(env, frame_count=0)
        assert _node(idle, "a").radius == pytest.approx(8.0)
        assert _node(idle, "b").radius == pytest.approx(10.0 + math.sin(1) * 2)

        env.bus.hover_start("c")
        busy = _frame(env, frame_count=0)
        assert _node(busy, "b").radius == pytest.approx(10.0)
        assert _node(busy, "c").radius == pytest.approx(15.0)

    def test_selection_stops_breathing(self, env):
        env.machine.select("a")
        frame = _frame(env, frame_count=7)
        assert _node(frame, "a").radius == 15.0
        assert _node(frame, "a").selected
        assert _node(frame, "b").radius == pytest.approx(10.0)

    def test_colors_follow_category(self, env):
        frame = _frame(env)
        assert [n.color for n in frame.nodes] == ["#ffffff", "#bbbbbb", "#666666"]


class TestLabelsAndTooltip:
    def test_label_under_focused_node(self, env):
        env.bus.hover_start("c")
        frame = _frame(env)
        assert len(frame.labels) == 1
        label = frame.labels[0]
        assert label.text == "Carol '20"
        assert label.x == 300.0
        assert label.y == pytest.approx(200.0 + 15.0 + 15.0)
        assert label.size == 12.0

    def test_label_shrinks_with_zoom(self, env):
        env.viewport.scale = 2.0
        env.machine.select("a")
        label = _frame(env).labels[0]
        assert label.size == 6.0
        assert label.y == pytest.approx(100.0 + 15.0 + 7.5)

    def test_focused_and_selected_both_labelled(self, env):
        env.machine.select("a")
        env.bus.hover_start("b")
        texts = sorted(lb.text for lb in _frame(env).labels)
        assert texts == ["Ann '00", "Bob '10"]

    def test_tooltip_only_for_pointer_hover(self, env):
        env.bus.hover_start("b")
        assert _frame(env).tooltip is None

        env.machine.pointer_move(200, 100)
        tip = _frame(env).tooltip
        assert tip is not None
        assert tip.title == "Beta paper"
        assert tip.meta == "2010 // Bob Ray"
        assert tip.summary == "Second."
        assert (tip.screen_x, tip.screen_y) == (200.0, 100.0)

    def test_tooltip_hidden_while_panning(self, env):
        env.machine.pointer_move(200, 100)
        env.machine.pointer_down(390, 20)
        assert _frame(env).tooltip is None


class TestCursor:
    def test_cursor_states(self, env):
        m = env.machine
        assert _frame(env).cursor is Cursor.DEFAULT
        m.pointer_move(200, 100)
        assert _frame(env).cursor is Cursor.POINTER
        m.pointer_move(390, 20)
        m.pointer_down(390, 20)
        assert _frame(env).cursor is Cursor.GRABBING
        m.pointer_up(390, 20)
        assert _frame(env).cursor is Cursor.DEFAULT

    def test_list_hover_keeps_default_cursor(self, env):
        env.bus.hover_start("a")
        assert _frame(env).cursor is Cursor.DEFAULT

    def test_empty_frame(self):
        from refgraph.core.session import GraphSession

        session = GraphSession([], 400, 300)
        frame = session.frame()
        assert frame.empty
        assert frame.tooltip is None
