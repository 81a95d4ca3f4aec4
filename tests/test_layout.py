"""Tests for the force layout engine."""

import math

from refgraph import config
from refgraph.catalog import ReferenceRecord, load_catalog
from refgraph.core.graph_data import build_graph
from refgraph.core.layout import FALLBACK_SIZE, ForceLayout, LayoutSettings


def _settle(layout, limit=2000):
    for _ in range(limit):
        if not layout.step():
            break


def _positions(graph):
    return [(n.x, n.y) for n in graph.nodes]


class TestLayoutEnergy:
    def test_initial_placement_is_deterministic(self, abc_records):
        g1 = build_graph(abc_records)
        g2 = build_graph(abc_records)
        l1 = ForceLayout(g1, 400, 300, LayoutSettings())
        l2 = ForceLayout(g2, 400, 300, LayoutSettings())
        l1.warm_up()
        l2.warm_up()
        assert _positions(g1) == _positions(g2)

    def test_warm_up_decays_alpha(self, abc_records):
        layout = ForceLayout(build_graph(abc_records), 400, 300, LayoutSettings())
        layout.warm_up(50)
        assert layout.alpha < 1.0
        assert layout.steps == 50

    def test_comes_to_rest(self, abc_records):
        layout = ForceLayout(build_graph(abc_records), 400, 300, LayoutSettings())
        _settle(layout)
        assert not layout.running
        assert layout.alpha < layout.settings.alpha_min
        steps = layout.steps
        assert layout.step() is False
        assert layout.steps == steps

    def test_reheat_restarts(self, abc_records):
        layout = ForceLayout(build_graph(abc_records), 400, 300, LayoutSettings())
        _settle(layout)
        layout.reheat(0.3)
        assert layout.running
        assert layout.alpha == 0.3


class TestPinning:
    def test_pinned_node_follows_pin(self, abc_records):
        graph = build_graph(abc_records)
        layout = ForceLayout(graph, 400, 300, LayoutSettings())
        _settle(layout)
        layout.pin(0, 50.0, 60.0)
        assert layout.running
        assert layout.alpha_target == 0.3
        layout.step()
        assert (graph.nodes[0].x, graph.nodes[0].y) == (50.0, 60.0)
        assert graph.nodes[0].pinned

    def test_release_clears_pin_and_target(self, abc_records):
        graph = build_graph(abc_records)
        layout = ForceLayout(graph, 400, 300, LayoutSettings())
        layout.pin(1, 10.0, 10.0)
        layout.release(1)
        assert graph.nodes[1].fx is None
        assert graph.nodes[1].fy is None
        assert not graph.nodes[1].pinned
        assert layout.alpha_target == 0.0

    def test_energy_holds_while_pinned(self, abc_records):
        graph = build_graph(abc_records)
        layout = ForceLayout(graph, 400, 300, LayoutSettings())
        layout.pin(0, 0.0, 0.0)
        for _ in range(1000):
            layout.step()
        assert layout.running
        assert abs(layout.alpha - 0.3) < 0.01


class TestGeometry:
    def test_centroid_follows_resize(self, abc_records):
        graph = build_graph(abc_records)
        layout = ForceLayout(graph, 400, 300, LayoutSettings())
        _settle(layout)
        layout.resize(800, 600)
        assert layout.running
        assert layout.alpha == 1.0
        assert (layout.center_x, layout.center_y) == (400.0, 300.0)
        _settle(layout)
        cx = sum(n.x for n in graph.nodes) / len(graph.nodes)
        cy = sum(n.y for n in graph.nodes) / len(graph.nodes)
        assert abs(cx - 400.0) < 2.0
        assert abs(cy - 300.0) < 2.0

    def test_recenter_does_not_restart(self, abc_records):
        layout = ForceLayout(build_graph(abc_records), 400, 300, LayoutSettings())
        _settle(layout)
        layout.recenter(1000, 500)
        assert (layout.center_x, layout.center_y) == (500.0, 250.0)
        assert not layout.running

    def test_zero_size_uses_fallback_center(self, abc_records):
        layout = ForceLayout(build_graph(abc_records), 0, 0, LayoutSettings())
        assert (layout.center_x, layout.center_y) == (FALLBACK_SIZE[0] / 2, FALLBACK_SIZE[1] / 2)

    def test_settled_nodes_do_not_overlap(self):
        graph = build_graph(load_catalog(config.DEFAULT_CATALOG_PATH))
        layout = ForceLayout(graph, 800, 600, LayoutSettings())
        _settle(layout)
        nodes = graph.nodes
        closest = min(
            math.hypot(a.x - b.x, a.y - b.y)
            for i, a in enumerate(nodes)
            for b in nodes[i + 1:]
        )
        assert closest > layout.settings.collide_radius

    def test_more_shared_tags_sit_closer(self):
        def pair_distance(shared):
            tags = frozenset(f"t{i}" for i in range(shared))
            graph = build_graph(
                [
                    ReferenceRecord(id="a", year=2000, tags=tags),
                    ReferenceRecord(id="b", year=2001, tags=tags),
                ]
            )
            layout = ForceLayout(graph, 400, 300, LayoutSettings())
            _settle(layout)
            a, b = graph.nodes
            return math.hypot(a.x - b.x, a.y - b.y)

        assert pair_distance(4) < pair_distance(1)

    def test_empty_graph_steps(self):
        layout = ForceLayout(build_graph([]), 400, 300, LayoutSettings())
        layout.warm_up()
        _settle(layout)
        assert not layout.running
