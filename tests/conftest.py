"""Shared fixtures for refgraph tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from refgraph import config
from refgraph.catalog import ReferenceRecord
from refgraph.core.bus import GraphBus
from refgraph.core.graph_data import build_graph
from refgraph.core.interaction import InteractionMachine, InteractionSettings
from refgraph.core.layout import ForceLayout, LayoutSettings
from refgraph.core.viewport import Viewport


def rec(rid, tags, year=2000, **kw):
    return ReferenceRecord(id=rid, year=year, tags=frozenset(tags), **kw)


@pytest.fixture()
def abc_records():
    """The a/b/c catalog: a and b share one tag, c overlaps nothing."""
    return [
        rec("a", ["x", "y"], year=2000, title="Alpha paper", authors="Ann Lee", category="haptic-nav",
            url="https://example.org/a", summary="First."),
        rec("b", ["y", "z"], year=2010, title="Beta paper", authors="Bob Ray", category="urban-access",
            url="https://example.org/b", summary="Second."),
        rec("c", ["q"], year=2020, title="Gamma paper", authors="Carol Smith", category="embodied-theory",
            url="https://example.org/c", summary="Third."),
    ]


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args[0] if len(args) == 1 else args)


@pytest.fixture()
def env(abc_records):
    """Graph, layout, viewport and machine on a 400x300 surface at identity zoom.

    Nodes are placed by hand: a (100, 100), b (200, 100), c (300, 200).
    """
    graph = build_graph(abc_records)
    layout = ForceLayout(graph, 400, 300, LayoutSettings())
    viewport = Viewport(400, 300, min_scale=0.5, max_scale=3.0, sensitivity=0.001)
    bus = GraphBus()
    navigated = Recorder()
    revealed = Recorder()
    active = Recorder()
    machine = InteractionMachine(
        graph,
        layout,
        viewport,
        bus,
        InteractionSettings(),
        on_navigate=navigated,
        on_reveal=revealed,
        on_active_change=active,
    )
    for node, (x, y) in zip(graph.nodes, [(100.0, 100.0), (200.0, 100.0), (300.0, 200.0)]):
        node.x, node.y = x, y

    class Env:
        pass

    e = Env()
    e.graph = graph
    e.layout = layout
    e.viewport = viewport
    e.bus = bus
    e.machine = machine
    e.navigated = navigated
    e.revealed = revealed
    e.active = active
    return e


@pytest.fixture()
def restore_config():
    yield
    config.reload_config(config.DEFAULT_CONFIG_PATH)
