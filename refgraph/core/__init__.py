from __future__ import annotations

from .bus import GraphBus
from .graph_data import Edge, GraphData, Node, build_graph
from .interaction import HoverSource, InteractionMachine
from .layout import ForceLayout
from .session import GraphSession
from .viewport import Viewport

__all__ = [
    "Edge",
    "ForceLayout",
    "GraphBus",
    "GraphData",
    "GraphSession",
    "HoverSource",
    "InteractionMachine",
    "Node",
    "Viewport",
    "build_graph",
]
