from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .. import logging
from ..catalog import ReferenceRecord


@dataclass
class Node:
    """Simulation-side wrapper around one catalog record.

    Position and velocity are owned by the layout engine. ``fx``/``fy`` hold
    the pin while the node is being dragged and are ``None`` otherwise.
    """

    record: ReferenceRecord
    index: int
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def pinned(self) -> bool:
        return self.fx is not None or self.fy is not None


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    weight: int


@dataclass
class GraphData:
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    by_id: dict[str, Node] = field(default_factory=dict)
    _adjacency: dict[int, set[int]] = field(default_factory=dict, repr=False)

    def node(self, node_id: str | None) -> Node | None:
        if not node_id:
            return None
        return self.by_id.get(node_id)

    def degree(self, node_id: str) -> int:
        n = self.by_id.get(node_id)
        if n is None:
            return 0
        return len(self._adjacency.get(n.index, ()))

    def neighbors(self, node_id: str) -> list[str]:
        n = self.by_id.get(node_id)
        if n is None:
            return []
        return [self.nodes[i].id for i in sorted(self._adjacency.get(n.index, ()))]

    def is_neighbor(self, a_id: str | None, b_id: str | None) -> bool:
        a = self.node(a_id)
        b = self.node(b_id)
        if a is None or b is None:
            return False
        return b.index in self._adjacency.get(a.index, ())

    def touches(self, edge: Edge, node_id: str | None) -> bool:
        n = self.node(node_id)
        if n is None:
            return False
        return edge.source == n.index or edge.target == n.index

    def edges_touching(self, node_id: str) -> list[Edge]:
        return [e for e in self.edges if self.touches(e, node_id)]

    def year_range(self) -> tuple[int, int]:
        if not self.nodes:
            return 0, 0
        years = [n.record.year for n in self.nodes]
        return min(years), max(years)


def build_edges(records: list[ReferenceRecord]) -> list[Edge]:
    edges: list[Edge] = []
    for i in range(len(records)):
        tags_a = records[i].tags
        for j in range(i + 1, len(records)):
            shared = tags_a & records[j].tags
            if shared:
                edges.append(Edge(source=i, target=j, weight=len(shared)))
    return edges


def build_graph(records: Iterable[ReferenceRecord]) -> GraphData:
    recs = list(records)
    graph = GraphData()
    for i, rec in enumerate(recs):
        if rec.id in graph.by_id:
            logging.warn("duplicate id ignored", rec.id)
            continue
        node = Node(record=rec, index=len(graph.nodes))
        graph.nodes.append(node)
        graph.by_id[rec.id] = node

    graph.edges = build_edges([n.record for n in graph.nodes])
    for e in graph.edges:
        graph._adjacency.setdefault(e.source, set()).add(e.target)
        graph._adjacency.setdefault(e.target, set()).add(e.source)

    isolated = sum(1 for n in graph.nodes if n.index not in graph._adjacency)
    logging.debug("built graph", "nodes=", len(graph.nodes), "edges=", len(graph.edges), "isolated=", isolated)
    return graph
