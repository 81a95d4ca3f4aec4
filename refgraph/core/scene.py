from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from .. import config
from ..catalog import ReferenceRecord
from .graph_data import Edge, GraphData, Node
from .interaction import InteractionMachine
from .viewport import Viewport

EDGE_ALPHA_NEUTRAL = 60
EDGE_ALPHA_DIMMED = 30
EDGE_ALPHA_EMPHASIZED = 180
NODE_ALPHA = 255
NODE_ALPHA_DIMMED = 40
BREATH_RATE = 0.03
BREATH_AMPLITUDE = 2.0
LABEL_SIZE = 12.0
LABEL_GAP = 15.0


class Cursor(enum.Enum):
    DEFAULT = "default"
    POINTER = "pointer"
    GRABBING = "grabbing"


class EdgeTier(enum.Enum):
    NEUTRAL = EDGE_ALPHA_NEUTRAL
    DIMMED = EDGE_ALPHA_DIMMED
    EMPHASIZED = EDGE_ALPHA_EMPHASIZED


@dataclass(frozen=True)
class SceneSettings:
    min_radius: float = 8.0
    max_radius: float = 12.0
    focus_radius: float = 15.0

    @classmethod
    def from_config(cls) -> "SceneSettings":
        return cls(
            min_radius=config.NODE_RADIUS_MIN,
            max_radius=config.NODE_RADIUS_MAX,
            focus_radius=config.NODE_RADIUS_FOCUS,
        )


@dataclass(frozen=True)
class EdgeDraw:
    x1: float
    y1: float
    x2: float
    y2: float
    tier: EdgeTier

    @property
    def alpha(self) -> int:
        return self.tier.value


@dataclass(frozen=True)
class NodeDraw:
    node_id: str
    x: float
    y: float
    radius: float
    color: str
    alpha: int
    hovered: bool
    selected: bool


@dataclass(frozen=True)
class LabelDraw:
    text: str
    x: float
    y: float
    size: float


@dataclass(frozen=True)
class TooltipDraw:
    record: ReferenceRecord
    screen_x: float
    screen_y: float

    @property
    def title(self) -> str:
        return self.record.title

    @property
    def meta(self) -> str:
        return f"{self.record.year} // {self.record.authors}"

    @property
    def summary(self) -> str:
        return self.record.summary


@dataclass(frozen=True)
class Frame:
    offset_x: float
    offset_y: float
    scale: float
    stroke_width: float
    edges: tuple[EdgeDraw, ...]
    nodes: tuple[NodeDraw, ...]
    labels: tuple[LabelDraw, ...]
    tooltip: TooltipDraw | None
    cursor: Cursor

    @property
    def empty(self) -> bool:
        return not self.nodes


def year_radius(year: int, lo: int, hi: int, settings: SceneSettings) -> float:
    if hi <= lo:
        return (settings.min_radius + settings.max_radius) / 2.0
    t = (year - lo) / float(hi - lo)
    return settings.min_radius + t * (settings.max_radius - settings.min_radius)


def edge_tier(graph: GraphData, edge: Edge, focused_id: str | None) -> EdgeTier:
    if not focused_id:
        return EdgeTier.NEUTRAL
    if graph.touches(edge, focused_id):
        return EdgeTier.EMPHASIZED
    return EdgeTier.DIMMED


def breathing(frame_count: int, node: Node) -> float:
    return math.sin(frame_count * BREATH_RATE + node.index) * BREATH_AMPLITUDE


def build_frame(
    graph: GraphData,
    machine: InteractionMachine,
    viewport: Viewport,
    frame_count: int = 0,
    settings: SceneSettings | None = None,
) -> Frame:
    s = settings or SceneSettings.from_config()
    scale = viewport.scale
    focused = machine.focused_id
    selected = machine.selected_id
    idle = focused is None and selected is None
    lo, hi = graph.year_range()

    edges: list[EdgeDraw] = []
    for e in graph.edges:
        a = graph.nodes[e.source]
        b = graph.nodes[e.target]
        edges.append(EdgeDraw(a.x, a.y, b.x, b.y, edge_tier(graph, e, focused)))

    nodes: list[NodeDraw] = []
    labels: list[LabelDraw] = []
    for n in graph.nodes:
        is_hover = n.id == focused
        is_selected = n.id == selected
        dimmed = bool(focused) and not is_hover and not graph.is_neighbor(n.id, focused)
        r = year_radius(n.record.year, lo, hi, s)
        if is_hover or is_selected:
            r = s.focus_radius
        drawn_r = r + (breathing(frame_count, n) if idle else 0.0)
        nodes.append(
            NodeDraw(
                node_id=n.id,
                x=n.x,
                y=n.y,
                radius=drawn_r,
                color=n.record.color,
                alpha=NODE_ALPHA_DIMMED if dimmed else NODE_ALPHA,
                hovered=is_hover,
                selected=is_selected,
            )
        )
        if is_hover or is_selected:
            labels.append(
                LabelDraw(
                    text=n.record.short_label,
                    x=n.x,
                    y=n.y + r + LABEL_GAP / scale,
                    size=LABEL_SIZE / scale,
                )
            )

    tooltip: TooltipDraw | None = None
    tip_node = graph.node(machine.tooltip_id)
    if tip_node is not None:
        sx, sy = viewport.world_to_screen(tip_node.x, tip_node.y)
        tooltip = TooltipDraw(tip_node.record, sx, sy)

    if machine.panning:
        cursor = Cursor.GRABBING
    elif machine.pointer_hover_id:
        cursor = Cursor.POINTER
    else:
        cursor = Cursor.DEFAULT

    return Frame(
        offset_x=viewport.offset_x,
        offset_y=viewport.offset_y,
        scale=scale,
        stroke_width=1.0 / scale,
        edges=tuple(edges),
        nodes=tuple(nodes),
        labels=tuple(labels),
        tooltip=tooltip,
        cursor=cursor,
    )
