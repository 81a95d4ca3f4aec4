from __future__ import annotations

import enum
import math
import time
from dataclasses import dataclass
from typing import Callable, Union

from .. import config, logging
from ..catalog import ReferenceRecord
from .bus import GraphBus
from .graph_data import GraphData, Node
from .layout import ForceLayout
from .viewport import Viewport


class HoverSource(enum.Enum):
    POINTER = "pointer"
    LIST = "list"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Hovering:
    node_id: str
    source: HoverSource


@dataclass(frozen=True)
class Dragging:
    node_id: str
    start_x: float
    start_y: float
    start_time: float


@dataclass(frozen=True)
class Panning:
    start_x: float
    start_y: float
    start_offset: tuple[float, float]


InteractionState = Union[Idle, Hovering, Dragging, Panning]


@dataclass(frozen=True)
class InteractionSettings:
    hit_radius: float = 15.0
    hit_radius_selected: float = 25.0
    press_radius: float = 20.0
    drag_threshold: float = 5.0
    select_alpha: float = 0.3

    @classmethod
    def from_config(cls) -> "InteractionSettings":
        return cls(
            hit_radius=config.HIT_RADIUS,
            hit_radius_selected=config.HIT_RADIUS_SELECTED,
            press_radius=config.PRESS_RADIUS,
            drag_threshold=config.DRAG_THRESHOLD,
            select_alpha=config.SELECT_ALPHA,
        )


class InteractionMachine:
    """Resolves canvas pointer input and list intents into hover/drag/pan/select.

    Pointer hover and list hover are tracked separately and only combined in
    ``focused_id``; ``selected_id`` survives every transition.
    """

    def __init__(
        self,
        graph: GraphData,
        layout: ForceLayout,
        viewport: Viewport,
        bus: GraphBus | None = None,
        settings: InteractionSettings | None = None,
        *,
        on_navigate: Callable[[ReferenceRecord], None] | None = None,
        on_reveal: Callable[[str], None] | None = None,
        on_active_change: Callable[[frozenset[str]], None] | None = None,
    ) -> None:
        self.graph = graph
        self.layout = layout
        self.viewport = viewport
        self.settings = settings or InteractionSettings.from_config()
        self.on_navigate = on_navigate
        self.on_reveal = on_reveal
        self.on_active_change = on_active_change

        self.pointer_hover_id: str | None = None
        self.list_hover_id: str | None = None
        self.selected_id: str | None = None
        self.pointer: tuple[float, float] | None = None
        self._drag: Dragging | None = None
        self._pan: Panning | None = None
        self._active: frozenset[str] = frozenset()

        if bus is not None:
            bus.subscribe(
                hover_start=self.on_hover_start,
                hover_clear=self.on_hover_clear,
                select=self.on_select,
            )

    # --- derived state ---

    @property
    def state(self) -> InteractionState:
        if self._drag is not None:
            return self._drag
        if self._pan is not None:
            return self._pan
        if self.pointer_hover_id:
            return Hovering(self.pointer_hover_id, HoverSource.POINTER)
        if self.list_hover_id:
            return Hovering(self.list_hover_id, HoverSource.LIST)
        return Idle()

    @property
    def dragging_id(self) -> str | None:
        return self._drag.node_id if self._drag is not None else None

    @property
    def panning(self) -> bool:
        return self._pan is not None

    @property
    def focused_id(self) -> str | None:
        if self._drag is not None:
            return self._drag.node_id
        return self.pointer_hover_id or self.list_hover_id

    @property
    def tooltip_id(self) -> str | None:
        if self._pan is not None:
            return None
        return self.pointer_hover_id

    def active_ids(self) -> frozenset[str]:
        return frozenset(x for x in (self.focused_id, self.selected_id) if x)

    # --- hit testing ---

    def _hover_radius(self, node: Node) -> float:
        if node.id == self.selected_id:
            return self.settings.hit_radius_selected
        return self.settings.hit_radius

    def hit_test(self, sx: float, sy: float, radius: float | None = None) -> Node | None:
        if not self.viewport.contains(sx, sy):
            return None
        wx, wy = self.viewport.screen_to_world(sx, sy)
        for n in self.graph.nodes:
            if radius is None and n.pinned:
                continue
            r = self._hover_radius(n) if radius is None else radius
            if math.hypot(wx - n.x, wy - n.y) < r:
                return n
        return None

    # --- pointer input ---

    def pointer_move(self, sx: float, sy: float) -> None:
        self.pointer = (float(sx), float(sy))
        if self._pan is not None:
            self.viewport.pan_to(sx, sy)
            return
        if self._drag is not None:
            self._pin_to_pointer()
            return
        self._update_pointer_hover()

    def pointer_leave(self) -> None:
        # A drag or pan keeps the last pointer position until release.
        if self._drag is not None or self._pan is not None:
            return
        self.pointer = None
        self._update_pointer_hover()

    def pointer_down(self, sx: float, sy: float, now: float | None = None) -> bool:
        if self._drag is not None or self._pan is not None:
            return False
        if not self.viewport.contains(sx, sy):
            return False
        self.pointer = (float(sx), float(sy))
        hit = self.hit_test(sx, sy, radius=self.settings.press_radius)
        if hit is not None:
            started = time.monotonic() if now is None else float(now)
            self._drag = Dragging(hit.id, float(sx), float(sy), started)
            self.pointer_hover_id = hit.id
            self._pin_to_pointer()
            logging.trace("drag start", hit.id)
        else:
            offset = self.viewport.begin_pan(sx, sy)
            self._pan = Panning(float(sx), float(sy), offset)
            logging.trace("pan start", offset)
        self._sync_active()
        return True

    def pointer_up(self, sx: float | None = None, sy: float | None = None) -> str | None:
        if sx is not None and sy is not None:
            self.pointer = (float(sx), float(sy))
        result: str | None = None
        if self._drag is not None:
            drag = self._drag
            self._drag = None
            end_x, end_y = self.pointer if self.pointer is not None else (drag.start_x, drag.start_y)
            moved = math.hypot(end_x - drag.start_x, end_y - drag.start_y)
            node = self.graph.node(drag.node_id)
            if node is not None:
                self.layout.release(node.index)
            if moved < self.settings.drag_threshold and node is not None:
                result = "click"
                logging.debug("click", node.id)
                self._click(node)
            else:
                result = "drag-end"
                logging.debug("drag end", drag.node_id, "moved=", round(moved, 1))
        elif self._pan is not None:
            self._pan = None
            self.viewport.end_pan()
            result = "pan-end"
        if result is not None:
            self._update_pointer_hover(force_sync=True)
        return result

    def wheel(self, sx: float, sy: float, delta: float) -> bool:
        return self.viewport.zoom_at(sx, sy, delta)

    def refresh(self) -> None:
        if self._drag is not None:
            self._pin_to_pointer()
        elif self._pan is None:
            self._update_pointer_hover()

    # --- bus intents ---

    def on_hover_start(self, node_id: str) -> None:
        if self._drag is not None:
            return
        if self.graph.node(node_id) is None:
            return
        self.list_hover_id = node_id
        self._sync_active()

    def on_hover_clear(self) -> None:
        if self._drag is not None or self.list_hover_id is None:
            return
        self.list_hover_id = None
        self._sync_active()

    def on_select(self, node_id: str) -> None:
        self.select(node_id)

    def select(self, node_id: str | None) -> bool:
        node = self.graph.node(node_id)
        if node is None or node.id == self.selected_id:
            return False
        self.selected_id = node.id
        self.layout.reheat(self.settings.select_alpha)
        logging.debug("selected", node.id)
        self._sync_active()
        return True

    # --- internals ---

    def _click(self, node: Node) -> None:
        self.select(node.id)
        if callable(self.on_reveal):
            self.on_reveal(node.id)
        if callable(self.on_navigate):
            self.on_navigate(node.record)

    def _pin_to_pointer(self) -> None:
        if self._drag is None or self.pointer is None:
            return
        node = self.graph.node(self._drag.node_id)
        if node is None:
            return
        wx, wy = self.viewport.screen_to_world(*self.pointer)
        self.layout.pin(node.index, wx, wy)

    def _update_pointer_hover(self, force_sync: bool = False) -> None:
        hit: Node | None = None
        if self.pointer is not None:
            hit = self.hit_test(*self.pointer)
        new_id = hit.id if hit is not None else None
        if new_id != self.pointer_hover_id:
            self.pointer_hover_id = new_id
            logging.trace("pointer hover", new_id)
            force_sync = True
        if force_sync:
            self._sync_active()

    def _sync_active(self) -> None:
        ids = self.active_ids()
        if ids == self._active:
            return
        self._active = ids
        if callable(self.on_active_change):
            self.on_active_change(ids)
