from __future__ import annotations

from typing import Callable, Iterable

from .. import logging
from ..catalog import ReferenceRecord
from .bus import GraphBus
from .graph_data import GraphData, build_graph
from .interaction import InteractionMachine, InteractionSettings
from .layout import ForceLayout, LayoutSettings
from .scene import Frame, SceneSettings, build_frame
from .viewport import Viewport


class GraphSession:
    """One mounted graph: data, layout, viewport, interaction and bus.

    ``tick`` is the per-frame entry point; the host decides how often to call
    it (a QTimer in the desktop window, a plain loop in tests).
    """

    def __init__(
        self,
        records: Iterable[ReferenceRecord],
        width: float = 0.0,
        height: float = 0.0,
        *,
        bus: GraphBus | None = None,
        layout_settings: LayoutSettings | None = None,
        interaction_settings: InteractionSettings | None = None,
        scene_settings: SceneSettings | None = None,
        on_navigate: Callable[[ReferenceRecord], None] | None = None,
        on_reveal: Callable[[str], None] | None = None,
        on_active_change: Callable[[frozenset[str]], None] | None = None,
        warm_up: bool = True,
    ) -> None:
        self.bus = bus or GraphBus()
        self.graph: GraphData = build_graph(records)
        self.viewport = Viewport(width, height)
        self.layout = ForceLayout(self.graph, width, height, layout_settings)
        self.machine = InteractionMachine(
            self.graph,
            self.layout,
            self.viewport,
            self.bus,
            interaction_settings,
            on_navigate=on_navigate,
            on_reveal=on_reveal,
            on_active_change=on_active_change,
        )
        self.scene_settings = scene_settings or SceneSettings.from_config()
        self.frame_count = 0
        self.elapsed = 0.0
        if warm_up:
            self.layout.warm_up()

    def tick(self, dt: float | None = None) -> bool:
        if dt is not None:
            self.elapsed += float(dt)
        moved = self.layout.step()
        self.machine.refresh()
        self.frame_count += 1
        return moved

    def frame(self) -> Frame:
        return build_frame(self.graph, self.machine, self.viewport, self.frame_count, self.scene_settings)

    def resize(self, width: float, height: float) -> None:
        self.viewport.set_size(width, height)
        self.layout.resize(width, height)

    def reset_view(self) -> None:
        self.viewport.reset()
        logging.debug("view reset")

    def reheat(self) -> None:
        self.layout.reheat(1.0)
