from __future__ import annotations

from typing import Callable

from .. import logging

HoverHandler = Callable[[str], None]
ClearHandler = Callable[[], None]
SelectHandler = Callable[[str], None]


class GraphBus:
    """Hover/select channel shared by the list panel and the canvas.

    One instance is created per mounted graph and handed to both sides at
    construction. Handlers run synchronously in subscription order.
    """

    def __init__(self) -> None:
        self._on_hover_start: list[HoverHandler] = []
        self._on_hover_clear: list[ClearHandler] = []
        self._on_select: list[SelectHandler] = []

    def subscribe(
        self,
        *,
        hover_start: HoverHandler | None = None,
        hover_clear: ClearHandler | None = None,
        select: SelectHandler | None = None,
    ) -> None:
        if callable(hover_start):
            self._on_hover_start.append(hover_start)
        if callable(hover_clear):
            self._on_hover_clear.append(hover_clear)
        if callable(select):
            self._on_select.append(select)

    def hover_start(self, node_id: str) -> None:
        nid = str(node_id or "").strip()
        if not nid:
            return
        logging.trace("hover-start", nid)
        for fn in list(self._on_hover_start):
            fn(nid)

    def hover_clear(self) -> None:
        logging.trace("hover-clear")
        for fn in list(self._on_hover_clear):
            fn()

    def select(self, node_id: str) -> None:
        nid = str(node_id or "").strip()
        if not nid:
            return
        logging.trace("select", nid)
        for fn in list(self._on_select):
            fn(nid)
