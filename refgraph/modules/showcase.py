from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from aqt.qt import QDesktopServices, QUrl, QVBoxLayout, QWidget

from .. import logging
from ..catalog import ReferenceRecord
from ..core.bus import GraphBus
from ..core.session import GraphSession
from ._graph_canvas import GraphCanvas
from ._ref_list import ReferenceList


def open_url(record: ReferenceRecord) -> bool:
    url = str(record.url or "").strip()
    if not url:
        logging.debug("no url for", record.id)
        return False
    ok = bool(QDesktopServices.openUrl(QUrl(url)))
    if not ok:
        logging.warn("could not open url", url)
    return ok


@dataclass
class ShowcaseGraph:
    session: GraphSession
    list_panel: ReferenceList
    canvas: GraphCanvas

    def reset_view(self) -> None:
        self.session.reset_view()
        self.canvas.update()

    def reheat(self) -> None:
        self.session.reheat()
        self.canvas.update()


def _host_layout(host: QWidget) -> QVBoxLayout:
    lay = host.layout()
    if lay is None:
        lay = QVBoxLayout(host)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(0)
    return lay


def mount(
    list_host: QWidget | None,
    canvas_host: QWidget | None,
    records: Iterable[ReferenceRecord],
    *,
    navigate: Callable[[ReferenceRecord], None] | None = open_url,
) -> ShowcaseGraph | None:
    """Build list panel and canvas on two host widgets, sharing one bus.

    Returns None without touching anything when either host is missing.
    """
    if list_host is None or canvas_host is None:
        logging.warn("mount skipped: missing host", "list=", list_host is not None, "canvas=", canvas_host is not None)
        return None

    records = list(records)
    bus = GraphBus()
    list_panel = ReferenceList(records, bus, on_navigate=navigate)
    session = GraphSession(
        records,
        float(canvas_host.width()),
        float(canvas_host.height()),
        bus=bus,
        on_navigate=navigate,
        on_reveal=list_panel.reveal,
        on_active_change=list_panel.set_active_ids,
    )
    canvas = GraphCanvas(session)

    _host_layout(list_host).addWidget(list_panel)
    _host_layout(canvas_host).addWidget(canvas)
    logging.info("showcase mounted", "nodes=", len(session.graph.nodes), "edges=", len(session.graph.edges))
    return ShowcaseGraph(session=session, list_panel=list_panel, canvas=canvas)
