from __future__ import annotations

from typing import Iterable

from aqt.qt import QAction, QMainWindow, QMenu, QSplitter, Qt, QWidget

from .. import logging
from ..catalog import ReferenceRecord
from ..modules.showcase import ShowcaseGraph, mount

_WINDOW_CSS = """
QMainWindow, QWidget#refgraph-list-host, QWidget#refgraph-canvas-host {
  background: #0b0b0b;
  color: #d8d8d8;
}
"""


class ShowcaseWindow(QMainWindow):
    def __init__(self, records: Iterable[ReferenceRecord], parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Reference Graph")
        self.setStyleSheet(_WINDOW_CSS)
        self.resize(1100, 680)

        self.list_host = QWidget()
        self.list_host.setObjectName("refgraph-list-host")
        self.canvas_host = QWidget()
        self.canvas_host.setObjectName("refgraph-canvas-host")

        splitter = QSplitter(Qt.Orientation.Horizontal, self)
        splitter.addWidget(self.list_host)
        splitter.addWidget(self.canvas_host)
        splitter.setStretchFactor(0, 2)
        splitter.setStretchFactor(1, 3)
        self.setCentralWidget(splitter)

        self.showcase: ShowcaseGraph | None = mount(self.list_host, self.canvas_host, records)
        self._build_menu()

    def _build_menu(self) -> list[QAction]:
        menu = QMenu("View", self)
        self.menuBar().addMenu(menu)
        actions: list[QAction] = []
        for label, cb in (("Reset View", self.reset_view), ("Reheat Layout", self.reheat)):
            action = QAction(label, self)
            action.triggered.connect(cb)
            action.setEnabled(self.showcase is not None)
            menu.addAction(action)
            actions.append(action)
        return actions

    def reset_view(self) -> None:
        if self.showcase is None:
            return
        self.showcase.reset_view()

    def reheat(self) -> None:
        if self.showcase is None:
            return
        logging.debug("reheat requested")
        self.showcase.reheat()
