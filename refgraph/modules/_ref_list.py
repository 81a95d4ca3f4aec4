from __future__ import annotations

from typing import Callable, Iterable

from aqt.qt import (
    QAbstractItemView,
    QBrush,
    QColor,
    QFont,
    QListWidget,
    QListWidgetItem,
    Qt,
    QWidget,
)

from .. import logging
from ..catalog import ReferenceRecord
from ..core.bus import GraphBus

ACTIVE_ROLE = Qt.ItemDataRole.UserRole + 1
_ACTIVE_BG = QColor(255, 255, 255, 28)

_LIST_CSS = """
QListWidget {
  background: transparent;
  border: none;
}
QListWidget::item {
  padding: 8px 6px;
  border-bottom: 1px solid #222222;
}
"""


def sort_for_list(records: Iterable[ReferenceRecord]) -> list[ReferenceRecord]:
    # sorted() is stable, so equal years keep catalog order.
    return sorted(records, key=lambda r: r.year, reverse=True)


def entry_text(rec: ReferenceRecord) -> str:
    lines = [f"{rec.year}  ·  {rec.category_label}", rec.title]
    if rec.summary:
        lines.append(rec.summary)
    return "\n".join(lines)


def _item_id(item: QListWidgetItem | None) -> str:
    if item is None:
        return ""
    raw = item.data(Qt.ItemDataRole.UserRole)
    if not isinstance(raw, dict):
        return ""
    return str(raw.get("id", "") or "").strip()


def _item_url(item: QListWidgetItem | None) -> str:
    if item is None:
        return ""
    raw = item.data(Qt.ItemDataRole.UserRole)
    if not isinstance(raw, dict):
        return ""
    return str(raw.get("url", "") or "").strip()


class ReferenceList(QListWidget):
    """Catalog entries newest first; hover and click go out over the bus.

    Which entries look active is decided by the interaction machine and pushed
    in through ``set_active_ids``.
    """

    def __init__(
        self,
        records: Iterable[ReferenceRecord],
        bus: GraphBus,
        parent: QWidget | None = None,
        on_navigate: Callable[[ReferenceRecord], None] | None = None,
    ) -> None:
        super().__init__(parent)
        self.bus = bus
        self.on_navigate = on_navigate
        self._records: dict[str, ReferenceRecord] = {}
        self._items: dict[str, QListWidgetItem] = {}
        self._hover_id = ""
        self._active: frozenset[str] = frozenset()

        self.setObjectName("refgraph-list")
        self.setStyleSheet(_LIST_CSS)
        self.setWordWrap(True)
        self.setMouseTracking(True)
        self.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        self.setVerticalScrollMode(QAbstractItemView.ScrollMode.ScrollPerPixel)
        self.itemEntered.connect(self._on_item_entered)
        self.itemClicked.connect(self._on_item_clicked)
        self.set_records(records)

    def set_records(self, records: Iterable[ReferenceRecord]) -> None:
        self.clear()
        self._records.clear()
        self._items.clear()
        self._hover_id = ""
        for rec in sort_for_list(records):
            if rec.id in self._records:
                continue
            item = QListWidgetItem(entry_text(rec))
            item.setData(Qt.ItemDataRole.UserRole, {"id": rec.id, "url": rec.url})
            item.setData(ACTIVE_ROLE, False)
            item.setToolTip(rec.authors)
            self.addItem(item)
            self._records[rec.id] = rec
            self._items[rec.id] = item
        logging.debug("list populated", "entries=", self.count())
        self.set_active_ids(self._active)

    def ids(self) -> list[str]:
        return [_item_id(self.item(i)) for i in range(self.count())]

    def item_for(self, node_id: str) -> QListWidgetItem | None:
        return self._items.get(str(node_id or ""))

    def is_active(self, node_id: str) -> bool:
        item = self.item_for(node_id)
        return bool(item is not None and item.data(ACTIVE_ROLE))

    # --- bus intents ---

    def _on_item_entered(self, item: QListWidgetItem) -> None:
        nid = _item_id(item)
        if nid == self._hover_id:
            return
        if self._hover_id:
            self.bus.hover_clear()
        self._hover_id = nid
        if nid:
            self.bus.hover_start(nid)

    def _clear_hover(self) -> None:
        if not self._hover_id:
            return
        self._hover_id = ""
        self.bus.hover_clear()

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        nid = _item_id(item)
        if not nid:
            return
        self.bus.select(nid)
        rec = self._records.get(nid)
        if rec is not None and callable(self.on_navigate):
            self.on_navigate(rec)

    def mouseMoveEvent(self, event) -> None:
        super().mouseMoveEvent(event)
        if self.itemAt(event.position().toPoint()) is None:
            self._clear_hover()

    def leaveEvent(self, event) -> None:
        self._clear_hover()
        super().leaveEvent(event)

    # --- driven by the interaction machine ---

    def set_active_ids(self, ids: Iterable[str]) -> None:
        active = frozenset(str(x) for x in ids if x)
        self._active = active
        for nid, item in self._items.items():
            on = nid in active
            item.setData(ACTIVE_ROLE, on)
            item.setBackground(QBrush(_ACTIVE_BG) if on else QBrush())
            font = QFont(item.font())
            font.setBold(on)
            item.setFont(font)

    def reveal(self, node_id: str) -> bool:
        item = self.item_for(node_id)
        if item is None:
            return False
        self.scrollToItem(item, QAbstractItemView.ScrollHint.PositionAtCenter)
        return True
