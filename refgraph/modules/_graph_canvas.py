from __future__ import annotations

import html

from aqt.qt import (
    QColor,
    QFont,
    QLabel,
    QPainter,
    QPen,
    QPointF,
    QRectF,
    Qt,
    QTimer,
    QWidget,
)

from .. import config, logging
from ..core.scene import Cursor, Frame
from ..core.session import GraphSession

_BG = QColor(0, 0, 0, 0)
_EMPTY_TEXT = "No references"
_TOOLTIP_OFFSET = 14

_TOOLTIP_CSS = """
QLabel#refgraph-tooltip {
  background: rgba(10, 10, 10, 0.92);
  color: #eaeaea;
  border: 1px solid #333333;
  border-radius: 4px;
  padding: 8px 10px;
}
"""

_CURSORS = {
    Cursor.DEFAULT: Qt.CursorShape.ArrowCursor,
    Cursor.POINTER: Qt.CursorShape.PointingHandCursor,
    Cursor.GRABBING: Qt.CursorShape.ClosedHandCursor,
}


def _rgba(color: str, alpha: int) -> QColor:
    c = QColor(str(color or "#888888"))
    c.setAlpha(max(0, min(255, int(alpha))))
    return c


def _tooltip_html(title: str, meta: str, summary: str) -> str:
    return (
        f"<div style='max-width:260px'>"
        f"<b>{html.escape(title)}</b><br>"
        f"<span style='color:#9a9a9a;font-size:11px'>{html.escape(meta)}</span><br>"
        f"<span style='font-size:12px'>{html.escape(summary)}</span>"
        f"</div>"
    )


class GraphCanvas(QWidget):
    def __init__(self, session: GraphSession, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.session = session
        self._last_cursor: Cursor | None = None
        self.setMouseTracking(True)
        self.setMinimumSize(200, 160)
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, False)

        self._tooltip = QLabel(self)
        self._tooltip.setObjectName("refgraph-tooltip")
        self._tooltip.setStyleSheet(_TOOLTIP_CSS)
        self._tooltip.setTextFormat(Qt.TextFormat.RichText)
        self._tooltip.setWordWrap(True)
        self._tooltip.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents, True)
        self._tooltip.hide()

        self._timer = QTimer(self)
        self._timer.setInterval(int(config.FRAME_INTERVAL_MS))
        self._timer.timeout.connect(self.tick)

    def start(self) -> None:
        if not self._timer.isActive():
            self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    @property
    def running(self) -> bool:
        return self._timer.isActive()

    def tick(self) -> None:
        self.session.tick(self._timer.interval() / 1000.0)
        self.update()

    # --- painting ---

    def paintEvent(self, event) -> None:
        frame = self.session.frame()
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(self.rect(), _BG)
            if frame.empty:
                painter.setPen(QPen(QColor("#a5a5a5")))
                painter.setFont(QFont("sans-serif", 10))
                painter.drawText(QRectF(self.rect()), Qt.AlignmentFlag.AlignCenter, _EMPTY_TEXT)
            else:
                self._paint_frame(painter, frame)
        finally:
            painter.end()
        self._apply_overlay(frame)

    def _paint_frame(self, painter: QPainter, frame: Frame) -> None:
        painter.save()
        painter.translate(frame.offset_x, frame.offset_y)
        painter.scale(frame.scale, frame.scale)

        pen = QPen()
        pen.setWidthF(frame.stroke_width)
        for e in frame.edges:
            pen.setColor(QColor(255, 255, 255, e.alpha))
            painter.setPen(pen)
            painter.drawLine(QPointF(e.x1, e.y1), QPointF(e.x2, e.y2))

        painter.setPen(Qt.PenStyle.NoPen)
        for n in frame.nodes:
            painter.setBrush(_rgba(n.color, n.alpha))
            painter.drawEllipse(QPointF(n.x, n.y), n.radius, n.radius)

        if frame.labels:
            painter.setPen(QPen(QColor(255, 255, 255)))
            for lb in frame.labels:
                font = QFont("sans-serif")
                font.setPixelSize(max(1, round(lb.size)))
                painter.setFont(font)
                box = QRectF(lb.x - 200.0, lb.y - lb.size, 400.0, lb.size * 1.4)
                painter.drawText(box, Qt.AlignmentFlag.AlignCenter, lb.text)
        painter.restore()

    def _apply_overlay(self, frame: Frame) -> None:
        if frame.cursor is not self._last_cursor:
            self._last_cursor = frame.cursor
            self.setCursor(_CURSORS.get(frame.cursor, Qt.CursorShape.ArrowCursor))
        tip = frame.tooltip
        if tip is None:
            if self._tooltip.isVisible():
                self._tooltip.hide()
            return
        self._tooltip.setText(_tooltip_html(tip.title, tip.meta, tip.summary))
        self._tooltip.adjustSize()
        x = int(tip.screen_x) + _TOOLTIP_OFFSET
        y = int(tip.screen_y) + _TOOLTIP_OFFSET
        x = max(0, min(x, self.width() - self._tooltip.width()))
        y = max(0, min(y, self.height() - self._tooltip.height()))
        self._tooltip.move(x, y)
        if not self._tooltip.isVisible():
            self._tooltip.show()
            self._tooltip.raise_()

    # --- input ---

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        if self.session.machine.pointer_down(pos.x(), pos.y()):
            event.accept()
            self.update()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event) -> None:
        pos = event.position()
        self.session.machine.pointer_move(pos.x(), pos.y())
        self.update()
        event.accept()

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        result = self.session.machine.pointer_up(pos.x(), pos.y())
        if result:
            logging.trace("pointer up", result)
        self.update()
        event.accept()

    def wheelEvent(self, event) -> None:
        pos = event.position()
        # Wheel-down (negative angle delta) zooms out, matching page scroll direction.
        delta = -float(event.angleDelta().y())
        if self.session.machine.wheel(pos.x(), pos.y(), delta):
            event.accept()
            self.update()
        else:
            event.ignore()

    def leaveEvent(self, event) -> None:
        self.session.machine.pointer_leave()
        self.update()
        super().leaveEvent(event)

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        w, h = float(self.width()), float(self.height())
        old = event.oldSize()
        if old.isValid() and old.width() > 0 and old.height() > 0:
            self.session.resize(w, h)
        else:
            self.session.viewport.set_size(w, h)
            self.session.layout.recenter(w, h)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self.start()

    def hideEvent(self, event) -> None:
        self.stop()
        super().hideEvent(event)
