"""QPainter-backed draw surface."""
from __future__ import annotations

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QColor, QPainter, QPen

from guidecam_overlay.draw_surface import DrawSurface
from guidecam_overlay.framing_math import Point, Rect
from guidecam_overlay.guide_config import OverlayColor


def to_qcolor(color: OverlayColor) -> QColor:
    red, green, blue, alpha = color.rgba8()
    return QColor(red, green, blue, alpha)


class QtDrawSurface(DrawSurface):
    def __init__(self, painter: QPainter) -> None:
        self._painter = painter

    def _set_pen(self, color: OverlayColor, width: float) -> None:
        pen = QPen(to_qcolor(color))
        pen.setWidthF(max(0.0, float(width)))
        pen.setCapStyle(Qt.PenCapStyle.FlatCap)
        pen.setJoinStyle(Qt.PenJoinStyle.MiterJoin)
        self._painter.setPen(pen)
        self._painter.setBrush(Qt.BrushStyle.NoBrush)

    def stroke_rectangle(self, rect: Rect, color: OverlayColor, width: float) -> None:
        self._set_pen(color, width)
        self._painter.drawRect(QRectF(QPointF(rect.left, rect.top), QPointF(rect.right, rect.bottom)))

    def stroke_line(self, start: Point, end: Point, color: OverlayColor, width: float) -> None:
        self._set_pen(color, width)
        self._painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))
