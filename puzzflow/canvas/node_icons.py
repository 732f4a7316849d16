# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Node type icons, drawn as strokes so they scale with the canvas zoom.
The palette and the inspector use the same painters through
``node_icon_pixmap``.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from PySide6.QtCore import Qt, QRectF, QPointF
from PySide6.QtGui import QPainter, QPainterPath, QPen, QColor, QPixmap

from puzzflow.logger import get_logger
log = get_logger("NodeIcons")

ICON_COLOR = "#4A4F5A"


# ==============================================================================
# ICON PAINTERS
# ==============================================================================

class NodeIconPainter(ABC):
    """Draws one icon inside ``rect`` with the painter's current pen."""

    @abstractmethod
    def paint(self, painter: QPainter, rect: QRectF) -> None:
        pass


class IconPlayerAction(NodeIconPainter):
    # Head and shoulders
    def paint(self, painter, rect):
        c = rect.center()
        r = rect.width() * 0.16
        painter.drawEllipse(QPointF(c.x(), rect.top() + rect.height() * 0.32), r, r)
        body = QPainterPath()
        body.moveTo(rect.left() + rect.width() * 0.2, rect.bottom() - rect.height() * 0.12)
        body.quadTo(c.x(), rect.top() + rect.height() * 0.38,
                    rect.right() - rect.width() * 0.2, rect.bottom() - rect.height() * 0.12)
        painter.drawPath(body)


class IconCharacterAction(NodeIconPainter):
    # Speech bubble
    def paint(self, painter, rect):
        w, h = rect.width(), rect.height()
        bubble = QRectF(rect.left() + w * 0.12, rect.top() + h * 0.15, w * 0.76, h * 0.5)
        painter.drawRoundedRect(bubble, w * 0.12, h * 0.12)
        tail = QPainterPath()
        tail.moveTo(bubble.left() + w * 0.2, bubble.bottom())
        tail.lineTo(bubble.left() + w * 0.12, rect.bottom() - h * 0.12)
        tail.lineTo(bubble.left() + w * 0.38, bubble.bottom())
        painter.drawPath(tail)


class IconGetItem(NodeIconPainter):
    # Arrow dropping into a tray
    def paint(self, painter, rect):
        w, h = rect.width(), rect.height()
        c = rect.center()
        painter.drawLine(QPointF(c.x(), rect.top() + h * 0.12), QPointF(c.x(), rect.top() + h * 0.6))
        head = QPainterPath()
        head.moveTo(c.x() - w * 0.18, rect.top() + h * 0.42)
        head.lineTo(c.x(), rect.top() + h * 0.6)
        head.lineTo(c.x() + w * 0.18, rect.top() + h * 0.42)
        painter.drawPath(head)
        tray = QPainterPath()
        tray.moveTo(rect.left() + w * 0.15, rect.top() + h * 0.62)
        tray.lineTo(rect.left() + w * 0.15, rect.bottom() - h * 0.14)
        tray.lineTo(rect.right() - w * 0.15, rect.bottom() - h * 0.14)
        tray.lineTo(rect.right() - w * 0.15, rect.top() + h * 0.62)
        painter.drawPath(tray)


class IconUseItem(NodeIconPainter):
    # Key
    def paint(self, painter, rect):
        w, h = rect.width(), rect.height()
        bow = QPointF(rect.left() + w * 0.3, rect.center().y())
        painter.drawEllipse(bow, w * 0.15, h * 0.15)
        shaft_y = bow.y()
        painter.drawLine(QPointF(bow.x() + w * 0.15, shaft_y), QPointF(rect.right() - w * 0.12, shaft_y))
        for x in (rect.right() - w * 0.16, rect.right() - w * 0.3):
            painter.drawLine(QPointF(x, shaft_y), QPointF(x, shaft_y + h * 0.15))


class IconGoal(NodeIconPainter):
    # Flag on a pole
    def paint(self, painter, rect):
        w, h = rect.width(), rect.height()
        pole_x = rect.left() + w * 0.25
        painter.drawLine(QPointF(pole_x, rect.top() + h * 0.12), QPointF(pole_x, rect.bottom() - h * 0.1))
        flag = QPainterPath()
        flag.moveTo(pole_x, rect.top() + h * 0.14)
        flag.lineTo(rect.right() - w * 0.15, rect.top() + h * 0.3)
        flag.lineTo(pole_x, rect.top() + h * 0.48)
        painter.drawPath(flag)


class IconStoryState(NodeIconPainter):
    # Bookmark
    def paint(self, painter, rect):
        w, h = rect.width(), rect.height()
        mark = QPainterPath()
        mark.moveTo(rect.left() + w * 0.25, rect.top() + h * 0.12)
        mark.lineTo(rect.right() - w * 0.25, rect.top() + h * 0.12)
        mark.lineTo(rect.right() - w * 0.25, rect.bottom() - h * 0.1)
        mark.lineTo(rect.center().x(), rect.bottom() - h * 0.3)
        mark.lineTo(rect.left() + w * 0.25, rect.bottom() - h * 0.1)
        mark.closeSubpath()
        painter.drawPath(mark)


NODE_ICONS: Dict[str, NodeIconPainter] = {
    "player-action": IconPlayerAction(),
    "character-action": IconCharacterAction(),
    "get-item": IconGetItem(),
    "use-item": IconUseItem(),
    "goal": IconGoal(),
    "story-state": IconStoryState(),
}


# ==============================================================================
# HELPERS
# ==============================================================================

def paint_node_icon(painter: QPainter, icon: str, rect: QRectF, color: QColor) -> bool:
    """Draw ``icon`` into ``rect``. Returns False for an unknown icon name."""
    icon_painter = NODE_ICONS.get(icon)
    if icon_painter is None:
        log.debug("No painter for icon '%s'", icon)
        return False

    painter.save()
    pen = QPen(color, max(1.0, rect.width() * 0.09))
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    painter.setPen(pen)
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    icon_painter.paint(painter, rect)
    painter.restore()
    return True


def node_icon_pixmap(icon: str, size: int, color: Optional[QColor] = None) -> QPixmap:
    """Transparent ``size`` x ``size`` pixmap of ``icon``; needs a QGuiApplication."""
    if color is None:
        color = QColor(ICON_COLOR)
    pixmap = QPixmap(size, size)
    pixmap.fill(Qt.GlobalColor.transparent)
    painter = QPainter(pixmap)
    paint_node_icon(painter, icon, QRectF(0, 0, size, size), color)
    painter.end()
    return pixmap
