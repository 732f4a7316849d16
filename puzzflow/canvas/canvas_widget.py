# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Canvas widget: paints the controller's graph and forwards raw input.

All painting happens in content space under the viewport transform,
using the rects from ``NodeLayout``; nothing measured here flows back
into the model.
"""

from typing import Optional

from PySide6.QtCore import Qt, QRectF, QMimeData
from PySide6.QtGui import (
    QPainter, QColor, QPen, QBrush, QFont, QFontMetricsF,
    QMouseEvent, QWheelEvent, QDragEnterEvent, QDragMoveEvent, QDropEvent
)
from PySide6.QtWidgets import QWidget, QHBoxLayout, QToolButton, QLabel, QFrame

from puzzflow.canvas.canvas_core import CanvasController
from puzzflow.canvas.canvas_grid import GridRenderer
from puzzflow.canvas.canvas_states import PointerEvent
from puzzflow.canvas.geometry import build_connection_path, viewport_transform
from puzzflow.canvas.node_icons import paint_node_icon
from puzzflow.graph.model import Node
from puzzflow.nodetypes import NODE_TYPES, NodeType
from puzzflow.settings import SettingsCategory, get_settings_manager

from puzzflow.logger import get_logger
log = get_logger("CanvasWidget")


NODE_TYPE_MIME = "application/x-puzzflow-node-type"


def node_type_mime_data(node_type: NodeType) -> QMimeData:
    mime = QMimeData()
    mime.setData(NODE_TYPE_MIME, node_type.value.encode("utf-8"))
    return mime


def _qcolor(rgba) -> QColor:
    return QColor(*rgba) if isinstance(rgba, (list, tuple)) else QColor(rgba)


# ==============================================================================
# ZOOM OVERLAY
# ==============================================================================

class ZoomControls(QFrame):
    """Zoom in / out / reset buttons with the current zoom percentage."""

    def __init__(self, controller: CanvasController, parent=None):
        super().__init__(parent)
        self._controller = controller
        self.setObjectName("ZoomControls")
        self.setStyleSheet(
            "#ZoomControls { background: rgba(255, 255, 255, 230);"
            " border: 1px solid #D0D4DC; border-radius: 6px; }"
        )

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 2, 4, 2)
        layout.setSpacing(2)

        for text, tip, slot in (("−", "Zoom out", controller.zoom_out),
                                ("+", "Zoom in", controller.zoom_in),
                                ("⟲", "Reset view", controller.reset_view)):
            btn = QToolButton(self)
            btn.setText(text)
            btn.setToolTip(tip)
            btn.setAutoRaise(True)
            btn.clicked.connect(slot)
            layout.addWidget(btn)

        self.label = QLabel(self)
        self.label.setMinimumWidth(44)
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.label)

        controller.viewport.changed.connect(self.refresh)
        self.refresh()

    def refresh(self):
        self.label.setText(f"{self._controller.viewport.zoom_percent}%")
        self.adjustSize()


# ==============================================================================
# CANVAS WIDGET
# ==============================================================================

class CanvasWidget(QWidget):
    """
    Flow graph canvas.

    Input events are converted to ``PointerEvent`` and handed to the
    controller's state machine; key events reach the controller through
    the main window's application-wide filter.
    """

    def __init__(self, controller: Optional[CanvasController] = None, parent=None):
        super().__init__(parent)
        self.controller = controller or CanvasController(parent=self)
        self.setAcceptDrops(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(400, 300)

        self._grid_renderer = GridRenderer()
        self._canvas_settings = get_settings_manager().get_schema(SettingsCategory.CANVAS)
        self._node_settings = get_settings_manager().get_schema(SettingsCategory.NODE)

        self._title_font = QFont(self.font())
        self._title_font.setBold(True)
        self._label_font = QFont(self.font())
        self._label_font.setPointSizeF(max(6.0, self.font().pointSizeF() - 1.5))

        self.zoom_controls = ZoomControls(self.controller, self)

        store = self.controller.store
        for signal in (store.node_added, store.node_updated, store.node_removed,
                       store.connection_added, store.connection_removed,
                       store.selection_changed, store.graph_reset,
                       self.controller.viewport.changed, self.controller.overlay_changed):
            signal.connect(self._schedule_repaint)

        get_settings_manager().settings_changed.connect(self._on_settings_changed)

    def _schedule_repaint(self, *args):
        self.update()

    def _on_settings_changed(self, category, changes: dict):
        if category in (SettingsCategory.CANVAS, SettingsCategory.NODE):
            self.update()

    # ==========================================================================
    # GEOMETRY
    # ==========================================================================

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._place_overlay()

    def _place_overlay(self):
        self.zoom_controls.adjustSize()
        margin = 12
        self.zoom_controls.move(margin, self.height() - self.zoom_controls.height() - margin)

    # ==========================================================================
    # PAINTING
    # ==========================================================================

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        cs = self._canvas_settings

        painter.fillRect(self.rect(), _qcolor(cs.bg_color))

        view = self.controller.viewport.state
        transform = viewport_transform(view)
        painter.setTransform(transform)
        visible, _ = transform.inverted()
        visible_rect = visible.mapRect(QRectF(self.rect()))

        grid_pen = QPen(_qcolor(cs.grid_color), cs.grid_dot_size)
        grid_pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        self._grid_renderer.draw(painter, visible_rect, cs.grid_spacing, grid_pen,
                                 cs.max_visible_grid_dots)

        self._paint_connections(painter)
        self._paint_temp_connection(painter)

        selected = self.controller.store.selection
        for node in self.controller.store.nodes:
            self._paint_node(painter, node, node.id == selected)

        painter.end()

    def _paint_connections(self, painter: QPainter):
        cs = self._canvas_settings
        store = self.controller.store
        layout = self.controller.layout
        preview = self.controller.insertion_preview

        normal_pen = QPen(_qcolor(cs.connection_color), cs.connection_width)
        highlight_pen = QPen(_qcolor(cs.connection_highlight_color), cs.connection_width * 1.5)
        halo = _qcolor(cs.connection_highlight_color)
        halo.setAlpha(60)
        halo_pen = QPen(halo, cs.connection_bg_width)
        painter.setBrush(Qt.BrushStyle.NoBrush)

        for conn in store.connections:
            anchors = layout.connection_anchors(store, conn)
            if anchors is None:
                continue
            path = build_connection_path(*anchors)
            if conn == preview:
                painter.setPen(halo_pen)
                painter.drawPath(path)
                painter.setPen(highlight_pen)
            else:
                painter.setPen(normal_pen)
            painter.drawPath(path)

    def _paint_temp_connection(self, painter: QPainter):
        temp = self.controller.temp_connection
        if temp is None:
            return
        cs = self._canvas_settings
        pen = QPen(_qcolor(cs.temp_connection_color), cs.connection_width)
        pen.setStyle(Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.drawPath(build_connection_path(*temp))

    def _paint_node(self, painter: QPainter, node: Node, selected: bool):
        ns = self._node_settings
        layout = self.controller.layout
        config = NODE_TYPES.get(node.type)
        rect = layout.rect_of(node)

        # Body
        border = QColor(config.border_color)
        if selected:
            painter.setPen(QPen(_qcolor(ns.selection_color), 3.0))
        else:
            painter.setPen(QPen(border, 2.0))
        painter.setBrush(QBrush(QColor(config.color)))
        painter.drawRoundedRect(rect, ns.corner_radius, ns.corner_radius)

        # Header
        header = QRectF(rect.left(), rect.top(), rect.width(), ns.header_height)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(border))
        painter.drawRoundedRect(header, ns.corner_radius, ns.corner_radius)
        painter.drawRect(QRectF(header.left(), header.center().y(), header.width(), header.height() / 2))

        text_left = rect.left() + ns.padding
        text_width = rect.width() - 2 * ns.padding

        icon_size = header.height() * 0.55
        icon_rect = QRectF(text_left, header.center().y() - icon_size / 2, icon_size, icon_size)
        label_left = text_left
        if paint_node_icon(painter, config.icon, icon_rect, _qcolor(ns.muted_text_color)):
            label_left += icon_size + 6

        painter.setFont(self._label_font)
        painter.setPen(_qcolor(ns.muted_text_color))
        painter.drawText(QRectF(label_left, header.top(), text_left + text_width - label_left, header.height()),
                         Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, config.label)

        # Title
        y = header.bottom() + ns.padding
        painter.setFont(self._title_font)
        painter.setPen(_qcolor(ns.text_color))
        title = QFontMetricsF(self._title_font).elidedText(
            node.title, Qt.TextElideMode.ElideRight, text_width)
        painter.drawText(QRectF(text_left, y, text_width, ns.title_line_height),
                         Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, title)
        y += ns.title_line_height

        # Description
        lines = layout.description_lines(node)
        if lines:
            y += ns.section_spacing
            painter.setFont(self._label_font)
            painter.setPen(_qcolor(ns.muted_text_color))
            for line in lines:
                painter.drawText(QRectF(text_left, y, text_width, ns.description_line_height),
                                 Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, line)
                y += ns.description_line_height

        # Item and tag badges
        for badges, prefix in ((node.items, "◆ "), (node.tags, "#")):
            if badges:
                y += ns.section_spacing
                self._paint_badges(painter, [prefix + b for b in badges], text_left, y, text_width)
                y += ns.badge_row_height

        self._paint_ports(painter, node)

    def _paint_badges(self, painter: QPainter, labels, left: float, top: float, max_width: float):
        ns = self._node_settings
        metrics = QFontMetricsF(self._label_font)
        painter.setFont(self._label_font)
        height = ns.badge_row_height - 6
        x = left
        for label in labels:
            width = metrics.horizontalAdvance(label) + 12
            if x + width > left + max_width:
                painter.setPen(_qcolor(ns.muted_text_color))
                painter.drawText(QRectF(x, top, max_width - (x - left), height),
                                 Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, "…")
                break
            badge = QRectF(x, top + 3, width, height)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QColor(255, 255, 255, 200))
            painter.drawRoundedRect(badge, height / 2, height / 2)
            painter.setPen(_qcolor(ns.text_color))
            painter.drawText(badge, Qt.AlignmentFlag.AlignCenter, label)
            x += width + 4

    def _paint_ports(self, painter: QPainter, node: Node):
        ns = self._node_settings
        layout = self.controller.layout
        radius = ns.port_radius

        disconnect = self.controller.command_pressed and self.controller.store.incoming(node.id)
        input_border = _qcolor(ns.disconnect_color) if disconnect else _qcolor(ns.port_border_color)

        painter.setBrush(_qcolor(ns.port_fill_color))
        painter.setPen(QPen(input_border, 2.0))
        painter.drawEllipse(layout.input_anchor(node), radius, radius)
        painter.setPen(QPen(_qcolor(ns.port_border_color), 2.0))
        painter.drawEllipse(layout.output_anchor(node), radius, radius)

    # ==========================================================================
    # POINTER INPUT
    # ==========================================================================

    @staticmethod
    def _pointer(event: QMouseEvent) -> PointerEvent:
        return PointerEvent(pos=event.position(), button=event.button(), modifiers=event.modifiers())

    def mousePressEvent(self, event: QMouseEvent):
        self.setFocus(Qt.FocusReason.MouseFocusReason)
        self.controller.sync_modifiers(event.modifiers())
        if self.controller.mouse_press(self._pointer(event)):
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self.controller.mouse_move(self._pointer(event)):
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if self.controller.mouse_release(self._pointer(event)):
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        notches = event.angleDelta().y() / 120.0
        if notches:
            delta_y = -notches * self._canvas_settings.wheel_notch_delta
            self.controller.wheel(event.position(), delta_y)
        event.accept()

    # ==========================================================================
    # PALETTE DRAG & DROP
    # ==========================================================================

    @staticmethod
    def _dragged_type(event) -> Optional[NodeType]:
        mime = event.mimeData()
        if not mime.hasFormat(NODE_TYPE_MIME):
            return None
        return NODE_TYPES.parse(bytes(mime.data(NODE_TYPE_MIME)).decode("utf-8"))

    def dragEnterEvent(self, event: QDragEnterEvent):
        if self._dragged_type(event) is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event: QDragMoveEvent):
        if self._dragged_type(event) is None:
            event.ignore()
            return
        self.controller.palette_drag_move(event.position())
        event.acceptProposedAction()

    def dragLeaveEvent(self, event):
        self.controller.palette_drag_leave()
        event.accept()

    def dropEvent(self, event: QDropEvent):
        node_type = self._dragged_type(event)
        if node_type is None:
            log.warning("Ignoring drop of unknown node type")
            self.controller.palette_drag_leave()
            event.ignore()
            return
        self.controller.palette_drop(event.position(), node_type)
        event.acceptProposedAction()
        self.setFocus(Qt.FocusReason.OtherFocusReason)
