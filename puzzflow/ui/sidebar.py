# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Palette sidebar: one draggable button per node type, grouped in the
registry's sections.
"""

from typing import Optional

from PySide6.QtCore import Qt, QPoint
from PySide6.QtGui import QDrag, QMouseEvent
from PySide6.QtWidgets import QApplication, QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from puzzflow.canvas.canvas_widget import node_type_mime_data
from puzzflow.canvas.node_icons import node_icon_pixmap
from puzzflow.nodetypes import NodeType, NodeTypeRegistry, NODE_TYPES

from puzzflow.logger import get_logger
log = get_logger("Sidebar")


class NodeTypeButton(QFrame):
    """Palette entry. Pressing and dragging starts a copy drag of the type name."""

    def __init__(self, node_type: NodeType, registry: NodeTypeRegistry, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.node_type = node_type
        config = registry.get(node_type)
        self._press_pos: Optional[QPoint] = None

        self.setObjectName("NodeTypeButton")
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        self.setToolTip(f"Drag onto the canvas to add a {config.label} node")
        self.setStyleSheet(
            f"#NodeTypeButton {{ background: {config.color}; border: 2px solid {config.border_color};"
            f" border-radius: 6px; }}"
        )

        layout = QHBoxLayout(self)
        layout.setContentsMargins(10, 6, 10, 6)
        self.icon_label = QLabel(self)
        self.icon_label.setPixmap(node_icon_pixmap(config.icon, 18))
        layout.addWidget(self.icon_label)
        layout.addWidget(QLabel(config.label, self), 1)

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._press_pos is None or not (event.buttons() & Qt.MouseButton.LeftButton):
            return
        moved = (event.position().toPoint() - self._press_pos).manhattanLength()
        if moved < QApplication.startDragDistance():
            return

        self._press_pos = None
        drag = QDrag(self)
        drag.setMimeData(node_type_mime_data(self.node_type))
        drag.setPixmap(self.grab())
        drag.setHotSpot(event.position().toPoint())
        log.debug("Palette drag: %s", self.node_type.value)
        drag.exec(Qt.DropAction.CopyAction)

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._press_pos = None
        super().mouseReleaseEvent(event)


class Sidebar(QFrame):

    def __init__(self, registry: Optional[NodeTypeRegistry] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        registry = registry or NODE_TYPES
        self.setObjectName("Sidebar")
        self.setFixedWidth(200)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        self.buttons = {}
        for section, types in registry.sections().items():
            title = QLabel(section, self)
            title.setStyleSheet("font-weight: bold; color: #6E7480; margin-top: 6px;")
            layout.addWidget(title)
            for node_type in types:
                button = NodeTypeButton(node_type, registry, self)
                self.buttons[node_type] = button
                layout.addWidget(button)

        layout.addStretch(1)
