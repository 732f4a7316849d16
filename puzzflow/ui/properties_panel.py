# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Properties panel: inspector for the selected node.
"""

from typing import Optional

from PySide6.QtWidgets import (
    QFrame, QHBoxLayout, QLabel, QLineEdit, QMessageBox, QPlainTextEdit,
    QToolButton, QVBoxLayout, QWidget
)

from puzzflow.canvas.node_icons import node_icon_pixmap
from puzzflow.graph.store import GraphStore
from puzzflow.graph.traversal import available_items, dependency_ids
from puzzflow.nodetypes import NodeType, NODE_TYPES

from puzzflow.logger import get_logger
log = get_logger("Properties")


def _clear_layout(layout) -> None:
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.deleteLater()


def _section_label(text: str, parent: QWidget) -> QLabel:
    label = QLabel(text, parent)
    label.setStyleSheet("font-weight: bold; color: #6E7480;")
    return label


def _hint_label(text: str, parent: QWidget) -> QLabel:
    label = QLabel(text, parent)
    label.setWordWrap(True)
    label.setStyleSheet("color: #8A909C; font-size: 11px;")
    return label


class _Chip(QFrame):
    """Rounded label with an optional remove button."""

    def __init__(self, text: str, on_remove=None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("Chip")
        self.setStyleSheet("#Chip { background: #EEF0F4; border-radius: 10px; }")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(8, 2, 4, 2)
        layout.addWidget(QLabel(text, self))
        if on_remove is not None:
            btn = QToolButton(self)
            btn.setText("×")
            btn.setAutoRaise(True)
            btn.clicked.connect(on_remove)
            layout.addWidget(btn)


class PropertiesPanel(QFrame):
    """
    Edits title, description and tags of the selected node and shows its
    items and dependency count. Hidden while nothing is selected.

    Edits go straight to the store; store signals drive the refresh, with
    the editors' own signals blocked so a refresh never writes back.
    """

    def __init__(self, store: GraphStore, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self._store = store
        self.setObjectName("PropertiesPanel")
        self.setFixedWidth(280)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(8)

        # Header
        header = QHBoxLayout()
        header.addWidget(QLabel("<b>Node Properties</b>", self))
        header.addStretch(1)
        self.delete_button = QToolButton(self)
        self.delete_button.setText("🗑")
        self.delete_button.setToolTip("Delete node")
        self.delete_button.clicked.connect(self._on_delete)
        header.addWidget(self.delete_button)
        layout.addLayout(header)

        # Type
        layout.addWidget(_section_label("Type", self))
        type_row = QHBoxLayout()
        self.type_icon = QLabel(self)
        type_row.addWidget(self.type_icon)
        self.type_label = QLabel(self)
        self.type_label.setContentsMargins(8, 4, 8, 4)
        type_row.addWidget(self.type_label, 1)
        layout.addLayout(type_row)

        # Title
        layout.addWidget(_section_label("Title", self))
        self.title_edit = QLineEdit(self)
        self.title_edit.textEdited.connect(self._on_title_edited)
        layout.addWidget(self.title_edit)

        # Description
        layout.addWidget(_section_label("Description", self))
        self.description_edit = QPlainTextEdit(self)
        self.description_edit.setPlaceholderText("Add a description...")
        self.description_edit.setFixedHeight(90)
        self.description_edit.textChanged.connect(self._on_description_changed)
        layout.addWidget(self.description_edit)

        # Items
        self.items_title = _section_label("Item Obtained", self)
        self.items_hint = _hint_label("", self)
        self.items_box = QVBoxLayout()
        layout.addWidget(self.items_title)
        layout.addWidget(self.items_hint)
        layout.addLayout(self.items_box)

        # Tags
        layout.addWidget(_section_label("Tags", self))
        self.tags_box = QVBoxLayout()
        layout.addLayout(self.tags_box)
        tag_row = QHBoxLayout()
        self.tag_edit = QLineEdit(self)
        self.tag_edit.setPlaceholderText("Add tag...")
        self.tag_edit.returnPressed.connect(self._on_add_tag)
        tag_row.addWidget(self.tag_edit)
        add_tag = QToolButton(self)
        add_tag.setText("+")
        add_tag.setToolTip("Add tag")
        add_tag.clicked.connect(self._on_add_tag)
        tag_row.addWidget(add_tag)
        layout.addLayout(tag_row)

        # Dependencies
        self.dependencies_title = _section_label("Dependencies", self)
        self.dependencies_label = QLabel(self)
        layout.addWidget(self.dependencies_title)
        layout.addWidget(self.dependencies_label)

        layout.addStretch(1)

        for signal in (store.selection_changed, store.node_updated, store.node_removed,
                       store.connection_added, store.connection_removed, store.graph_reset):
            signal.connect(self.refresh)

        self.refresh()

    # ==========================================================================
    # REFRESH
    # ==========================================================================

    def refresh(self, *args) -> None:
        node = self._store.selected_node
        self.setVisible(node is not None)
        if node is None:
            return

        config = NODE_TYPES.get(node.type)
        self.type_icon.setPixmap(node_icon_pixmap(config.icon, 18))
        self.type_label.setText(config.label)
        self.type_label.setStyleSheet(f"background: {config.color}; border-radius: 4px;")

        self.title_edit.setPlaceholderText(config.default_title)
        if self.title_edit.text() != node.title:
            self.title_edit.setText(node.title)
        if self.description_edit.toPlainText() != node.description:
            self.description_edit.blockSignals(True)
            self.description_edit.setPlainText(node.description)
            self.description_edit.blockSignals(False)

        self._refresh_items(node)
        self._refresh_tags(node)

        count = len(dependency_ids(self._store, node.id))
        self.dependencies_title.setVisible(count > 0)
        self.dependencies_label.setVisible(count > 0)
        self.dependencies_label.setText(f"{count} node{'s' if count != 1 else ''}")

    def _refresh_items(self, node) -> None:
        _clear_layout(self.items_box)
        if node.type is NodeType.GET_ITEM:
            self.items_title.setText("Item Obtained")
            self.items_hint.setText("This item will be available in all future connected nodes")
            items = node.items
        else:
            self.items_title.setText("Available Items")
            self.items_hint.setText("Items collected from previous nodes")
            items = available_items(self._store, node.id)

        visible = node.type is NodeType.GET_ITEM or bool(items)
        self.items_title.setVisible(visible)
        self.items_hint.setVisible(visible)
        for item in items:
            self.items_box.addWidget(_Chip(item, parent=self))

    def _refresh_tags(self, node) -> None:
        _clear_layout(self.tags_box)
        for index, tag in enumerate(node.tags):
            self.tags_box.addWidget(_Chip(tag, on_remove=lambda _=False, i=index: self._on_remove_tag(i),
                                          parent=self))

    # ==========================================================================
    # EDITS
    # ==========================================================================

    def _on_title_edited(self, text: str) -> None:
        if self._store.selection is not None:
            self._store.set_title(self._store.selection, text)

    def _on_description_changed(self) -> None:
        if self._store.selection is not None:
            self._store.update_node(self._store.selection, description=self.description_edit.toPlainText())

    def _on_add_tag(self) -> None:
        node = self._store.selected_node
        tag = self.tag_edit.text().strip()
        if node is None or not tag:
            return
        self._store.update_node(node.id, tags=node.tags + [tag])
        self.tag_edit.clear()

    def _on_remove_tag(self, index: int) -> None:
        node = self._store.selected_node
        if node is None or not 0 <= index < len(node.tags):
            return
        self._store.update_node(node.id, tags=[t for i, t in enumerate(node.tags) if i != index])

    def _on_delete(self) -> None:
        node = self._store.selected_node
        if node is None:
            return
        answer = QMessageBox.question(
            self, "Delete node", "Are you sure you want to delete this node?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        if answer == QMessageBox.StandardButton.Yes:
            log.info("Deleting node %d", node.id)
            self._store.delete_node(node.id)
