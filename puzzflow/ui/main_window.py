# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Main window: palette | canvas | properties, a toolbar with file and
history actions, and a status bar fed from the log.
"""

import logging
import os
from typing import Optional

from PySide6.QtCore import QEvent, QObject
from PySide6.QtGui import QAction, QKeyEvent
from PySide6.QtWidgets import (
    QApplication, QFileDialog, QHBoxLayout, QLineEdit, QMainWindow, QMessageBox,
    QPlainTextEdit, QTextEdit, QToolBar, QWidget
)

from puzzflow.__about__ import __title__
from puzzflow.canvas.canvas_core import CanvasController
from puzzflow.canvas.canvas_states import KeyInput
from puzzflow.canvas.canvas_widget import CanvasWidget
from puzzflow.errors import GraphFormatError
from puzzflow.logger import add_log_callback, remove_log_callback, get_logger
from puzzflow.serializer import GraphSerializer
from puzzflow.ui.properties_panel import PropertiesPanel
from puzzflow.ui.sidebar import Sidebar

log = get_logger("MainWindow")


_TEXT_INPUT_WIDGETS = (QLineEdit, QTextEdit, QPlainTextEdit)


def is_text_input(widget: Optional[QObject]) -> bool:
    return isinstance(widget, _TEXT_INPUT_WIDGETS)


class MainWindow(QMainWindow):
    """
    Application shell.

    Key events are routed application-wide through ``eventFilter`` so the
    canvas shortcuts work wherever focus sits, and are tagged with
    whether a text field owns the keyboard.
    """

    FILE_FILTER = "PuzzFlow Files (*.json);;All Files (*)"

    def __init__(self, controller: Optional[CanvasController] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setWindowTitle(__title__)
        self.resize(1400, 860)

        self.controller = controller or CanvasController(parent=self)
        self.serializer = GraphSerializer()
        self._current_dir = ""

        central = QWidget(self)
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.sidebar = Sidebar(parent=central)
        self.canvas = CanvasWidget(self.controller, central)
        self.properties = PropertiesPanel(self.controller.store, central)
        layout.addWidget(self.sidebar)
        layout.addWidget(self.canvas, 1)
        layout.addWidget(self.properties)
        self.setCentralWidget(central)

        self._build_toolbar()

        self.controller.history.history_changed.connect(self._on_history_changed)
        self._on_history_changed(self.controller.history.can_undo, self.controller.history.can_redo)

        add_log_callback(self._on_log_message, level=logging.INFO)
        QApplication.instance().installEventFilter(self)
        self.canvas.setFocus()

    def _build_toolbar(self) -> None:
        toolbar = QToolBar("Main", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.import_action = QAction("Import", self)
        self.import_action.setToolTip("Import a flow from a JSON file")
        self.import_action.triggered.connect(self.import_flow)

        self.export_action = QAction("Export", self)
        self.export_action.setToolTip("Export the flow to a JSON file")
        self.export_action.triggered.connect(self.export_flow)

        # Shortcuts are handled by the canvas controller, not QAction
        self.undo_action = QAction("Undo", self)
        self.undo_action.setToolTip("Undo (Ctrl+Z)")
        self.undo_action.triggered.connect(self.controller.history.undo)

        self.redo_action = QAction("Redo", self)
        self.redo_action.setToolTip("Redo (Ctrl+Shift+Z)")
        self.redo_action.triggered.connect(self.controller.history.redo)

        for action in (self.import_action, self.export_action):
            toolbar.addAction(action)
        toolbar.addSeparator()
        for action in (self.undo_action, self.redo_action):
            toolbar.addAction(action)

    def _on_history_changed(self, can_undo: bool, can_redo: bool) -> None:
        self.undo_action.setEnabled(can_undo)
        self.redo_action.setEnabled(can_redo)

    def _on_log_message(self, level: str, tag: str, message: str) -> None:
        self.statusBar().showMessage(message, 5000)

    # ==========================================================================
    # KEY ROUTING
    # ==========================================================================

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if event.type() in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease) and self.isActiveWindow():
            focus = QApplication.focusWidget()
            # Each key event is delivered to the focus widget and its parents; route it once
            if obj is focus or (focus is None and obj is self):
                if self._route_key(event):
                    return True
        return super().eventFilter(obj, event)

    def _route_key(self, event: QKeyEvent) -> bool:
        key = KeyInput(
            key=event.key(),
            modifiers=event.modifiers(),
            text_input_focused=is_text_input(QApplication.focusWidget()),
            is_auto_repeat=event.isAutoRepeat(),
        )
        if event.type() == QEvent.Type.KeyPress:
            return self.controller.key_press(key)
        return self.controller.key_release(key)

    # ==========================================================================
    # FILE ACTIONS
    # ==========================================================================

    def export_flow(self) -> None:
        start = os.path.join(self._current_dir, self.serializer.default_filename())
        filepath, _ = QFileDialog.getSaveFileName(self, "Export Flow", start, self.FILE_FILTER)
        if not filepath:
            return
        if not os.path.splitext(filepath)[1]:
            filepath += ".json"

        if self.serializer.save_to_file(self.controller.store, filepath):
            self._current_dir = os.path.dirname(filepath)
        else:
            QMessageBox.warning(self, "Export failed", f"Could not write {filepath}.")

    def import_flow(self) -> None:
        filepath, _ = QFileDialog.getOpenFileName(self, "Import Flow", self._current_dir, self.FILE_FILTER)
        if not filepath:
            return
        try:
            self.serializer.load_from_file(self.controller.store, filepath)
        except GraphFormatError as e:
            log.warning("Import of %s failed: %s", filepath, e)
            QMessageBox.warning(self, "Import failed", str(e))
            return

        self._current_dir = os.path.dirname(filepath)
        QMessageBox.information(self, "Import", "Successfully imported puzzle flow!")

    def closeEvent(self, event) -> None:
        remove_log_callback(self._on_log_message)
        QApplication.instance().removeEventFilter(self)
        super().closeEvent(event)
