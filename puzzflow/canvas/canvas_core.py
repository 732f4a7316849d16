# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Canvas Controller
Single owner of the editor's interactive state. Widgets forward their
raw input here and repaint from the signals it (and the store and
viewport it owns) emits.

Responsibilities:
- State machine hosting (Idle, NodeDrag, ConnectionDrag, Pan)
- Modifier tracking (primary modifier for disconnect mode, Space for panning)
- Keyboard shortcuts (delete, undo, redo)
- Palette drag-over preview and drop
- Transient overlays (insertion preview, temporary connection)

The controller holds no widget references, so it runs headless.
"""

from typing import Optional, Tuple

from PySide6.QtCore import QObject, QPointF, Qt, Signal

from puzzflow.canvas.canvas_states import (
    CanvasInteractionState, IdleState, PanState, PointerEvent, KeyInput, PRIMARY_MODIFIERS
)
from puzzflow.canvas.geometry import NodeLayout, HitResult, hit_test_node, find_connection_near
from puzzflow.canvas.viewport import Viewport
from puzzflow.graph.history import HistoryManager
from puzzflow.graph.model import Connection, Node
from puzzflow.graph.store import GraphStore
from puzzflow.nodetypes import NodeType
from puzzflow.settings import CanvasSettings, SettingsCategory, get_settings_manager

from puzzflow.logger import get_logger
log = get_logger("Canvas")


_PRIMARY_KEYS = (Qt.Key.Key_Control.value, Qt.Key.Key_Meta.value)


class CanvasController(QObject):
    """
    Hosts the interaction state machine over a store, its history and a
    viewport.

    Signals:
        overlay_changed: insertion preview, temporary connection or
            disconnect-mode flag changed (repaint only, no graph change).
        state_changed: the interaction state was replaced.
    """

    overlay_changed = Signal()
    state_changed = Signal(object)

    def __init__(self,
                 store: Optional[GraphStore] = None,
                 history: Optional[HistoryManager] = None,
                 viewport: Optional[Viewport] = None,
                 layout: Optional[NodeLayout] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)

        self.settings: CanvasSettings = get_settings_manager().get_schema(SettingsCategory.CANVAS)

        self.store = store or GraphStore(parent=self)
        self.history = history or HistoryManager(self.store, parent=self)
        self.viewport = viewport or Viewport(parent=self)
        self.layout = layout or NodeLayout()

        self._insertion_preview: Optional[Connection] = None
        self._temp_connection: Optional[Tuple[QPointF, QPointF]] = None
        self._command_pressed = False
        self._space_pressed = False

        self._state: CanvasInteractionState = IdleState(self)

    # ==========================================================================
    # STATE MACHINE
    # ==========================================================================

    @property
    def state(self) -> CanvasInteractionState:
        return self._state

    def set_state(self, new_state: CanvasInteractionState) -> None:
        log.debug("State %r -> %r", self._state, new_state)
        self._state.on_exit()
        self._state = new_state
        self._state.on_enter()
        self.state_changed.emit(new_state)

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, IdleState)

    # ==========================================================================
    # OVERLAYS & MODIFIERS
    # ==========================================================================

    @property
    def insertion_preview(self) -> Optional[Connection]:
        return self._insertion_preview

    def set_insertion_preview(self, conn: Optional[Connection]) -> None:
        if conn != self._insertion_preview:
            self._insertion_preview = conn
            self.overlay_changed.emit()

    @property
    def temp_connection(self) -> Optional[Tuple[QPointF, QPointF]]:
        """``(start, end)`` of the connection being dragged, in content space."""
        return self._temp_connection

    def set_temp_connection(self, start: Optional[QPointF], end: Optional[QPointF] = None) -> None:
        self._temp_connection = None if start is None else (QPointF(start), QPointF(end))
        self.overlay_changed.emit()

    @property
    def command_pressed(self) -> bool:
        return self._command_pressed

    @property
    def space_pressed(self) -> bool:
        return self._space_pressed

    # ==========================================================================
    # COORDINATES & HIT-TESTING
    # ==========================================================================

    def to_content(self, screen_pos: QPointF) -> QPointF:
        return self.viewport.screen_to_content(screen_pos)

    def hit_test(self, content_pos: QPointF) -> HitResult:
        return hit_test_node(self.store.nodes, self.layout, content_pos)

    # ==========================================================================
    # POINTER INPUT
    # ==========================================================================

    def mouse_press(self, event: PointerEvent) -> bool:
        return self._state.on_mouse_press(event)

    def mouse_move(self, event: PointerEvent) -> bool:
        return self._state.on_mouse_move(event)

    def mouse_release(self, event: PointerEvent) -> bool:
        return self._state.on_mouse_release(event)

    def wheel(self, screen_pos: QPointF, delta_y: float) -> None:
        self.viewport.wheel(screen_pos, delta_y)

    def zoom_in(self) -> None:
        self.viewport.zoom_in()

    def zoom_out(self) -> None:
        self.viewport.zoom_out()

    def reset_view(self) -> None:
        self.viewport.reset()

    # ==========================================================================
    # KEYBOARD
    # ==========================================================================

    def key_press(self, event: KeyInput) -> bool:
        """
        Returns True when the key was consumed. Nothing is consumed while a
        text field has focus, so typing Space, Backspace or Ctrl+Z keeps
        working in the inspector.
        """
        if event.key in _PRIMARY_KEYS:
            self._set_command(True)
            return False
        if event.text_input_focused:
            return False

        if event.key == Qt.Key.Key_Space.value:
            if not event.is_auto_repeat and not self._space_pressed:
                self._space_pressed = True
                log.debug("Space held: panning enabled")
            return True

        return self._state.on_key_press(event)

    def key_release(self, event: KeyInput) -> bool:
        if event.key in _PRIMARY_KEYS:
            self._set_command(False)
            return False

        if event.key == Qt.Key.Key_Space.value and not event.is_auto_repeat:
            if not self._space_pressed:
                return False
            self._space_pressed = False
            if isinstance(self._state, PanState):
                self.set_state(IdleState(self))
            return True
        return False

    def sync_modifiers(self, modifiers) -> None:
        """Resynchronise the primary modifier flag, e.g. after a focus change."""
        self._set_command(any(modifiers & m for m in PRIMARY_MODIFIERS))

    def _set_command(self, pressed: bool) -> None:
        if pressed != self._command_pressed:
            self._command_pressed = pressed
            self.overlay_changed.emit()

    # ==========================================================================
    # PALETTE DRAG & DROP
    # ==========================================================================

    def _preview_at(self, screen_pos: QPointF) -> QPointF:
        content = self.to_content(screen_pos)
        self.set_insertion_preview(find_connection_near(
            self.store, self.layout, content, self.settings.drop_hit_threshold))
        return content

    def palette_drag_move(self, screen_pos: QPointF) -> None:
        """Update the insertion preview while a palette item hovers the canvas."""
        self._preview_at(screen_pos)

    def palette_drag_leave(self) -> None:
        self.set_insertion_preview(None)

    def palette_drop(self, screen_pos: QPointF, node_type: NodeType) -> Node:
        """
        Create a node of ``node_type`` so the drop point sits at the drop
        offset inside it, splice it into the previewed connection if any,
        and select it. One commit.
        """
        content = self._preview_at(screen_pos)
        position = QPointF(content.x() - self.settings.drop_offset_x,
                           content.y() - self.settings.drop_offset_y)
        preview = self._insertion_preview

        with self.store.batch():
            node = self.store.create_node(node_type, position)
            if preview is not None:
                self.store.insert_node_between(node.id, preview.source, preview.target)
            self.store.select(node.id)

        self.set_insertion_preview(None)
        log.info("Added %s node %d", node.type.value, node.id)
        return node
