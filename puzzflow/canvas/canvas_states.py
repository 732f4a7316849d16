# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Canvas Interaction States

The canvas controller hosts exactly one state at a time. Each pointer
gesture starts in ``IdleState``, which hit-tests the press and hands
over to the state owning the rest of the gesture:

- ``NodeDragState``: move a node, preview and perform insert-on-connection
- ``ConnectionDragState``: drag a new connection out of an output port
- ``PanState``: drag the viewport

States receive ``PointerEvent`` objects in screen space and convert
through the controller. A gesture commits at most one history entry:
node drags run inside a store batch opened in ``on_enter`` and closed
in ``on_exit``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import Qt, QPointF

from puzzflow.canvas.geometry import HitKind, find_connection_near
from puzzflow.graph.model import Connection

from puzzflow.logger import get_logger
log = get_logger("CanvasStates")


# =============================================================================
# INPUT RECORDS
# =============================================================================

@dataclass
class PointerEvent:
    """Toolkit-neutral pointer event in screen (widget) coordinates."""
    pos: QPointF
    button: Qt.MouseButton = Qt.MouseButton.LeftButton
    modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier


@dataclass
class KeyInput:
    """
    Key press or release.

    ``text_input_focused`` is supplied by the window, which knows whether a
    text field currently owns the keyboard.
    """
    key: int
    modifiers: Qt.KeyboardModifier = Qt.KeyboardModifier.NoModifier
    text_input_focused: bool = False
    is_auto_repeat: bool = False

    def __post_init__(self):
        # QKeyEvent.key() gives an int, tests pass Qt.Key members
        self.key = getattr(self.key, "value", self.key)


PRIMARY_MODIFIERS = (Qt.KeyboardModifier.ControlModifier, Qt.KeyboardModifier.MetaModifier)


def has_primary_modifier(modifiers) -> bool:
    """Ctrl on Linux/Windows, Cmd on macOS (Qt reports it as Control or Meta)."""
    return any(modifiers & m for m in PRIMARY_MODIFIERS)


# =============================================================================
# STATE BASE CLASS
# =============================================================================

class CanvasInteractionState(ABC):
    """Base class for canvas interaction states."""

    def __init__(self, canvas):
        self.canvas = canvas

    @abstractmethod
    def on_mouse_press(self, event: PointerEvent) -> bool:
        """Handle mouse press. Return True to consume event."""

    @abstractmethod
    def on_mouse_move(self, event: PointerEvent) -> bool:
        """Handle mouse move. Return True to consume event."""

    @abstractmethod
    def on_mouse_release(self, event: PointerEvent) -> bool:
        """Handle mouse release. Return True to consume event."""

    def on_key_press(self, event: KeyInput) -> bool:
        """Handle shortcuts. Only the idle state reacts to them."""
        return False

    def on_enter(self):
        """Called when entering this state."""

    def on_exit(self):
        """Called when exiting this state."""

    def __repr__(self) -> str:
        return type(self).__name__


# =============================================================================
# IDLE STATE
# =============================================================================

class IdleState(CanvasInteractionState):
    """
    Routes a press to the state that owns the gesture.

    Priority: Space-held pan, output port, input port, node body,
    background.
    """

    def on_mouse_press(self, event: PointerEvent) -> bool:
        if event.button != Qt.MouseButton.LeftButton:
            return False

        canvas = self.canvas
        if canvas.space_pressed:
            canvas.set_state(PanState(canvas, event.pos))
            return True

        content = canvas.to_content(event.pos)
        hit = canvas.hit_test(content)

        if hit.kind == HitKind.OUTPUT_PORT:
            canvas.set_state(ConnectionDragState(canvas, hit.node_id, content))
        elif hit.kind == HitKind.INPUT_PORT:
            self._disconnect_input(hit.node_id)
        elif hit.kind == HitKind.NODE_BODY:
            detach = canvas.command_pressed or has_primary_modifier(event.modifiers)
            canvas.set_state(NodeDragState(canvas, hit.node_id, content, detach=detach))
        else:
            canvas.set_state(PanState(canvas, event.pos, clear_selection=True))
        return True

    def _disconnect_input(self, node_id: int) -> None:
        """Remove the first incoming connection of ``node_id``, if any."""
        incoming = self.canvas.store.incoming(node_id)
        if incoming:
            conn = incoming[0]
            log.debug("Detaching %d -> %d from input port", conn.source, conn.target)
            self.canvas.store.remove_connection(conn.source, conn.target)

    def on_mouse_move(self, event: PointerEvent) -> bool:
        return False

    def on_mouse_release(self, event: PointerEvent) -> bool:
        return False

    def on_key_press(self, event: KeyInput) -> bool:
        canvas = self.canvas
        key = event.key

        if key in (Qt.Key.Key_Delete.value, Qt.Key.Key_Backspace.value):
            selected = canvas.store.selection
            if selected is None:
                return False
            canvas.store.delete_node(selected)
            return True

        if key == Qt.Key.Key_Z.value and has_primary_modifier(event.modifiers):
            if event.modifiers & Qt.KeyboardModifier.ShiftModifier:
                canvas.history.redo()
            else:
                canvas.history.undo()
            return True

        return False


# =============================================================================
# NODE DRAG STATE
# =============================================================================

class NodeDragState(CanvasInteractionState):
    """
    Moves one node and previews insertion into a connection below it.

    With ``detach`` the node's incoming connections are cut before the
    move starts (disconnect mode).
    """

    def __init__(self, canvas, node_id: int, press_content: QPointF, detach: bool = False):
        super().__init__(canvas)
        self.node_id = node_id
        self._press = QPointF(press_content)
        self._detach = detach
        self._offset = QPointF()
        self._threshold = canvas.settings.drag_hit_threshold

    def on_enter(self):
        store = self.canvas.store
        store.begin_batch()
        if self._detach:
            removed = store.remove_incoming_connections(self.node_id)
            log.debug("Disconnect mode: removed %d incoming connection(s)", removed)
        store.select(self.node_id)

        node = store.node(self.node_id)
        self._offset = self._press - node.position

    def on_mouse_press(self, event: PointerEvent) -> bool:
        return True

    def on_mouse_move(self, event: PointerEvent) -> bool:
        canvas = self.canvas
        content = canvas.to_content(event.pos)
        target = QPointF(max(0.0, content.x() - self._offset.x()),
                         max(0.0, content.y() - self._offset.y()))
        canvas.store.update_node(self.node_id, position=target)

        node = canvas.store.node(self.node_id)
        canvas.set_insertion_preview(find_connection_near(
            canvas.store, canvas.layout, canvas.layout.center_of(node),
            self._threshold, exclude_node=self.node_id,
        ))
        return True

    def on_mouse_release(self, event: PointerEvent) -> bool:
        preview: Optional[Connection] = self.canvas.insertion_preview
        if preview is not None:
            self.canvas.store.insert_node_between(self.node_id, preview.source, preview.target)
        self.canvas.set_state(IdleState(self.canvas))
        return True

    def on_exit(self):
        self.canvas.set_insertion_preview(None)
        self.canvas.store.end_batch()


# =============================================================================
# CONNECTION DRAG STATE
# =============================================================================

class ConnectionDragState(CanvasInteractionState):
    """
    Floating connection from an output port to the pointer.

    Dropping on either port of another node connects ``source -> target``;
    anything else cancels without touching the graph.
    """

    def __init__(self, canvas, source_id: int, press_content: QPointF):
        super().__init__(canvas)
        self.source_id = source_id
        self._end = QPointF(press_content)

    def on_enter(self):
        self._update_temp()

    def _update_temp(self):
        source = self.canvas.store.node(self.source_id)
        self.canvas.set_temp_connection(self.canvas.layout.output_anchor(source), self._end)

    def on_mouse_press(self, event: PointerEvent) -> bool:
        return True

    def on_mouse_move(self, event: PointerEvent) -> bool:
        self._end = self.canvas.to_content(event.pos)
        self._update_temp()
        return True

    def on_mouse_release(self, event: PointerEvent) -> bool:
        canvas = self.canvas
        hit = canvas.hit_test(canvas.to_content(event.pos))
        if hit.is_port and hit.node_id != self.source_id:
            canvas.store.create_connection(self.source_id, hit.node_id)
        else:
            log.debug("Connection drag from %d cancelled", self.source_id)
        canvas.set_state(IdleState(canvas))
        return True

    def on_exit(self):
        self.canvas.set_temp_connection(None)


# =============================================================================
# PAN STATE
# =============================================================================

class PanState(CanvasInteractionState):
    """
    Drags the viewport. A pan that started on the background clears the
    selection when the button is released.
    """

    def __init__(self, canvas, press_pos: QPointF, clear_selection: bool = False):
        super().__init__(canvas)
        self._press_pos = QPointF(press_pos)
        self._clear_selection = clear_selection

    def on_enter(self):
        self.canvas.viewport.begin_pan(self._press_pos)

    def on_mouse_press(self, event: PointerEvent) -> bool:
        return True

    def on_mouse_move(self, event: PointerEvent) -> bool:
        self.canvas.viewport.update_pan(event.pos)
        return True

    def on_mouse_release(self, event: PointerEvent) -> bool:
        if self._clear_selection:
            self.canvas.store.select(None)
        self.canvas.set_state(IdleState(self.canvas))
        return True

    def on_exit(self):
        self.canvas.viewport.end_pan()
