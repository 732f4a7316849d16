# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

History Manager - linear undo/redo over full-state snapshots.

The manager subscribes to ``GraphStore.graph_changed`` and appends one
snapshot per commit. Restoring a snapshot also commits, so a replay
flag swallows exactly that one recording.
"""

from typing import List, Optional

from PySide6.QtCore import QObject, Signal

from puzzflow.graph.model import GraphSnapshot
from puzzflow.graph.store import GraphStore
from puzzflow.settings import SettingsCategory, get_setting

from puzzflow.logger import get_logger
log = get_logger("History")


class HistoryManager(QObject):
    """
    Bounded snapshot list with a cursor.

    ``snapshots[cursor]`` always equals the store's current state while
    recording. Snapshot 0 is the state at construction (or the last
    ``clear()``).
    """

    history_changed = Signal(bool, bool)  # can_undo, can_redo

    def __init__(self, store: GraphStore, capacity: Optional[int] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._capacity = max(1, capacity if capacity is not None
                             else get_setting(SettingsCategory.CANVAS, "history_capacity", 50))
        self._snapshots: List[GraphSnapshot] = [store.snapshot()]
        self._cursor = 0
        self._replaying = False

        store.graph_changed.connect(self._on_graph_changed)

    # ==========================================================================
    # STATE
    # ==========================================================================

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def cursor(self) -> int:
        return self._cursor

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    @property
    def is_replaying(self) -> bool:
        return self._replaying

    # ==========================================================================
    # RECORDING
    # ==========================================================================

    def _on_graph_changed(self) -> None:
        if self._replaying:
            # The commit caused by our own restore()
            self._replaying = False
            return

        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(self._store.snapshot())
        self._cursor += 1

        overflow = len(self._snapshots) - self._capacity
        if overflow > 0:
            del self._snapshots[:overflow]
            self._cursor = min(self._cursor - overflow, self._capacity - 1)

        log.debug("Recorded snapshot %d/%d", self._cursor + 1, len(self._snapshots))
        self._emit_changed()

    # ==========================================================================
    # REPLAY
    # ==========================================================================

    def undo(self) -> bool:
        """Step back one snapshot. Returns False at the oldest snapshot."""
        if self._cursor <= 0:
            return False
        self._replay(self._cursor - 1)
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False at the newest snapshot."""
        if self._cursor >= len(self._snapshots) - 1:
            return False
        self._replay(self._cursor + 1)
        return True

    def _replay(self, index: int) -> None:
        self._replaying = True
        try:
            self._store.restore(self._snapshots[index])
        finally:
            self._replaying = False
        self._cursor = index
        log.debug("Restored snapshot %d/%d", index + 1, len(self._snapshots))
        self._emit_changed()

    def clear(self) -> None:
        """Drop all history and re-baseline at the store's current state."""
        self._snapshots = [self._store.snapshot()]
        self._cursor = 0
        self._emit_changed()

    def _emit_changed(self) -> None:
        self.history_changed.emit(self.can_undo, self.can_redo)
