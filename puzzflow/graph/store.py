# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Graph Store: canonical owner of nodes, connections and the selection.

Signals come in two flavours:

- Fine-grained (``node_added``, ``node_updated``, ``connection_removed`` ...)
  fire immediately after the state they describe is consistent, and
  drive repainting.
- ``graph_changed`` is the commit signal. It fires once per atomic
  mutation, or once per outermost batch that changed anything, and is
  what the history manager records.

Operations on ids that do not exist are silent no-ops.
"""

from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, QPointF, Signal

from puzzflow.graph.model import Node, Connection, GraphSnapshot
from puzzflow.nodetypes import NodeType, NodeTypeRegistry, NODE_TYPES

from puzzflow.logger import get_logger
log = get_logger("GraphStore")


_UPDATABLE_FIELDS = frozenset({"title", "description", "position", "items", "tags", "dependencies"})


class GraphStore(QObject):
    """
    Owns the flow graph and enforces its structural invariants:

    - node ids are unique and never reused (monotonic counter)
    - at most one connection per ordered ``(source, target)`` pair
    - every connection references two existing nodes
    - the selection references an existing node or is None
    """

    node_added = Signal(object)          # Node
    node_updated = Signal(object)        # Node
    node_removed = Signal(object)        # node id
    connection_added = Signal(object)    # Connection
    connection_removed = Signal(object)  # Connection
    selection_changed = Signal(object)   # Optional[int]
    graph_reset = Signal()
    graph_changed = Signal()

    def __init__(self, registry: Optional[NodeTypeRegistry] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._registry = registry or NODE_TYPES
        self._nodes: Dict[int, Node] = {}
        self._connections: List[Connection] = []
        self._next_id = 1
        self._selection: Optional[int] = None

        self._batch_depth = 0
        self._dirty = False

    # ==========================================================================
    # READ ACCESS
    # ==========================================================================

    @property
    def nodes(self) -> List[Node]:
        """Nodes in creation (and paint) order. Treat the objects as read-only."""
        return list(self._nodes.values())

    @property
    def connections(self) -> List[Connection]:
        return list(self._connections)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def selection(self) -> Optional[int]:
        return self._selection

    @property
    def selected_node(self) -> Optional[Node]:
        return self._nodes.get(self._selection) if self._selection is not None else None

    def node(self, node_id: int) -> Optional[Node]:
        return self._nodes.get(node_id)

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def has_connection(self, source: int, target: int) -> bool:
        return Connection(source, target) in self._connections

    def incoming(self, node_id: int) -> List[Connection]:
        return [c for c in self._connections if c.target == node_id]

    def outgoing(self, node_id: int) -> List[Connection]:
        return [c for c in self._connections if c.source == node_id]

    # ==========================================================================
    # BATCHING
    # ==========================================================================

    def begin_batch(self) -> None:
        """Defer ``graph_changed`` until the matching ``end_batch``."""
        self._batch_depth += 1

    def end_batch(self) -> None:
        if self._batch_depth == 0:
            log.warning("end_batch() without begin_batch()")
            return
        self._batch_depth -= 1
        if self._batch_depth == 0 and self._dirty:
            self._dirty = False
            self.graph_changed.emit()

    @contextmanager
    def batch(self):
        """Group several mutations into a single commit."""
        self.begin_batch()
        try:
            yield self
        finally:
            self.end_batch()

    @property
    def in_batch(self) -> bool:
        return self._batch_depth > 0

    def _commit(self) -> None:
        if self._batch_depth:
            self._dirty = True
        else:
            self.graph_changed.emit()

    # ==========================================================================
    # NODES
    # ==========================================================================

    def create_node(self, node_type: NodeType, position: QPointF) -> Node:
        """Create a node with the type's default title and append it."""
        node_type = NodeType(node_type)
        title = self._registry.default_title(node_type)
        node = Node(
            id=self._next_id,
            type=node_type,
            title=title,
            position=QPointF(position),
            items=[title] if node_type is NodeType.GET_ITEM else [],
        )
        self._nodes[node.id] = node
        self._next_id += 1

        log.debug("Created node %d (%s)", node.id, node_type.value)
        self.node_added.emit(node)
        self._commit()
        return node

    def update_node(self, node_id: int, **fields) -> None:
        """
        Merge ``fields`` into a node. Only values that differ are applied;
        a call that changes nothing does not commit.
        """
        node = self._nodes.get(node_id)
        if node is None:
            log.debug("update_node: unknown node %s", node_id)
            return

        changed = False
        for key, value in fields.items():
            if key not in _UPDATABLE_FIELDS:
                log.debug("update_node: ignoring field '%s'", key)
                continue
            if key == "position":
                value = QPointF(value)
            elif isinstance(value, (list, tuple)):
                value = list(value)
            if getattr(node, key) != value:
                setattr(node, key, value)
                changed = True

        if changed:
            self.node_updated.emit(node)
            self._commit()

    def set_title(self, node_id: int, title: str) -> None:
        """Set a node's title, keeping a GET_ITEM node's items in sync."""
        node = self._nodes.get(node_id)
        if node is None:
            return
        if node.type is NodeType.GET_ITEM:
            stripped = title.strip()
            self.update_node(node_id, title=title, items=[stripped] if stripped else [])
        else:
            self.update_node(node_id, title=title)

    def delete_node(self, node_id: int) -> None:
        """Remove a node together with every connection touching it."""
        if node_id not in self._nodes:
            log.debug("delete_node: unknown node %s", node_id)
            return

        self._nodes.pop(node_id)
        removed = [c for c in self._connections if c.touches(node_id)]
        self._connections = [c for c in self._connections if not c.touches(node_id)]
        clear_selection = self._selection == node_id
        if clear_selection:
            self._selection = None

        for conn in removed:
            self.connection_removed.emit(conn)
        self.node_removed.emit(node_id)
        if clear_selection:
            self.selection_changed.emit(None)

        log.debug("Deleted node %d (%d connections)", node_id, len(removed))
        self._commit()

    # ==========================================================================
    # CONNECTIONS
    # ==========================================================================

    def create_connection(self, source: int, target: int) -> bool:
        """
        Add ``source -> target``. Duplicates, self-loops and unknown
        endpoints are ignored.

        Returns:
            True if a connection was added.
        """
        if self._add_connection(source, target):
            self._commit()
            return True
        return False

    def remove_connection(self, source: int, target: int) -> bool:
        if self._remove_connection(source, target):
            self._commit()
            return True
        return False

    def remove_incoming_connections(self, node_id: int) -> int:
        """Remove every connection ending at ``node_id`` in one commit."""
        incoming = self.incoming(node_id)
        for conn in incoming:
            self._remove_connection(conn.source, conn.target)
        if incoming:
            self._commit()
        return len(incoming)

    def insert_node_between(self, new_node_id: int, source: int, target: int) -> None:
        """
        Replace ``source -> target`` with ``source -> new`` and ``new -> target``.

        The removal is best-effort: when the original pair does not exist
        the two new connections are still added.
        """
        if not all(i in self._nodes for i in (new_node_id, source, target)):
            log.debug("insert_node_between: unknown node in (%s, %s, %s)",
                      new_node_id, source, target)
            return

        changed = self._remove_connection(source, target)
        changed = self._add_connection(source, new_node_id) or changed
        changed = self._add_connection(new_node_id, target) or changed
        if changed:
            log.debug("Inserted node %d between %d and %d", new_node_id, source, target)
            self._commit()

    def _add_connection(self, source: int, target: int) -> bool:
        if source == target or source not in self._nodes or target not in self._nodes:
            return False
        conn = Connection(source, target)
        if conn in self._connections:
            return False
        self._connections.append(conn)
        self.connection_added.emit(conn)
        return True

    def _remove_connection(self, source: int, target: int) -> bool:
        conn = Connection(source, target)
        if conn not in self._connections:
            return False
        self._connections.remove(conn)
        self.connection_removed.emit(conn)
        return True

    # ==========================================================================
    # SELECTION
    # ==========================================================================

    def select(self, node_id: Optional[int]) -> None:
        if node_id is not None and node_id not in self._nodes:
            return
        if node_id == self._selection:
            return
        self._selection = node_id
        self.selection_changed.emit(node_id)
        self._commit()

    # ==========================================================================
    # WHOLE-GRAPH STATE
    # ==========================================================================

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=tuple(node.copy() for node in self._nodes.values()),
            connections=tuple(self._connections),
            next_id=self._next_id,
            selection=self._selection,
        )

    def restore(self, snapshot: GraphSnapshot) -> None:
        """
        Replace the whole state with ``snapshot``.

        Always emits ``graph_changed`` exactly once, outside of any batch.
        """
        self._nodes = {node.id: node.copy() for node in snapshot.nodes}
        self._connections = list(snapshot.connections)
        self._next_id = snapshot.next_id
        self._selection = snapshot.selection if snapshot.selection in self._nodes else None

        self.graph_reset.emit()
        self.selection_changed.emit(self._selection)
        self.graph_changed.emit()

    def load(self, nodes: Iterable[Node], connections: Iterable[Connection], next_id: int) -> None:
        """
        Replace the graph with imported content and clear the selection.

        Connections with unknown endpoints or duplicates are dropped, and
        the id counter is raised above every loaded id so ids stay unique.
        """
        loaded: Dict[int, Node] = {}
        for node in nodes:
            loaded[node.id] = node.copy()

        kept: List[Connection] = []
        for conn in connections:
            if conn.source in loaded and conn.target in loaded \
                    and conn.source != conn.target and conn not in kept:
                kept.append(conn)

        dropped = 0
        if isinstance(connections, (list, tuple)):
            dropped = len(connections) - len(kept)
        if dropped:
            log.warning("Dropped %d invalid connection(s) while loading", dropped)

        self.restore(GraphSnapshot(
            nodes=tuple(loaded.values()),
            connections=tuple(kept),
            next_id=max([next_id] + [i + 1 for i in loaded]),
            selection=None,
        ))
        log.info("Loaded %d nodes and %d connections", len(loaded), len(kept))

    def clear(self) -> None:
        self.restore(GraphSnapshot(nodes=(), connections=(), next_id=1, selection=None))
