# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Graph data model: nodes, connections and history snapshots.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from PySide6.QtCore import QPointF

from puzzflow.nodetypes import NodeType


@dataclass
class Node:
    """
    A single flow-graph node.

    ``position`` is the top-left corner in content space. For GET_ITEM
    nodes ``items`` mirrors the title (see ``GraphStore.set_title``).
    """
    id: int
    type: NodeType
    title: str
    description: str = ""
    position: QPointF = field(default_factory=QPointF)
    items: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    dependencies: List[int] = field(default_factory=list)

    def copy(self) -> "Node":
        """Deep copy; QPointF and the lists are never shared."""
        return replace(
            self,
            position=QPointF(self.position),
            items=list(self.items),
            tags=list(self.tags),
            dependencies=list(self.dependencies),
        )


@dataclass(frozen=True)
class Connection:
    """Directed edge: ``source`` produces what ``target`` depends on."""
    source: int
    target: int

    def touches(self, node_id: int) -> bool:
        return self.source == node_id or self.target == node_id


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable copy of the full editable state at one point in time."""
    nodes: Tuple[Node, ...]
    connections: Tuple[Connection, ...]
    next_id: int
    selection: Optional[int]
