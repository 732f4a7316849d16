# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Read-only graph queries used by the properties panel.
"""

from typing import List, Set

from puzzflow.graph.store import GraphStore
from puzzflow.nodetypes import NodeType


def dependency_ids(store: GraphStore, node_id: int) -> List[int]:
    """Direct predecessors of ``node_id``, in connection order."""
    return [c.source for c in store.incoming(node_id)]


def available_items(store: GraphStore, node_id: int) -> List[str]:
    """
    Items obtainable before reaching ``node_id``.

    Walks every upstream path (cycles included) and collects the items of
    each GET_ITEM node it meets, the node itself included. Each item is
    listed once, in first-seen order.
    """
    items: List[str] = []
    visited: Set[int] = set()
    stack = [node_id]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)

        node = store.node(current)
        if node is None:
            continue
        if node.type is NodeType.GET_ITEM:
            for item in node.items:
                if item not in items:
                    items.append(item)

        # Reverse so the first incoming connection is visited first
        stack.extend(reversed(dependency_ids(store, current)))

    return items
