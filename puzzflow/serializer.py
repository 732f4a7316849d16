# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

serializer.py - Flow document import / export
---------------------------------------------
Flat JSON document, version 1.0:

{
    "nodes": [
        {
            "id": 1, "type": "GET_ITEM",
            "title": "...", "description": "...",
            "position": {"x": 0, "y": 0},
            "items": ["..."], "tags": ["..."], "dependencies": []
        },
        ...
    ],
    "connections": [ {"from": 1, "to": 2}, ... ],
    "nextNodeId": 3,
    "version": "1.0",
    "exportDate": "2026-10-19T14:30:05.000Z"
}

Import is all-or-nothing: the whole document is parsed and coerced
before the store is touched, so a rejected file leaves the graph as it
was. A successful import replaces the graph in a single commit.
"""

import json
import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from PySide6.QtCore import QPointF

from puzzflow.errors import GraphFormatError
from puzzflow.graph.model import Node, Connection
from puzzflow.graph.store import GraphStore
from puzzflow.nodetypes import NodeType, NodeTypeRegistry, NODE_TYPES

from puzzflow.logger import get_logger
log = get_logger("Serializer")


INVALID_FORMAT_MESSAGE = "Invalid file format. Please select a valid PuzzFlow export file."
INVALID_JSON_MESSAGE = "Error reading file. Please make sure it's a valid JSON file."


# ---------------------------------------------------------------------------
# Field coercion helpers
# ---------------------------------------------------------------------------

def _as_int(value: Any, what: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    raise GraphFormatError(f"{INVALID_FORMAT_MESSAGE} ({what} must be an integer)")


def _as_coord(value: Any, what: str) -> float:
    """Position component; absent or non-numeric values default to 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        coord = float(value)
    except OverflowError:
        coord = math.inf
    if not math.isfinite(coord):
        raise GraphFormatError(f"{INVALID_FORMAT_MESSAGE} ({what} must be finite)")
    return coord


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def _export_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class GraphSerializer:
    """
    Converts between a ``GraphStore`` and the flow document format.

    Parse errors raise ``GraphFormatError`` with a user-facing message;
    file writes report failure through their return value.
    """

    FORMAT_VERSION = "1.0"

    def __init__(self, registry: Optional[NodeTypeRegistry] = None) -> None:
        self._registry = registry or NODE_TYPES

    # ---------------------------------------------------------------------------
    # Export
    # ---------------------------------------------------------------------------

    @staticmethod
    def _node_to_dict(node: Node) -> Dict[str, Any]:
        return {
            "id": node.id,
            "type": node.type.value,
            "title": node.title,
            "description": node.description,
            "position": {"x": node.position.x(), "y": node.position.y()},
            "items": list(node.items),
            "tags": list(node.tags),
            "dependencies": list(node.dependencies),
        }

    def to_dict(self, store: GraphStore) -> Dict[str, Any]:
        return {
            "nodes": [self._node_to_dict(n) for n in store.nodes],
            "connections": [{"from": c.source, "to": c.target} for c in store.connections],
            "nextNodeId": store.next_id,
            "version": self.FORMAT_VERSION,
            "exportDate": _export_timestamp(),
        }

    def serialize(self, store: GraphStore, indent: int = 2) -> str:
        return json.dumps(self.to_dict(store), indent=indent, ensure_ascii=False)

    @staticmethod
    def default_filename(day: Optional[date] = None) -> str:
        """``puzzflow-YYYY-MM-DD.json`` for ``day`` (UTC today by default)."""
        day = day or datetime.now(timezone.utc).date()
        return f"puzzflow-{day.isoformat()}.json"

    # ---------------------------------------------------------------------------
    # Import
    # ---------------------------------------------------------------------------

    def parse(self, text: str) -> Tuple[List[Node], List[Connection], int]:
        """
        Parse and coerce a document without touching any store.

        Raises:
            GraphFormatError: malformed JSON, a missing or falsy top-level
                key, or a node entry that cannot be coerced.
        """
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except (ValueError, TypeError) as e:
            log.error(f"Invalid JSON: {e}")
            raise GraphFormatError(INVALID_JSON_MESSAGE) from e

        if not isinstance(data, dict):
            raise GraphFormatError(INVALID_FORMAT_MESSAGE)

        nodes_data = data.get("nodes")
        conns_data = data.get("connections")
        next_id = data.get("nextNodeId")
        # Arrays count as present even when empty; a zero counter does not
        if not isinstance(nodes_data, list) or not isinstance(conns_data, list) or not next_id:
            log.warning("Import rejected: missing nodes, connections or nextNodeId")
            raise GraphFormatError(INVALID_FORMAT_MESSAGE)

        version = data.get("version")
        if version is not None and version != self.FORMAT_VERSION:
            log.warning(f"Importing document version {version!r} as {self.FORMAT_VERSION}")

        nodes: List[Node] = []
        seen = set()
        for entry in nodes_data:
            node = self._coerce_node(entry)
            if node.id in seen:
                raise GraphFormatError(f"{INVALID_FORMAT_MESSAGE} (duplicate node id {node.id})")
            seen.add(node.id)
            nodes.append(node)

        connections: List[Connection] = []
        for entry in conns_data:
            if not isinstance(entry, dict):
                raise GraphFormatError(INVALID_FORMAT_MESSAGE)
            connections.append(Connection(_as_int(entry.get("from"), "connection 'from'"),
                                          _as_int(entry.get("to"), "connection 'to'")))

        return nodes, connections, _as_int(next_id, "nextNodeId")

    def _coerce_node(self, entry: Any) -> Node:
        """Build a ``Node`` from a document entry, filling optional fields with defaults."""
        if not isinstance(entry, dict):
            raise GraphFormatError(INVALID_FORMAT_MESSAGE)

        node_id = _as_int(entry.get("id"), "node id")
        node_type = self._registry.parse(entry.get("type"))
        if node_type is None:
            raise GraphFormatError(f"{INVALID_FORMAT_MESSAGE} (unknown node type {entry.get('type')!r})")

        title = entry.get("title")
        title = self._registry.default_title(node_type) if title is None else str(title)

        pos = entry.get("position")
        x = y = 0.0
        if isinstance(pos, dict):
            x = _as_coord(pos.get("x"), "position x")
            y = _as_coord(pos.get("y"), "position y")

        items = _str_list(entry.get("items"))
        if node_type is NodeType.GET_ITEM:
            stripped = title.strip()
            items = [stripped] if stripped else []

        return Node(
            id=node_id,
            type=node_type,
            title=title,
            description=str(entry.get("description") or ""),
            position=QPointF(x, y),
            items=items,
            tags=_str_list(entry.get("tags")),
            dependencies=[],
        )

    def deserialize(self, store: GraphStore, text: str) -> None:
        """Replace the store's graph with the document in ``text`` (one commit)."""
        nodes, connections, next_id = self.parse(text)
        store.load(nodes, connections, next_id)

    # ---------------------------------------------------------------------------
    # File I/O
    # ---------------------------------------------------------------------------

    def save_to_file(self, store: GraphStore, filepath: str) -> bool:
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(self.serialize(store))
            log.info(f"Exported {len(store.nodes)} nodes to: {filepath}")
            return True
        except OSError as e:
            log.error(f"Export failed: {e}")
            return False

    def load_from_file(self, store: GraphStore, filepath: str) -> None:
        """
        Raises:
            GraphFormatError: unreadable file or invalid document; the
                store is left unchanged.
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError as e:
            log.warning(f"File not found: {filepath}")
            raise GraphFormatError(INVALID_JSON_MESSAGE) from e
        except (OSError, UnicodeDecodeError) as e:
            log.error(f"Load failed: {e}")
            raise GraphFormatError(INVALID_JSON_MESSAGE) from e

        self.deserialize(store, text)
        log.info(f"Imported: {filepath}")
