# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

nodetypes.py
------------
The fixed set of node types and their read-only display configuration.
The graph core only reads from this table (default titles on creation);
the palette and the canvas renderer read labels and colors from it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Iterator, Optional

from puzzflow.logger import get_logger
log = get_logger("NodeTypes")


class NodeType(str, Enum):
    """Node kinds of a flow graph. Values are the persisted type names."""
    PLAYER_ACTION = "PLAYER_ACTION"
    CHARACTER_ACTION = "CHARACTER_ACTION"
    GET_ITEM = "GET_ITEM"
    USE_ITEM = "USE_ITEM"
    GOAL = "GOAL"
    STORY_STATE = "STORY_STATE"


@dataclass(frozen=True)
class NodeTypeConfig:
    """
    Display configuration of a single node type.

    Attributes:
        label: Human readable name shown in the node header and palette.
        color: Fill color (hex string).
        border_color: Outline color (hex string).
        icon: Key into ``canvas.node_icons.NODE_ICONS``.
        default_title: Title given to freshly created nodes.
        section: Palette section the type is listed under.
    """
    label: str
    color: str
    border_color: str
    icon: str
    default_title: str
    section: str


class NodeTypeRegistry:
    """
    Lookup table from ``NodeType`` to ``NodeTypeConfig``.

    Structure:
        Section -> [NodeType, ...]  (palette order)
    """

    def __init__(self) -> None:
        self._configs: Dict[NodeType, NodeTypeConfig] = {}
        self._sections: Dict[str, List[NodeType]] = {}

    def register(self, node_type: NodeType, config: NodeTypeConfig) -> None:
        if node_type in self._configs:
            log.warning("Overwriting node type config '%s'", node_type.value)
            self._sections[self._configs[node_type].section].remove(node_type)
        self._configs[node_type] = config
        self._sections.setdefault(config.section, []).append(node_type)

    def get(self, node_type: NodeType) -> NodeTypeConfig:
        return self._configs[NodeType(node_type)]

    def default_title(self, node_type: NodeType) -> str:
        return self.get(node_type).default_title

    def sections(self) -> Dict[str, List[NodeType]]:
        """Returns the palette structure, sections in registration order."""
        return {name: list(types) for name, types in self._sections.items() if types}

    def parse(self, name: str) -> Optional[NodeType]:
        """Resolve a persisted type name, or None if it is not a known type."""
        try:
            node_type = NodeType(name)
        except ValueError:
            return None
        return node_type if node_type in self._configs else None

    def __contains__(self, node_type: object) -> bool:
        return node_type in self._configs

    def __iter__(self) -> Iterator[NodeType]:
        return iter(self._configs)


ACTION_SECTION = "Action nodes"
PROGRESS_SECTION = "Progress nodes"

NODE_TYPES = NodeTypeRegistry()

NODE_TYPES.register(NodeType.PLAYER_ACTION, NodeTypeConfig(
    label="Player Action", color="#FFF5DE", border_color="#FFE6AB",
    icon="player-action", default_title="New player action",
    section=ACTION_SECTION,
))
NODE_TYPES.register(NodeType.CHARACTER_ACTION, NodeTypeConfig(
    label="Character Action", color="#DEFFDE", border_color="#A6F7A6",
    icon="character-action", default_title="New character action",
    section=ACTION_SECTION,
))
NODE_TYPES.register(NodeType.GET_ITEM, NodeTypeConfig(
    label="Get Item", color="#DEFCFF", border_color="#9ADFE5",
    icon="get-item", default_title="New item to get",
    section=ACTION_SECTION,
))
NODE_TYPES.register(NodeType.USE_ITEM, NodeTypeConfig(
    label="Use Item", color="#F1EBFF", border_color="#CDB8FF",
    icon="use-item", default_title="New item use",
    section=ACTION_SECTION,
))
NODE_TYPES.register(NodeType.GOAL, NodeTypeConfig(
    label="Goal", color="#FFDEFC", border_color="#FFABF8",
    icon="goal", default_title="New goal",
    section=PROGRESS_SECTION,
))
NODE_TYPES.register(NodeType.STORY_STATE, NodeTypeConfig(
    label="Story State", color="#FFECEC", border_color="#FFC7C7",
    icon="story-state", default_title="New story state",
    section=PROGRESS_SECTION,
))
