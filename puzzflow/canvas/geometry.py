# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Geometry Engine
---------------
Stateless helpers shared by rendering and hit-testing:

- screen <-> content conversion for a ``ViewState``
- point to segment distance
- ``NodeLayout``, the explicit node size model (fixed width, height
  computed from content) and the port anchors derived from it
- node / port hit-testing and connection proximity search
- Bezier connection paths (rendering only)
"""

import math
import textwrap
from enum import IntEnum
from typing import Iterable, List, NamedTuple, Optional

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPainterPath, QTransform

from puzzflow.graph.model import Node, Connection
from puzzflow.graph.store import GraphStore
from puzzflow.settings import SettingsCategory, get_settings_manager, NodeSettings


# ==============================================================================
# COORDINATE SPACES
# ==============================================================================

class ViewState(NamedTuple):
    """Zoom factor and pan offset (screen pixels) of the canvas."""
    zoom: float
    pan: QPointF


def screen_to_content(point: QPointF, view: ViewState) -> QPointF:
    return QPointF((point.x() - view.pan.x()) / view.zoom,
                   (point.y() - view.pan.y()) / view.zoom)


def content_to_screen(point: QPointF, view: ViewState) -> QPointF:
    return QPointF(point.x() * view.zoom + view.pan.x(),
                   point.y() * view.zoom + view.pan.y())


def viewport_transform(view: ViewState) -> QTransform:
    """Transform mapping content space onto the widget (scale, then translate)."""
    return QTransform(view.zoom, 0.0, 0.0, view.zoom, view.pan.x(), view.pan.y())


# ==============================================================================
# DISTANCE
# ==============================================================================

def distance_to_segment(p: QPointF, a: QPointF, b: QPointF) -> float:
    """
    Euclidean distance from ``p`` to the segment ``a-b``.

    The projection parameter is clamped to [0, 1]; a zero-length segment
    degrades to the distance from ``p`` to ``a``.
    """
    abx, aby = b.x() - a.x(), b.y() - a.y()
    apx, apy = p.x() - a.x(), p.y() - a.y()
    length_sq = abx * abx + aby * aby
    if length_sq == 0.0:
        return math.hypot(apx, apy)

    t = max(0.0, min(1.0, (apx * abx + apy * aby) / length_sq))
    return math.hypot(apx - t * abx, apy - t * aby)


# ==============================================================================
# NODE LAYOUT
# ==============================================================================

class NodeLayout:
    """
    Deterministic node size model.

    Every node is ``width`` wide. Its height is the sum of the header, the
    title line, the wrapped description, one badge row each for items and
    tags, and padding, but never less than ``min_height``. The renderer
    draws into exactly these rects, so hit-testing never needs render
    feedback.
    """

    def __init__(self, settings: Optional[NodeSettings] = None):
        s = settings or get_settings_manager().get_schema(SettingsCategory.NODE)
        self.width = float(s.width)
        self.min_height = float(s.min_height)
        self.header_height = float(s.header_height)
        self.padding = float(s.padding)
        self.title_line_height = float(s.title_line_height)
        self.description_line_height = float(s.description_line_height)
        self.chars_per_line = max(1, int(s.description_chars_per_line))
        self.section_spacing = float(s.section_spacing)
        self.badge_row_height = float(s.badge_row_height)
        self.port_radius = float(s.port_radius)

    def description_lines(self, node: Node) -> List[str]:
        lines: List[str] = []
        for paragraph in node.description.splitlines():
            lines.extend(textwrap.wrap(paragraph, self.chars_per_line) or [""])
        return lines

    def height_of(self, node: Node) -> float:
        height = self.header_height + self.padding + self.title_line_height
        lines = self.description_lines(node)
        if lines:
            height += self.section_spacing + len(lines) * self.description_line_height
        for badges in (node.items, node.tags):
            if badges:
                height += self.section_spacing + self.badge_row_height
        height += self.padding
        return max(self.min_height, height)

    def rect_of(self, node: Node) -> QRectF:
        return QRectF(node.position.x(), node.position.y(), self.width, self.height_of(node))

    def center_of(self, node: Node) -> QPointF:
        return self.rect_of(node).center()

    def input_anchor(self, node: Node) -> QPointF:
        """Top-center of the node."""
        return QPointF(node.position.x() + self.width / 2.0, node.position.y())

    def output_anchor(self, node: Node) -> QPointF:
        """Bottom-center of the node."""
        return QPointF(node.position.x() + self.width / 2.0,
                       node.position.y() + self.height_of(node))

    def connection_anchors(self, store: GraphStore, conn: Connection):
        """``(start, end)`` of a connection, or None if an endpoint is missing."""
        source, target = store.node(conn.source), store.node(conn.target)
        if source is None or target is None:
            return None
        return self.output_anchor(source), self.input_anchor(target)


# ==============================================================================
# HIT-TESTING
# ==============================================================================

class HitKind(IntEnum):
    BACKGROUND = 0
    NODE_BODY = 1
    INPUT_PORT = 2
    OUTPUT_PORT = 3


class HitResult(NamedTuple):
    kind: HitKind
    node_id: Optional[int] = None

    @property
    def is_port(self) -> bool:
        return self.kind in (HitKind.INPUT_PORT, HitKind.OUTPUT_PORT)


BACKGROUND_HIT = HitResult(HitKind.BACKGROUND)


def _within(p: QPointF, center: QPointF, radius: float) -> bool:
    return math.hypot(p.x() - center.x(), p.y() - center.y()) <= radius


def hit_test_node(nodes: Iterable[Node], layout: NodeLayout, point: QPointF) -> HitResult:
    """
    Resolve what lies under a content-space point.

    Nodes are checked topmost first (last in paint order). For each node
    the port discs win over the body.
    """
    for node in reversed(list(nodes)):
        if _within(point, layout.output_anchor(node), layout.port_radius):
            return HitResult(HitKind.OUTPUT_PORT, node.id)
        if _within(point, layout.input_anchor(node), layout.port_radius):
            return HitResult(HitKind.INPUT_PORT, node.id)
        if layout.rect_of(node).contains(point):
            return HitResult(HitKind.NODE_BODY, node.id)
    return BACKGROUND_HIT


def find_connection_near(store: GraphStore, layout: NodeLayout, point: QPointF,
                         threshold: float, exclude_node: Optional[int] = None) -> Optional[Connection]:
    """
    First connection whose straight anchor segment passes strictly closer
    than ``threshold`` to ``point``. Connections touching ``exclude_node``
    are skipped.
    """
    for conn in store.connections:
        if exclude_node is not None and conn.touches(exclude_node):
            continue
        anchors = layout.connection_anchors(store, conn)
        if anchors is None:
            continue
        if distance_to_segment(point, *anchors) < threshold:
            return conn
    return None


# ==============================================================================
# CONNECTION PATHS
# ==============================================================================

MIN_CONTROL_OFFSET = 50.0


def connection_control_points(start: QPointF, end: QPointF):
    """Control points of the cubic: below the source, above the target."""
    offset = max(abs(end.y() - start.y()) * 0.5, MIN_CONTROL_OFFSET)
    return (QPointF(start.x(), start.y() + offset),
            QPointF(end.x(), end.y() - offset))


def build_connection_path(start: QPointF, end: QPointF) -> QPainterPath:
    c1, c2 = connection_control_points(start, end)
    path = QPainterPath(start)
    path.cubicTo(c1, c2, end)
    return path
