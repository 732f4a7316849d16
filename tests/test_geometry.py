import pytest
from PySide6.QtCore import QPointF

from puzzflow.canvas.geometry import (
    HitKind, NodeLayout, ViewState, connection_control_points, build_connection_path,
    content_to_screen, distance_to_segment, find_connection_near, hit_test_node,
    screen_to_content, viewport_transform,
)
from puzzflow.graph.model import Connection
from puzzflow.nodetypes import NodeType


@pytest.fixture
def layout():
    return NodeLayout()


def test_screen_content_conversion_roundtrip():
    view = ViewState(2.0, QPointF(100, -40))
    screen = QPointF(300, 60)
    content = screen_to_content(screen, view)
    assert content == QPointF(100, 50)
    assert content_to_screen(content, view) == screen


def test_viewport_transform_matches_content_to_screen():
    view = ViewState(0.5, QPointF(20, 30))
    p = QPointF(80, -40)
    assert viewport_transform(view).map(p) == content_to_screen(p, view)


def test_distance_to_degenerate_segment():
    a = QPointF(5, 5)
    assert distance_to_segment(QPointF(8, 9), a, a) == pytest.approx(5.0)


def test_distance_to_segment_clamps_to_endpoints():
    a, b = QPointF(0, 0), QPointF(10, 0)
    assert distance_to_segment(QPointF(5, 3), a, b) == pytest.approx(3.0)
    assert distance_to_segment(QPointF(-3, 4), a, b) == pytest.approx(5.0)
    assert distance_to_segment(QPointF(13, -4), a, b) == pytest.approx(5.0)


def test_default_node_height_is_minimum(add_node, store, layout):
    node = add_node(store, 0, 0)
    assert layout.width == 200
    assert layout.height_of(node) == 100


def test_node_height_grows_with_description(add_node, store, layout):
    node = add_node(store, 0, 0)
    store.update_node(node.id, description="a\nb\nc\nd\ne")
    # header 28 + padding 12 + title 20 + spacing 6 + 5 lines * 16 + padding 12
    assert layout.height_of(store.node(node.id)) == 158


def test_long_description_wraps(add_node, store, layout):
    node = add_node(store, 0, 0)
    store.update_node(node.id, description="word " * 30)
    assert len(layout.description_lines(store.node(node.id))) > 1


def test_anchors_are_top_and_bottom_center(add_node, store, layout):
    node = add_node(store, 50, 60)
    assert layout.input_anchor(node) == QPointF(150, 60)
    assert layout.output_anchor(node) == QPointF(150, 160)
    assert layout.center_of(node) == QPointF(150, 110)


def test_hit_test_ports_take_precedence_over_body(add_node, store, layout):
    node = add_node(store, 0, 0)
    assert hit_test_node(store.nodes, layout, QPointF(100, 3)).kind == HitKind.INPUT_PORT
    assert hit_test_node(store.nodes, layout, QPointF(104, 97)).kind == HitKind.OUTPUT_PORT
    body = hit_test_node(store.nodes, layout, QPointF(20, 50))
    assert body.kind == HitKind.NODE_BODY and body.node_id == node.id
    assert hit_test_node(store.nodes, layout, QPointF(500, 500)).kind == HitKind.BACKGROUND


def test_hit_test_ports_reach_outside_the_body(add_node, store, layout):
    node = add_node(store, 0, 100)
    hit = hit_test_node(store.nodes, layout, QPointF(100, 95))
    assert hit.kind == HitKind.INPUT_PORT and hit.node_id == node.id


def test_hit_test_topmost_node_wins(add_node, store, layout):
    add_node(store, 0, 0)
    top = add_node(store, 50, 20)
    assert hit_test_node(store.nodes, layout, QPointF(60, 60)).node_id == top.id


def test_find_connection_near_uses_strict_threshold(add_node, store, layout):
    a, b = add_node(store, 0, 0), add_node(store, 0, 300)
    store.create_connection(a.id, b.id)
    # Segment runs from (100, 100) to (100, 300)
    assert find_connection_near(store, layout, QPointF(119, 200), 20) == Connection(a.id, b.id)
    assert find_connection_near(store, layout, QPointF(120, 200), 20) is None


def test_find_connection_near_skips_excluded_node(add_node, store, layout):
    a, b = add_node(store, 0, 0), add_node(store, 0, 300)
    store.create_connection(a.id, b.id)
    assert find_connection_near(store, layout, QPointF(100, 200), 30, exclude_node=a.id) is None


def test_find_connection_near_returns_first_match(add_node, store, layout):
    a, b = add_node(store, 0, 0), add_node(store, 0, 300)
    c = add_node(store, 10, 0, NodeType.GOAL)
    store.create_connection(c.id, b.id)
    store.create_connection(a.id, b.id)
    assert find_connection_near(store, layout, QPointF(105, 200), 30) == Connection(c.id, b.id)


def test_control_points_offset():
    c1, c2 = connection_control_points(QPointF(0, 0), QPointF(100, 300))
    assert c1 == QPointF(0, 150)
    assert c2 == QPointF(100, 150)

    c1, c2 = connection_control_points(QPointF(0, 0), QPointF(100, 20))
    assert c1 == QPointF(0, 50)
    assert c2 == QPointF(100, -30)


def test_connection_path_endpoints():
    path = build_connection_path(QPointF(10, 20), QPointF(200, 400))
    assert path.pointAtPercent(0.0) == QPointF(10, 20)
    assert path.pointAtPercent(1.0) == QPointF(200, 400)
