import json
from datetime import date

import pytest
from PySide6.QtCore import QPointF

from puzzflow.errors import GraphFormatError, PuzzFlowError
from puzzflow.graph.history import HistoryManager
from puzzflow.graph.model import Connection
from puzzflow.graph.store import GraphStore
from puzzflow.nodetypes import NodeType
from puzzflow.serializer import GraphSerializer


@pytest.fixture
def serializer():
    return GraphSerializer()


@pytest.fixture
def populated(add_node, store):
    key = add_node(store, 10, 20, NodeType.GET_ITEM)
    store.set_title(key.id, "Rusty key")
    door = add_node(store, 10, 300, NodeType.USE_ITEM)
    store.update_node(door.id, description="Open the cellar", tags=["cellar", "act-1"])
    store.create_connection(key.id, door.id)
    return store


def _doc(**overrides):
    doc = {
        "nodes": [
            {"id": 1, "type": "GOAL", "title": "Escape", "description": "",
             "position": {"x": 5, "y": 6}, "items": [], "tags": [], "dependencies": []},
        ],
        "connections": [],
        "nextNodeId": 2,
        "version": "1.0",
        "exportDate": "2026-10-19T10:00:00.000Z",
    }
    doc.update(overrides)
    return json.dumps(doc)


def test_to_dict_layout(serializer, populated):
    data = serializer.to_dict(populated)

    assert data["version"] == "1.0"
    assert data["nextNodeId"] == 3
    assert data["exportDate"].endswith("Z")
    assert data["connections"] == [{"from": 1, "to": 2}]
    assert data["nodes"][0] == {
        "id": 1, "type": "GET_ITEM", "title": "Rusty key", "description": "",
        "position": {"x": 10.0, "y": 20.0}, "items": ["Rusty key"], "tags": [],
        "dependencies": [],
    }
    assert data["nodes"][1]["tags"] == ["cellar", "act-1"]


def test_export_then_import_restores_graph(serializer, populated):
    text = serializer.serialize(populated)
    target = GraphStore()
    serializer.deserialize(target, text)

    assert target.nodes == populated.nodes
    assert target.connections == populated.connections
    assert target.next_id == populated.next_id
    assert target.selection is None


def test_missing_connections_is_rejected_without_change(serializer, populated):
    before = populated.snapshot()
    doc = json.loads(_doc())
    del doc["connections"]

    with pytest.raises(GraphFormatError):
        serializer.deserialize(populated, json.dumps(doc))
    assert populated.snapshot() == before


def test_zero_next_node_id_is_rejected(serializer, store):
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, _doc(nextNodeId=0))


def test_empty_connection_list_is_accepted(serializer, store):
    serializer.deserialize(store, _doc())
    assert [n.title for n in store.nodes] == ["Escape"]
    assert store.nodes[0].position == QPointF(5, 6)


def test_malformed_json_is_reported(serializer, store):
    with pytest.raises(GraphFormatError) as excinfo:
        serializer.deserialize(store, "{nodes: [")
    assert "valid JSON" in str(excinfo.value)
    assert isinstance(excinfo.value, PuzzFlowError)


def test_unknown_node_type_is_rejected(serializer, store):
    doc = _doc(nodes=[{"id": 1, "type": "BOSS_FIGHT", "position": {"x": 0, "y": 0}}])
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)
    assert store.nodes == []


def test_duplicate_node_ids_are_rejected(serializer, store):
    doc = _doc(nodes=[{"id": 1, "type": "GOAL"}, {"id": 1, "type": "GOAL"}])
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)


def test_ids_beyond_32_bits_can_be_deleted_after_import(serializer, store, commits):
    big = 3_000_000_000
    doc = _doc(nodes=[{"id": big, "type": "GOAL"}, {"id": big + 1, "type": "GET_ITEM"}],
               connections=[{"from": big, "to": big + 1}], nextNodeId=big + 2)
    serializer.deserialize(store, doc)
    removed = []
    store.node_removed.connect(removed.append)
    commits.clear()

    store.delete_node(big)

    assert removed == [big]
    assert [n.id for n in store.nodes] == [big + 1]
    assert store.connections == []
    assert len(commits) == 1


def test_oversized_next_node_id_is_kept_exact(serializer, store):
    huge = 10 ** 400
    serializer.deserialize(store, _doc(nextNodeId=huge))
    assert store.next_id == huge


def test_oversized_node_id_in_float_form_is_rejected(serializer, store):
    doc = _doc().replace('"nextNodeId": 2', '"nextNodeId": 1e400')
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)
    assert store.nodes == []


@pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_constants_are_rejected(serializer, store, literal):
    doc = _doc().replace('"x": 5', f'"x": {literal}')
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)
    assert store.nodes == []


def test_out_of_range_position_is_rejected(serializer, store):
    doc = _doc().replace('"y": 6', '"y": 1e400')
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)
    doc = _doc(nodes=[{"id": 1, "type": "GOAL", "position": {"x": 10 ** 400, "y": 0}}])
    with pytest.raises(GraphFormatError):
        serializer.deserialize(store, doc)
    assert store.nodes == []


def test_node_fields_are_coerced(serializer, store):
    doc = _doc(nodes=[
        {"id": 4, "type": "GET_ITEM", "title": " Lamp "},
        {"id": 5, "type": "STORY_STATE", "position": {"x": "left"}, "tags": "oops"},
    ], connections=[{"from": 4, "to": 5}, {"from": 5, "to": 9}], nextNodeId=3)

    serializer.deserialize(store, doc)

    lamp, state = store.nodes
    assert lamp.items == ["Lamp"]
    assert lamp.position == QPointF(0, 0)
    assert state.title == "New story state"
    assert state.tags == []
    assert store.connections == [Connection(4, 5)]
    assert store.next_id == 6


def test_import_is_one_undoable_commit(serializer, populated):
    history = HistoryManager(populated)
    before = populated.snapshot()

    serializer.deserialize(populated, _doc())
    assert len(history) == 2

    history.undo()
    assert populated.snapshot() == before


def test_file_roundtrip(serializer, populated, tmp_path):
    path = tmp_path / "flow.json"
    assert serializer.save_to_file(populated, str(path))

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert len(on_disk["nodes"]) == 2

    target = GraphStore()
    serializer.load_from_file(target, str(path))
    assert target.connections == populated.connections


def test_save_to_unwritable_path_returns_false(serializer, store, tmp_path):
    assert serializer.save_to_file(store, str(tmp_path / "missing" / "flow.json")) is False


def test_load_missing_file_raises(serializer, store, tmp_path):
    with pytest.raises(GraphFormatError):
        serializer.load_from_file(store, str(tmp_path / "nope.json"))


def test_default_filename():
    assert GraphSerializer.default_filename(date(2026, 10, 19)) == "puzzflow-2026-10-19.json"
