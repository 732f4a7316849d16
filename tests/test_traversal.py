from puzzflow.graph.traversal import available_items, dependency_ids
from puzzflow.nodetypes import NodeType


def _chain(add_node, store):
    key = add_node(store, 0, 0, NodeType.GET_ITEM)
    store.set_title(key.id, "Key")
    lamp = add_node(store, 300, 0, NodeType.GET_ITEM)
    store.set_title(lamp.id, "Lamp")
    talk = add_node(store, 0, 300, NodeType.CHARACTER_ACTION)
    door = add_node(store, 0, 600, NodeType.USE_ITEM)
    store.create_connection(key.id, talk.id)
    store.create_connection(talk.id, door.id)
    store.create_connection(lamp.id, door.id)
    return key.id, lamp.id, talk.id, door.id


def test_dependency_ids_are_direct_predecessors(add_node, store):
    key, lamp, talk, door = _chain(add_node, store)
    assert dependency_ids(store, door) == [talk, lamp]
    assert dependency_ids(store, key) == []


def test_available_items_collects_ancestors_in_first_seen_order(add_node, store):
    key, lamp, talk, door = _chain(add_node, store)
    assert available_items(store, door) == ["Key", "Lamp"]
    assert available_items(store, talk) == ["Key"]


def test_available_items_includes_the_node_itself(add_node, store):
    key, *_ = _chain(add_node, store)
    assert available_items(store, key) == ["Key"]


def test_available_items_survives_cycles(add_node, store):
    key, lamp, talk, door = _chain(add_node, store)
    store.create_connection(door, key)
    assert available_items(store, talk) == ["Key", "Lamp"]


def test_available_items_deduplicates(add_node, store):
    key, lamp, talk, door = _chain(add_node, store)
    store.set_title(lamp, "Key")
    assert available_items(store, door) == ["Key"]
