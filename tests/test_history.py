from PySide6.QtCore import QPointF

from puzzflow.graph.history import HistoryManager
from puzzflow.graph.model import Connection
from puzzflow.settings import SettingsCategory, get_settings_manager


def test_initial_state_is_first_snapshot(store):
    history = HistoryManager(store)
    assert len(history) == 1
    assert history.cursor == 0
    assert not history.can_undo and not history.can_redo


def test_undo_redo_restore_exact_state(add_node, store):
    history = HistoryManager(store)
    a = add_node(store, 0, 0)
    b = add_node(store, 300, 0)
    store.create_connection(a.id, b.id)
    store.update_node(a.id, position=QPointF(40, 50), title="Talk to the guard")
    after = store.snapshot()

    assert history.undo()
    node = store.node(a.id)
    assert node.position == QPointF(0, 0)
    assert node.title == "New player action"
    assert store.connections == [Connection(a.id, b.id)]

    assert history.redo()
    assert store.snapshot() == after


def test_undo_and_redo_are_noops_at_the_boundaries(add_node, store):
    history = HistoryManager(store)
    assert history.undo() is False

    add_node(store, 0, 0)
    assert history.redo() is False
    assert history.undo() is True
    assert store.nodes == []
    assert history.undo() is False


def test_undo_restores_next_id(add_node, store):
    history = HistoryManager(store)
    add_node(store, 0, 0)
    history.undo()
    assert store.next_id == 1


def test_replay_does_not_record(add_node, store):
    history = HistoryManager(store)
    add_node(store, 0, 0)
    add_node(store, 0, 200)

    history.undo()
    history.undo()
    assert len(history) == 3
    history.redo()
    assert len(history) == 3
    assert history.cursor == 1


def test_new_commit_truncates_redo_tail(add_node, store):
    history = HistoryManager(store)
    add_node(store, 0, 0)
    add_node(store, 0, 200)
    history.undo()

    add_node(store, 500, 500)
    assert not history.can_redo
    assert len(history) == 3
    assert [n.position for n in store.nodes] == [QPointF(0, 0), QPointF(500, 500)]


def test_history_is_bounded_to_capacity(add_node, store):
    history = HistoryManager(store)
    assert history.capacity == 50

    node = add_node(store, 0, 0)
    for i in range(1, 60):
        store.update_node(node.id, position=QPointF(i, i))

    assert len(history) == 50
    assert history.cursor == 49

    undone = 0
    while history.undo():
        undone += 1
    assert undone == 49
    # The oldest retained state is ten commits after the initial one
    assert store.node(node.id).position == QPointF(10, 10)


def test_capacity_comes_from_settings(store):
    get_settings_manager().update(SettingsCategory.CANVAS, history_capacity=5)
    history = HistoryManager(store)
    assert history.capacity == 5


def test_history_changed_signal(add_node, store):
    history = HistoryManager(store)
    events = []
    history.history_changed.connect(lambda u, r: events.append((u, r)))

    add_node(store, 0, 0)
    history.undo()
    history.redo()

    assert events == [(True, False), (False, True), (True, False)]


def test_selection_is_part_of_history(add_node, store):
    history = HistoryManager(store)
    node = add_node(store, 0, 0)
    store.select(node.id)
    history.undo()
    assert store.selection is None
    history.redo()
    assert store.selection == node.id


def test_clear_rebaselines(add_node, store):
    history = HistoryManager(store)
    add_node(store, 0, 0)
    history.clear()
    assert len(history) == 1
    assert history.undo() is False
    assert len(store.nodes) == 1
