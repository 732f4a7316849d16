import pytest
from PySide6.QtCore import QPointF
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication, QLineEdit, QPlainTextEdit, QPushButton

from puzzflow.canvas.canvas_widget import NODE_TYPE_MIME, CanvasWidget, node_type_mime_data
from puzzflow.canvas.node_icons import NODE_ICONS, node_icon_pixmap
from puzzflow.nodetypes import NODE_TYPES, NodeType
from puzzflow.ui.main_window import MainWindow, is_text_input
from puzzflow.ui.properties_panel import PropertiesPanel
from puzzflow.ui.sidebar import Sidebar


@pytest.fixture(scope="module")
def qapp():
    return QApplication.instance() or QApplication([])


def test_sidebar_lists_every_type_in_two_sections(qapp):
    sidebar = Sidebar()
    assert set(sidebar.buttons) == set(NodeType)


def test_mime_payload_carries_type_name(qapp):
    mime = node_type_mime_data(NodeType.USE_ITEM)
    assert bytes(mime.data(NODE_TYPE_MIME)).decode() == "USE_ITEM"


def test_canvas_paints_all_layers(qapp, controller):
    store = controller.store
    a = store.create_node(NodeType.GET_ITEM, QPointF(0, 0))
    b = store.create_node(NodeType.USE_ITEM, QPointF(0, 300))
    store.update_node(b.id, description="Unlock the cellar door with the key", tags=["act-1"])
    store.create_connection(a.id, b.id)
    store.select(b.id)
    controller.set_insertion_preview(store.connections[0])
    controller.set_temp_connection(QPointF(100, 100), QPointF(400, 400))

    widget = CanvasWidget(controller)
    widget.resize(800, 600)
    assert not widget.grab().isNull()


def test_properties_panel_follows_selection(qapp, add_node, store):
    panel = PropertiesPanel(store)
    assert panel.isHidden()

    node = add_node(store, 0, 0, NodeType.GET_ITEM)
    store.select(node.id)
    assert not panel.isHidden()
    assert panel.title_edit.text() == "New item to get"

    store.select(None)
    assert panel.isHidden()


def test_properties_panel_title_edit_syncs_items(qapp, add_node, store):
    panel = PropertiesPanel(store)
    node = add_node(store, 0, 0, NodeType.GET_ITEM)
    store.select(node.id)

    panel.title_edit.selectAll()
    QTest.keyClicks(panel.title_edit, "Lamp")

    assert store.node(node.id).title == "Lamp"
    assert store.node(node.id).items == ["Lamp"]


def test_properties_panel_tags_and_dependencies(qapp, add_node, store):
    panel = PropertiesPanel(store)
    a, b = add_node(store, 0, 0), add_node(store, 0, 300)
    store.create_connection(a.id, b.id)
    store.select(b.id)

    panel.tag_edit.setText("  finale ")
    panel.tag_edit.returnPressed.emit()
    assert store.node(b.id).tags == ["finale"]
    assert panel.tag_edit.text() == ""
    assert panel.dependencies_label.text() == "1 node"

    panel._on_remove_tag(0)
    assert store.node(b.id).tags == []


def test_text_input_detection(qapp):
    assert is_text_input(QLineEdit())
    assert is_text_input(QPlainTextEdit())
    assert not is_text_input(QPushButton())
    assert not is_text_input(None)


def test_main_window_history_actions(qapp):
    window = MainWindow()
    try:
        assert not window.undo_action.isEnabled()
        window.controller.palette_drop(QPointF(300, 300), NodeType.GOAL)
        assert window.undo_action.isEnabled()

        window.undo_action.trigger()
        assert window.controller.store.nodes == []
        assert window.redo_action.isEnabled()
    finally:
        window.close()


def test_every_node_type_has_an_icon_painter():
    assert all(NODE_TYPES.get(t).icon in NODE_ICONS for t in NODE_TYPES)


def test_icon_pixmaps_are_drawn(qapp):
    for name in NODE_ICONS:
        image = node_icon_pixmap(name, 24).toImage()
        alphas = [image.pixelColor(x, y).alpha() for x in range(24) for y in range(24)]
        assert max(alphas) > 0, name


def test_unknown_icon_is_skipped(qapp):
    image = node_icon_pixmap("missing", 16).toImage()
    assert all(image.pixelColor(x, y).alpha() == 0 for x in range(16) for y in range(16))


def test_palette_buttons_show_type_icons(qapp):
    sidebar = Sidebar()
    for button in sidebar.buttons.values():
        assert not button.icon_label.pixmap().isNull()
