import os

# Widgets are never shown in tests; keep Qt off any real display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QPointF

from puzzflow.canvas.canvas_core import CanvasController
from puzzflow.graph.store import GraphStore
from puzzflow.nodetypes import NodeType
from puzzflow.settings import SettingsManager


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts from default settings."""
    SettingsManager.reset_instance()
    yield
    SettingsManager.reset_instance()


@pytest.fixture
def store():
    return GraphStore()


@pytest.fixture
def controller():
    return CanvasController()


@pytest.fixture
def commits(store):
    """Records every graph_changed emission of the ``store`` fixture."""
    seen = []
    store.graph_changed.connect(lambda: seen.append(True))
    return seen


@pytest.fixture
def add_node():
    """Factory: ``add_node(store, x, y, node_type=PLAYER_ACTION)``."""
    def _add(store, x, y, node_type=NodeType.PLAYER_ACTION):
        return store.create_node(node_type, QPointF(x, y))
    return _add
