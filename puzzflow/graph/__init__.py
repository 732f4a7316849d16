# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""

from puzzflow.graph.model import Node, Connection, GraphSnapshot
from puzzflow.graph.store import GraphStore
from puzzflow.graph.history import HistoryManager

__all__ = ["Node", "Connection", "GraphSnapshot", "GraphStore", "HistoryManager"]
