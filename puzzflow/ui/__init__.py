# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""

from puzzflow.ui.main_window import MainWindow
from puzzflow.ui.properties_panel import PropertiesPanel
from puzzflow.ui.sidebar import Sidebar

__all__ = ["MainWindow", "PropertiesPanel", "Sidebar"]
