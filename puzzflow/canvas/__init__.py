# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Headless canvas core. ``canvas_widget`` (the QWidget) is imported
explicitly by the UI so this package stays importable without a
QApplication.
"""

from puzzflow.canvas.viewport import Viewport
from puzzflow.canvas.geometry import NodeLayout, ViewState, HitKind, HitResult
from puzzflow.canvas.canvas_core import CanvasController

__all__ = ["Viewport", "NodeLayout", "ViewState", "HitKind", "HitResult", "CanvasController"]
