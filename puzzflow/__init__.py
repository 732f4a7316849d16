# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""

from puzzflow.__about__ import __version__, __title__

__all__ = ["__version__", "__title__"]
