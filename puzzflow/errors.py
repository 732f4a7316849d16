# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""


class PuzzFlowError(Exception):
    """Base class for all errors raised by PuzzFlow."""


class GraphFormatError(PuzzFlowError):
    """
    A flow document could not be imported.

    The message is meant for the user; the in-memory graph is left
    untouched whenever this is raised.
    """
