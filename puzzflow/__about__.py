# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Project metadata for PuzzFlow.
"""

from typing import Final

# Metadata Definitions
__title__: Final[str] = "PuzzFlow"
__description__: Final[str] = (
    "A PySide6 editor for building directed flow graphs of player "
    "actions, items, goals and story states."
)
__version__: Final[str] = "0.1.0"
__author__: Final[str] = "PuzzFlow contributors"
__license__: Final[str] = "Apache-2.0"
__copyright__: Final[str] = "Copyright (c) 2026 PuzzFlow contributors"

def metadata_summary() -> dict[str, str]:
    """Returns a dictionary of project metadata for introspection."""
    return {
        "title": __title__,
        "version": __version__,
        "license": __license__,
        "description": __description__,
    }
