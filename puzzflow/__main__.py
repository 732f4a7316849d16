# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""

import sys

from puzzflow.app import main

if __name__ == "__main__":
    sys.exit(main())
