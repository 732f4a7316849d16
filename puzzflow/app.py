# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Application entry point (``puzzflow`` console script).
"""

import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication, QMessageBox

from puzzflow.__about__ import __title__, __version__
from puzzflow.errors import GraphFormatError
from puzzflow.logger import setup_logging, get_logger
from puzzflow.settings import get_settings_manager

log = get_logger("App")


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="puzzflow", description="Narrative flow graph editor.")
    parser.add_argument("file", nargs="?", help="flow document to open on startup")
    parser.add_argument("--settings", metavar="JSON", help="settings file to load")
    parser.add_argument("--log-file", metavar="PATH", help="also write the log to PATH")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"{__title__} {__version__}")
    # Qt consumes its own options (-style, -platform ...) from sys.argv
    args, _ = parser.parse_known_args(argv)
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)
    log.info("%s %s starting", __title__, __version__)

    # Settings must be in place before any component reads them
    if args.settings:
        get_settings_manager().load_from_file(args.settings)

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(__title__)
    app.setApplicationVersion(__version__)

    from puzzflow.ui.main_window import MainWindow
    window = MainWindow()

    if args.file:
        try:
            window.serializer.load_from_file(window.controller.store, args.file)
            window.controller.history.clear()
        except GraphFormatError as e:
            log.error("Could not open %s: %s", args.file, e)
            QMessageBox.warning(window, "Import failed", str(e))

    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
