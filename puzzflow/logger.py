# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

logger.py - Logging for the flow editor
---------------------------------------
Every component logs through ``get_logger(tag)``, which hands out a
child of the ``"PuzzFlow"`` logger. Output is configured once on that
parent by ``setup_logging``; the status bar listens through
``add_log_callback``.

    from puzzflow.logger import get_logger
    log = get_logger("GraphStore")
    log.info("Created node %d", node_id)
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional

LogCallback = Callable[[str, str, str], None]

ROOT_LOGGER_NAME = "PuzzFlow"

_DATE_FMT = "%Y-%m-%d %H:%M:%S"


def _tag_of(record: logging.LogRecord) -> str:
    # "PuzzFlow.Serializer" -> "Serializer"
    return record.name.rpartition(".")[2]


# ==============================================================================
# FORMATTER
# ==============================================================================

class FlowFormatter(logging.Formatter):
    """
    ``[Tag] LEVEL message``, prefixed by the time when writing to a file::

        [GraphStore] INFO  Created node 3 (GET_ITEM)
        2026-10-19 14:30:05 [Serializer] INFO  Exported 12 nodes
    """

    LINE_FMT = "[%(flow_tag)s] %(levelname)-5s %(message)s"

    def __init__(self, with_time: bool = False) -> None:
        fmt = f"%(asctime)s {self.LINE_FMT}" if with_time else self.LINE_FMT
        super().__init__(fmt=fmt, datefmt=_DATE_FMT)

    def format(self, record: logging.LogRecord) -> str:
        record.flow_tag = _tag_of(record)
        return super().format(record)


# ==============================================================================
# STATUS BAR BRIDGE
# ==============================================================================

class _CallbackHandler(logging.Handler):
    """Fans records out to plain callables as ``(levelname, tag, message)``."""

    def __init__(self) -> None:
        super().__init__()
        self.listeners: List[LogCallback] = []

    def emit(self, record: logging.LogRecord) -> None:
        if not self.listeners:
            return
        try:
            text = record.getMessage()
            for listener in tuple(self.listeners):
                listener(record.levelname, _tag_of(record), text)
        except Exception:
            self.handleError(record)


_bridge: Optional[_CallbackHandler] = None


# ==============================================================================
# PUBLIC API
# ==============================================================================

def get_logger(tag: str) -> logging.Logger:
    """Logger named ``PuzzFlow.<tag>``; ``tag`` shows up as ``[tag]`` in the output."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{tag}")


def _attach(parent: logging.Logger, handler: logging.Handler, level: int,
            formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    parent.addHandler(handler)


def setup_logging(level: int = logging.INFO, stream=None,
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure output for all PuzzFlow loggers.

    Handlers are attached on the first call only; later calls just move
    the level.

    Args:
        level:    Minimum level for the parent logger and its handlers.
        stream:   Console stream, ``sys.stdout`` when omitted.
        log_file: Also append timestamped lines to this file.
    """
    parent = logging.getLogger(ROOT_LOGGER_NAME)
    parent.setLevel(level)
    if parent.handlers:
        return parent

    _attach(parent, logging.StreamHandler(stream or sys.stdout), level, FlowFormatter())
    if log_file:
        _attach(parent, logging.FileHandler(log_file, encoding="utf-8"), level,
                FlowFormatter(with_time=True))
    return parent


def set_log_level(level: int) -> None:
    parent = logging.getLogger(ROOT_LOGGER_NAME)
    parent.setLevel(level)
    for handler in parent.handlers:
        if handler is not _bridge:
            handler.setLevel(level)


def add_log_callback(fn: LogCallback, level: int = logging.INFO) -> None:
    """Call ``fn(levelname, tag, message)`` for every record at ``level`` or above."""
    global _bridge
    if _bridge is None:
        _bridge = _CallbackHandler()
        logging.getLogger(ROOT_LOGGER_NAME).addHandler(_bridge)
    _bridge.setLevel(level)
    if fn not in _bridge.listeners:
        _bridge.listeners.append(fn)


def remove_log_callback(fn: LogCallback) -> None:
    if _bridge is not None and fn in _bridge.listeners:
        _bridge.listeners.remove(fn)
