# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Settings Manager - single source of truth for editor tunables.

Schemas are plain dataclasses holding raw Python types only (colors
are ``[r, g, b, a]`` lists). Widgets convert to Qt types at read-time.
Components read their constants at construction; subscribers that need
live updates listen to ``settings_changed``.
"""

from __future__ import annotations

import copy
import json
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, asdict
from enum import Enum, auto
from typing import Dict, Any, Optional, List, Set

from PySide6.QtCore import QObject, Signal

from puzzflow.logger import get_logger
log = get_logger("Settings")


class SettingsCategory(Enum):
    """Namespaces for the different settings groups."""
    CANVAS = auto()
    NODE = auto()


@dataclass
class CanvasSettings:
    """Viewport, interaction and history tunables."""
    # Wheel zoom (anchored at the pointer)
    wheel_zoom_min: float = 0.1
    wheel_zoom_max: float = 3.0
    wheel_zoom_factor: float = 0.01
    # Wheel delta that one mouse-wheel notch (120 eighths of a degree) maps to
    wheel_notch_delta: float = 10.0

    # Button zoom (not anchored); intentionally narrower than the wheel range
    button_zoom_min: float = 0.5
    button_zoom_max: float = 2.0
    button_zoom_step: float = 0.1

    # Connection hit-testing, in content units
    drop_hit_threshold: float = 20.0
    drag_hit_threshold: float = 30.0

    # Palette drops place the node so the pointer sits at this offset
    drop_offset_x: float = 100.0
    drop_offset_y: float = 50.0

    history_capacity: int = 50

    # Background
    bg_color: List[int] = field(default_factory=lambda: [246, 247, 250, 255])
    grid_color: List[int] = field(default_factory=lambda: [208, 212, 220, 255])
    grid_spacing: int = 20
    grid_dot_size: float = 2.0
    max_visible_grid_dots: int = 40000

    # Connections
    connection_color: List[int] = field(default_factory=lambda: [120, 126, 140, 255])
    connection_highlight_color: List[int] = field(default_factory=lambda: [74, 144, 226, 255])
    connection_width: float = 2.0
    connection_bg_width: float = 8.0
    temp_connection_color: List[int] = field(default_factory=lambda: [74, 144, 226, 160])


@dataclass
class NodeSettings:
    """Node geometry and appearance. Geometry feeds both layout and hit-testing."""
    width: float = 200.0
    min_height: float = 100.0
    header_height: float = 28.0
    padding: float = 12.0
    title_line_height: float = 20.0
    description_line_height: float = 16.0
    description_chars_per_line: int = 28
    section_spacing: float = 6.0
    badge_row_height: float = 24.0
    port_radius: float = 8.0
    corner_radius: float = 8.0

    text_color: List[int] = field(default_factory=lambda: [40, 44, 52, 255])
    muted_text_color: List[int] = field(default_factory=lambda: [110, 116, 128, 255])
    selection_color: List[int] = field(default_factory=lambda: [74, 144, 226, 255])
    disconnect_color: List[int] = field(default_factory=lambda: [226, 92, 92, 255])
    port_fill_color: List[int] = field(default_factory=lambda: [255, 255, 255, 255])
    port_border_color: List[int] = field(default_factory=lambda: [120, 126, 140, 255])


_SCHEMAS = {
    SettingsCategory.CANVAS: CanvasSettings,
    SettingsCategory.NODE: NodeSettings,
}


class SettingsManager(QObject):
    """
    Central holder of all editor settings.

    Storage invariant:
        Schemas always hold raw Python types (list, str, int, float, bool).
    """

    settings_changed = Signal(object, dict)

    _instance: Optional['SettingsManager'] = None

    @classmethod
    def instance(cls) -> 'SettingsManager':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        if cls._instance is not None:
            cls._instance.deleteLater()
        cls._instance = None

    def __init__(self):
        super().__init__()
        if SettingsManager._instance is not None:
            raise RuntimeError("Use SettingsManager.instance() to get the singleton.")

        self._schemas: Dict[SettingsCategory, Any] = {
            cat: schema_cls() for cat, schema_cls in _SCHEMAS.items()
        }
        self._suppress_signals = False
        self._pending_changes: Dict[SettingsCategory, Dict[str, Any]] = {}

    # ==========================================================================
    # BATCH UPDATES
    # ==========================================================================

    @contextmanager
    def batch_update(self):
        self._suppress_signals = True
        self._pending_changes = {cat: {} for cat in SettingsCategory}
        try:
            yield
        finally:
            self._suppress_signals = False
            for category, changes in self._pending_changes.items():
                if changes:
                    self.settings_changed.emit(category, changes)
            self._pending_changes = {}

    # ==========================================================================
    # ACCESS
    # ==========================================================================

    def get(self, category: SettingsCategory, key: str, default: Any = None) -> Any:
        schema = self._schemas.get(category)
        if schema is not None and hasattr(schema, key):
            return copy.copy(getattr(schema, key))
        return default

    def get_all(self, category: SettingsCategory) -> Dict[str, Any]:
        """Return a deep copy of every value in a category."""
        return copy.deepcopy(asdict(self._schemas[category]))

    def get_schema(self, category: SettingsCategory) -> Any:
        """Return the raw schema object."""
        return self._schemas.get(category)

    # ==========================================================================
    # UPDATES
    # ==========================================================================

    def update(self, category: SettingsCategory, **kwargs) -> Set[str]:
        """
        Update values in a category. Unknown keys are ignored.

        Returns:
            The set of keys whose value actually changed.
        """
        schema = self._schemas.get(category)
        if schema is None:
            return set()

        changed = set()
        for key, value in kwargs.items():
            if not hasattr(schema, key):
                log.warning("Unknown %s setting: %s", category.name, key)
                continue
            if isinstance(value, tuple):
                value = list(value)
            if getattr(schema, key) != value:
                setattr(schema, key, value)
                changed.add(key)

        if changed:
            changes = {k: kwargs[k] for k in changed}
            if self._suppress_signals:
                self._pending_changes[category].update(changes)
            else:
                self.settings_changed.emit(category, changes)

        return changed

    def reset_to_defaults(self) -> None:
        with self.batch_update():
            for category, schema_cls in _SCHEMAS.items():
                defaults = asdict(schema_cls())
                self.update(category, **defaults)

    # ==========================================================================
    # FILE I/O
    # ==========================================================================

    def export_current(self) -> Dict[str, Any]:
        return {cat.name.lower(): self.get_all(cat) for cat in SettingsCategory}

    def save_to_file(self, filepath: str, indent: int = 2) -> bool:
        try:
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(self.export_current(), f, indent=indent)
            log.info("Settings saved to: %s", filepath)
            return True
        except OSError as e:
            log.error("Settings save failed: %s", e)
            return False

    def load_from_file(self, filepath: str) -> bool:
        """
        Merge settings from a JSON file of the form
        ``{"canvas": {...}, "node": {...}}``. Missing keys keep their values.
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            log.warning("Settings file not found: %s", filepath)
            return False
        except (OSError, json.JSONDecodeError) as e:
            log.error("Settings load failed: %s", e)
            return False

        if not isinstance(data, dict):
            log.error("Settings file must hold a JSON object: %s", filepath)
            return False

        with self.batch_update():
            for category in SettingsCategory:
                section = data.get(category.name.lower())
                if isinstance(section, dict):
                    known = {f.name for f in fields(self._schemas[category])}
                    self.update(category, **{k: v for k, v in section.items() if k in known})

        log.info("Settings loaded from: %s", filepath)
        return True


# ==============================================================================
# CONVENIENCE
# ==============================================================================

def get_settings_manager() -> SettingsManager:
    return SettingsManager.instance()


def get_setting(category: SettingsCategory, key: str, default: Any = None) -> Any:
    return SettingsManager.instance().get(category, key, default)
