# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0

Viewport Controller: zoom level and pan offset of the canvas.

Two zoom ranges coexist: the wheel gesture clamps to the wide range and
is anchored at the pointer; the overlay buttons step by a fixed
increment without an anchor. Zoom in caps at 2 and zoom out floors at 0.5.
"""

from typing import Optional

from PySide6.QtCore import QObject, QPointF, Signal

from puzzflow.canvas.geometry import ViewState, screen_to_content
from puzzflow.settings import CanvasSettings, SettingsCategory, get_settings_manager

from puzzflow.logger import get_logger
log = get_logger("Viewport")


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class Viewport(QObject):

    changed = Signal()

    def __init__(self, settings: Optional[CanvasSettings] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        s = settings or get_settings_manager().get_schema(SettingsCategory.CANVAS)
        self._wheel_min = s.wheel_zoom_min
        self._wheel_max = s.wheel_zoom_max
        self._wheel_factor = s.wheel_zoom_factor
        self._button_min = s.button_zoom_min
        self._button_max = s.button_zoom_max
        self._button_step = s.button_zoom_step

        self._zoom = 1.0
        self._pan = QPointF(0.0, 0.0)
        self._pan_start: Optional[QPointF] = None

    # ==========================================================================
    # STATE
    # ==========================================================================

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def pan(self) -> QPointF:
        return QPointF(self._pan)

    @property
    def state(self) -> ViewState:
        return ViewState(self._zoom, QPointF(self._pan))

    @property
    def zoom_percent(self) -> int:
        return int(round(self._zoom * 100))

    @property
    def is_panning(self) -> bool:
        return self._pan_start is not None

    def screen_to_content(self, point: QPointF) -> QPointF:
        return screen_to_content(point, self.state)

    def set_view(self, zoom: float, pan: QPointF) -> None:
        self._zoom = zoom
        self._pan = QPointF(pan)
        self.changed.emit()

    # ==========================================================================
    # ZOOM
    # ==========================================================================

    def zoom_at(self, pointer: QPointF, new_zoom: float) -> None:
        """Set the zoom while keeping the content point under ``pointer`` fixed."""
        content = self.screen_to_content(pointer)
        self._zoom = new_zoom
        self._pan = QPointF(pointer.x() - content.x() * new_zoom,
                            pointer.y() - content.y() * new_zoom)
        self.changed.emit()

    def wheel(self, pointer: QPointF, delta_y: float) -> None:
        """Positive ``delta_y`` (scrolling down) zooms out."""
        new_zoom = _clamp(self._zoom - delta_y * self._wheel_factor,
                          self._wheel_min, self._wheel_max)
        if new_zoom != self._zoom:
            self.zoom_at(pointer, new_zoom)

    def zoom_in(self) -> None:
        # Each button enforces only its own bound
        self._set_step_zoom(min(round(self._zoom + self._button_step, 6), self._button_max))

    def zoom_out(self) -> None:
        self._set_step_zoom(max(round(self._zoom - self._button_step, 6), self._button_min))

    def _set_step_zoom(self, new_zoom: float) -> None:
        if new_zoom != self._zoom:
            self._zoom = new_zoom
            self.changed.emit()

    def reset(self) -> None:
        self._zoom = 1.0
        self._pan = QPointF(0.0, 0.0)
        log.debug("View reset")
        self.changed.emit()

    # ==========================================================================
    # PAN
    # ==========================================================================

    def begin_pan(self, pointer: QPointF) -> None:
        self._pan_start = QPointF(pointer.x() - self._pan.x(), pointer.y() - self._pan.y())

    def update_pan(self, pointer: QPointF) -> None:
        if self._pan_start is None:
            return
        self._pan = QPointF(pointer.x() - self._pan_start.x(), pointer.y() - self._pan_start.y())
        self.changed.emit()

    def end_pan(self) -> None:
        self._pan_start = None
