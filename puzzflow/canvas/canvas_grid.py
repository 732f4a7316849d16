# -*- coding: utf-8 -*-
"""
PuzzFlow: A PySide6 editor for branching narrative
and quest flow graphs.
Copyright (c) 2026 PuzzFlow contributors

SPDX-License-Identifier: Apache-2.0
"""

import math

import numpy as np
from PySide6.QtCore import QRectF, QPointF
from PySide6.QtGui import QPainter, QPen


class GridRenderer:
    """
    Dot-grid background in content coordinates.
    Dots sit on multiples of ``spacing`` so they stay glued to the content
    while panning and zooming.
    """

    @staticmethod
    def dot_positions(rect: QRectF, spacing: float) -> np.ndarray:
        """
        Vectorized grid points covering ``rect``.

        Returns:
            (N, 2) float array of x, y pairs; empty for a non-positive spacing.
        """
        if spacing <= 0:
            return np.empty((0, 2))

        first_left = math.floor(rect.left() / spacing) * spacing
        first_top = math.floor(rect.top() / spacing) * spacing
        x_coords = np.arange(first_left, rect.right() + spacing, spacing)
        y_coords = np.arange(first_top, rect.bottom() + spacing, spacing)

        xx, yy = np.meshgrid(x_coords, y_coords)
        return np.column_stack((xx.ravel(), yy.ravel()))

    @staticmethod
    def should_render(rect: QRectF, spacing: float, max_elements: int) -> bool:
        """Skip the grid when zoomed out so far that it would turn into noise."""
        if spacing <= 0:
            return False
        w_count = rect.width() / spacing + 1
        h_count = rect.height() / spacing + 1
        return (w_count * h_count) <= max_elements

    def draw(self, painter: QPainter, rect: QRectF, spacing: float, pen: QPen, max_elements: int) -> None:
        """
        Args:
            painter: Painter already carrying the viewport transform.
            rect: Visible rectangle in content coordinates.
            spacing: Distance between dots.
            pen: Dot pen (its width is the dot size).
            max_elements: Density cut-off, see ``should_render``.
        """
        if not self.should_render(rect, spacing, max_elements):
            return
        # A list comprehension is the fastest path into drawPoints
        pts = [QPointF(x, y) for x, y in self.dot_positions(rect, spacing)]
        painter.setPen(pen)
        painter.drawPoints(pts)
