"""
Engagement overlay: stacked click-through frames that darken the screen edges.

Each layer is a full-screen window painted solid except for a rounded hole in
the middle; inner layers have bigger insets and fainter opacity so the stack
reads as a soft vignette. In the second growth stage the frames cycle through
rainbow colours.
"""

from __future__ import annotations

import time
from typing import List, Optional

from PySide6.QtCore import QRect, Qt, QTimer
from PySide6.QtGui import QColor, QPainter, QPaintEvent
from PySide6.QtWidgets import QApplication, QWidget

from core.effects import (
    MINIMUM_VIGNETTE_FRAME,
    VIGNETTE_LAYER_COUNT,
    VignetteFrame,
    blend_from_black,
    layer_inset,
    layer_opacity,
    rainbow_color,
    rainbow_hue,
)
from core.surfaces import Surface

CORNER_RADIUS = 48
RAINBOW_INTERVAL_MS = 30
_EPSILON = 0.001


class VignetteLayer(QWidget):
    def __init__(self, geometry: QRect, index: int) -> None:
        super().__init__(None)
        flags = (
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowStaysOnTopHint
            | Qt.WindowType.WindowTransparentForInput
        )
        self.setWindowFlags(flags)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self.setGeometry(geometry)
        self.setWindowOpacity(0.0)

        self._index = index
        self._opacity = 0.0
        self._size = 1
        self._intensity = 0.0
        self._cycle_started_at: Optional[float] = None

        self._rainbow_timer = QTimer(self)
        self._rainbow_timer.setInterval(RAINBOW_INTERVAL_MS)
        self._rainbow_timer.timeout.connect(self.update)  # type: ignore[arg-type]

    def apply(self, opacity: float, size: int, intensity: float) -> None:
        needs_repaint = False

        if abs(self._opacity - opacity) > _EPSILON:
            self._opacity = opacity
            self.setWindowOpacity(opacity)

        if self._size != size:
            self._size = size
            needs_repaint = True

        if abs(self._intensity - intensity) > _EPSILON:
            self._intensity = intensity
            needs_repaint = True
            if intensity > 0.0 and not self._rainbow_timer.isActive():
                self._cycle_started_at = time.monotonic()
                self._rainbow_timer.start()
            elif intensity == 0.0 and self._rainbow_timer.isActive():
                self._rainbow_timer.stop()
                self._cycle_started_at = None

        if needs_repaint:
            self.update()

    def stop(self) -> None:
        self._rainbow_timer.stop()

    def _background(self) -> QColor:
        if self._intensity <= 0.0 or self._cycle_started_at is None:
            return QColor(0, 0, 0)
        hue = rainbow_hue(time.monotonic() - self._cycle_started_at, self._index)
        return QColor(*blend_from_black(rainbow_color(hue), self._intensity))

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background())

        inset = layer_inset(self._index, self._size)
        hole = self.rect().adjusted(inset, inset, -inset, -inset)
        if hole.width() > 0 and hole.height() > 0:
            painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QColor(0, 0, 0))
            painter.drawRoundedRect(hole, CORNER_RADIUS, CORNER_RADIUS)
        painter.end()


class VignetteOverlay:
    def __init__(self) -> None:
        self._layers: List[VignetteLayer] = []
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        geometry = screen.geometry()
        self._layers = [VignetteLayer(geometry, index) for index in range(VIGNETTE_LAYER_COUNT)]

    def present(self, frame: VignetteFrame) -> None:
        self.apply(frame)
        for layer in self._layers:
            layer.show()

    def apply(self, frame: VignetteFrame) -> None:
        for index, layer in enumerate(self._layers):
            layer.apply(
                layer_opacity(frame.opacity, index),
                frame.size,
                frame.color_cycle_intensity,
            )

    def close(self) -> None:
        for layer in self._layers:
            layer.stop()
            layer.close()
            layer.deleteLater()
        self._layers.clear()


class VignetteSurface(Surface):
    def create(self, params: VignetteFrame) -> VignetteOverlay:
        overlay = VignetteOverlay()
        overlay.present(params or MINIMUM_VIGNETTE_FRAME)
        return overlay

    def update(self, handle: VignetteOverlay, params: VignetteFrame) -> None:
        handle.apply(params)

    def destroy(self, handle: VignetteOverlay) -> None:
        handle.close()
