"""
Short-lived reward sparkles that pop up near a random screen edge.
"""

from __future__ import annotations

import random
import time
from typing import Dict, Optional, Set

from PySide6.QtCore import QPoint, QRect, Qt, QTimer
from PySide6.QtGui import QColor, QFont, QPainter, QPaintEvent
from PySide6.QtWidgets import QApplication, QWidget

from core.controller import RewardParams
from core.effects import rainbow_color
from core.surfaces import Surface

POPUP_EDGE = 128
LIFETIME_MS = 1000
ANIMATION_INTERVAL_MS = 30
HUE_DEGREES_PER_TICK = 20
REWARD_SYMBOLS = "★☆✦✧✩✪✫✬✭✮✯✰❀❁❂❃❄❅❆❇❈❉❊❋♥♦♣♠☀☼☺♪♫"


def edge_position(screen: QRect, rng: random.Random, edge: int = POPUP_EDGE) -> QPoint:
    """Pick a point 20-60 px inside a random screen edge, centred on the popup."""
    side = rng.randrange(4)
    distance = rng.randint(20, 60)
    half = edge // 2

    if side == 0:
        x = rng.randint(screen.left(), screen.right()) - half
        y = screen.top() + distance - half
    elif side == 1:
        x = screen.right() - edge - distance + half
        y = rng.randint(screen.top(), screen.bottom()) - half
    elif side == 2:
        x = rng.randint(screen.left(), screen.right()) - half
        y = screen.bottom() - edge - distance + half
    else:
        x = screen.left() + distance - half
        y = rng.randint(screen.top(), screen.bottom()) - half
    return QPoint(x, y)


class RewardPopup(QWidget):
    def __init__(self, rng: Optional[random.Random] = None) -> None:
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
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose, True)
        self.setFixedSize(POPUP_EDGE, POPUP_EDGE)
        self.setWindowOpacity(0.4)

        self._rng = rng or random.Random()
        self._symbol = self._rng.choice(REWARD_SYMBOLS)
        self._started_at = time.monotonic()
        self._font = QFont()
        self._font.setPointSize(48)

        screen = QApplication.primaryScreen()
        if screen is not None:
            self.move(edge_position(screen.geometry(), self._rng))

        self._animation_timer = QTimer(self)
        self._animation_timer.setInterval(ANIMATION_INTERVAL_MS)
        self._animation_timer.timeout.connect(self.update)  # type: ignore[arg-type]

        self._lifetime_timer = QTimer(self)
        self._lifetime_timer.setSingleShot(True)
        self._lifetime_timer.setInterval(LIFETIME_MS)
        self._lifetime_timer.timeout.connect(self.close)  # type: ignore[arg-type]

    def present(self) -> None:
        self.show()
        self._animation_timer.start()
        self._lifetime_timer.start()

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        ticks = (time.monotonic() - self._started_at) * 1000 / ANIMATION_INTERVAL_MS
        color = rainbow_color(ticks * HUE_DEGREES_PER_TICK)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setFont(self._font)
        painter.setPen(QColor(*color))
        painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, self._symbol)
        painter.end()


class RewardSurface(Surface):
    """
    Each ``create`` schedules one popup after the requested delay.

    Popups have no Qt parent, so the surface keeps them referenced until Qt
    destroys them after their lifetime ends.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._pending: Set[QTimer] = set()
        self._popups: Dict[int, RewardPopup] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def popup_count(self) -> int:
        return len(self._popups)

    def create(self, params: RewardParams) -> QTimer:
        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(lambda: self._spawn(timer))  # type: ignore[arg-type]
        self._pending.add(timer)
        timer.start(max(1, params.delay_ms))
        return timer

    def destroy(self, handle: QTimer) -> None:
        handle.stop()
        self._pending.discard(handle)

    def close_all(self) -> None:
        for timer in list(self._pending):
            self.destroy(timer)
        for popup in list(self._popups.values()):
            popup.close()
        self._popups.clear()

    def _spawn(self, timer: QTimer) -> None:
        self._pending.discard(timer)
        timer.deleteLater()
        popup = RewardPopup(self._rng)
        key = id(popup)
        self._popups[key] = popup
        popup.destroyed.connect(lambda *_: self._popups.pop(key, None))  # type: ignore[arg-type]
        popup.present()
