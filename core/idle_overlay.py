"""
Full-screen idle overlay: black backdrop that fades in and shows the day timeline.
"""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from PySide6.QtCore import QPoint, Qt, QTimer, QUrl
from PySide6.QtGui import QColor, QFont, QFontMetrics, QPainter, QPaintEvent
from PySide6.QtWidgets import QApplication, QWidget

try:
    from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
except ImportError:  # pragma: no cover - optional dependency
    QMediaPlayer = None  # type: ignore
    QAudioOutput = None  # type: ignore

try:
    import winsound
except ModuleNotFoundError:  # pragma: no cover - non-Windows environments
    winsound = None

from activity_hud import logger as app_logger
from core.controller import IdleMessageParams
from core.effects import IDLE_FADE_DURATION_SECONDS, alarm_due, idle_fade_opacity
from core.surfaces import Surface
from core.timeline import TimelineSegment, display_color, generate_timeline, label_color
from shared.schedule import Schedule

_LOGGER = app_logger.get_logger()

REFRESH_INTERVAL_MS = 500
FADE_INTERVAL_MS = 50
TIMELINE_GLYPH = "█"
TIMELINE_FONT = "Consolas"

AssetResolver = Callable[[Optional[str]], Optional[Path]]


class AlarmPlayer:
    """Loops an alarm file: WAV through winsound, anything else through QtMultimedia."""

    def __init__(self) -> None:
        self._player = None
        self._audio_output = None
        self._using_winsound = False

    @property
    def playing(self) -> bool:
        return self._using_winsound or self._player is not None

    def start(self, path: Path) -> bool:
        if self.playing:
            return True
        if not path.exists():
            _LOGGER.warning("Alarm sound not found at {}", path)
            return False

        if path.suffix.lower() == ".wav" and winsound is not None:
            try:
                winsound.PlaySound(
                    str(path), winsound.SND_FILENAME | winsound.SND_ASYNC | winsound.SND_LOOP
                )
            except RuntimeError as exc:  # pragma: no cover - difficult to simulate
                _LOGGER.error("Failed to play alarm sound: {}", exc)
                return False
            self._using_winsound = True
            return True

        if QMediaPlayer is None or QAudioOutput is None:
            _LOGGER.warning("QtMultimedia not available; cannot play {}", path)
            return False

        self._audio_output = QAudioOutput()
        self._player = QMediaPlayer()
        self._player.setAudioOutput(self._audio_output)
        self._player.setSource(QUrl.fromLocalFile(str(path)))
        self._player.setLoops(QMediaPlayer.Loops.Infinite)
        self._player.play()
        return True

    def stop(self) -> None:
        if self._using_winsound and winsound is not None:
            winsound.PlaySound(None, 0)
        self._using_winsound = False
        if self._player is not None:
            self._player.stop()
            self._player.deleteLater()
            self._player = None
        self._audio_output = None


class IdleOverlay(QWidget):
    def __init__(
        self,
        params: IdleMessageParams,
        resolve_asset: AssetResolver,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        flags = (
            Qt.WindowType.FramelessWindowHint
            | Qt.WindowType.Tool
            | Qt.WindowType.WindowStaysOnTopHint
        )
        self.setWindowFlags(flags)
        self.setAttribute(Qt.WidgetAttribute.WA_ShowWithoutActivating, True)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet("background-color: black;")
        self.setWindowOpacity(0.0)
        self.setWindowTitle(params.message)

        self._params = params
        self._resolve_asset = resolve_asset
        self._alarm = AlarmPlayer()
        self._blink_phase = False
        self._fade_started_at: Optional[float] = None
        self._timeline: List[TimelineSegment] = []

        self._timeline_font = QFont(TIMELINE_FONT, 14)
        self._label_font = QFont(TIMELINE_FONT, 10)
        self._strike_font = QFont(TIMELINE_FONT, 10)
        self._strike_font.setStrikeOut(True)

        self._fade_timer = QTimer(self)
        self._fade_timer.setInterval(FADE_INTERVAL_MS)
        self._fade_timer.timeout.connect(self._apply_fade)  # type: ignore[arg-type]

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self._refresh_timer.timeout.connect(self._refresh)  # type: ignore[arg-type]

        self._delay_timer = QTimer(self)
        self._delay_timer.setSingleShot(True)
        self._delay_timer.timeout.connect(self._start_fade_in)  # type: ignore[arg-type]

    def present(self) -> None:
        screen = QApplication.primaryScreen()
        if screen is not None:
            self.setGeometry(screen.geometry())
        self._update_timeline()
        self.show()

        delay_ms = int(self._params.fade_in_delay_seconds * 1000)
        if delay_ms > 0:
            self._delay_timer.start(delay_ms)
        else:
            self._start_fade_in()
        self._refresh_timer.start()

    def dismiss(self) -> None:
        self._delay_timer.stop()
        self._fade_timer.stop()
        self._refresh_timer.stop()
        self._alarm.stop()
        self.close()
        self.deleteLater()

    def _seconds_since_fade_start(self) -> Optional[float]:
        if self._fade_started_at is None:
            return None
        return time.monotonic() - self._fade_started_at

    def _start_fade_in(self) -> None:
        if self._fade_started_at is not None:
            return
        self._fade_started_at = time.monotonic()
        self._fade_timer.start()

    def _apply_fade(self) -> None:
        elapsed = self._seconds_since_fade_start()
        self.setWindowOpacity(idle_fade_opacity(elapsed))
        if elapsed is not None and elapsed >= IDLE_FADE_DURATION_SECONDS:
            self._fade_timer.stop()

    def _refresh(self) -> None:
        self._blink_phase = not self._blink_phase
        self._update_timeline()
        self.update()
        self._check_alarm()

    def _update_timeline(self) -> None:
        schedule: Optional[Schedule] = self._params.schedule_source()
        if schedule is None:
            self._timeline = []
            return
        self._timeline = generate_timeline(schedule, datetime.now())

    def _check_alarm(self) -> None:
        if not self._params.sound_enabled or self._alarm.playing:
            return
        schedule = self._params.schedule_source()
        if schedule is None or not schedule.alarm_sound_file:
            return
        if not alarm_due(self._seconds_since_fade_start(), self._params.threshold_seconds):
            return
        path = self._resolve_asset(schedule.alarm_sound_file)
        if path is not None and self._alarm.start(path):
            _LOGGER.info("Idle alarm started ({})", path.name)

    def paintEvent(self, event: QPaintEvent) -> None:  # noqa: N802
        super().paintEvent(event)
        if not self._timeline:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        painter.setFont(self._timeline_font)
        glyph_width = QFontMetrics(self._timeline_font).horizontalAdvance(TIMELINE_GLYPH)

        total_width = len(self._timeline) * glyph_width
        start_x = (self.width() - total_width) // 2
        timeline_y = self.height() // 2
        label_y = timeline_y - 50

        for index, segment in enumerate(self._timeline):
            color = display_color(segment, self._blink_phase)
            painter.setPen(QColor(*color))
            painter.drawText(QPoint(start_x + index * glyph_width, timeline_y), TIMELINE_GLYPH)

        for index, segment in enumerate(self._timeline):
            if not segment.label_above:
                continue
            x = start_x + index * glyph_width - 5
            painter.setPen(QColor(*label_color(segment)))
            painter.setFont(self._strike_font if segment.label_strikethrough else self._label_font)
            painter.drawText(QPoint(x, label_y), segment.label_above)
            painter.setFont(self._label_font)
            painter.drawText(QPoint(x, label_y + 15), "↓")
        painter.end()


class IdleOverlaySurface(Surface):
    def __init__(self, resolve_asset: AssetResolver) -> None:
        self._resolve_asset = resolve_asset

    def create(self, params: IdleMessageParams) -> IdleOverlay:
        overlay = IdleOverlay(params, self._resolve_asset)
        overlay.present()
        return overlay

    def destroy(self, handle: IdleOverlay) -> None:
        handle.dismiss()
