"""
Application coordinator wiring the controller to Qt surfaces, timers and the tray.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from activity_hud import APP_NAME, APP_VERSION
from activity_hud import logger as app_logger
from core.controller import NotificationController
from core.idle_monitor import IdleSampler
from core.idle_overlay import IdleOverlaySurface
from core.notification_popup import ScheduledMessageSurface
from core.poll_loop import PollLoop
from core.qt_dispatch import QtDispatcher
from core.reward_popup import RewardSurface
from core.schedule_loader import ScheduleLoader
from core.settings import HudSettings, HudSettingsManager, describe
from core.vignette_overlay import VignetteSurface
from shared.schedule import ScheduleItem, ScheduleItemKind

SETTINGS_REFRESH_INTERVAL_MS = 15000


@dataclass(frozen=True)
class DebugOptions:
    show_idle_message: bool = False
    scheduled_message_text: Optional[str] = None
    scheduled_message_kind: ScheduleItemKind = ScheduleItemKind.START_TRACKING
    idle_threshold_seconds: Optional[int] = None

    @property
    def show_scheduled_message(self) -> bool:
        return self.scheduled_message_text is not None


@dataclass
class HudCoordinator(QObject):
    data_dir: Path
    settings_manager: HudSettingsManager = field(default_factory=HudSettingsManager)
    debug: DebugOptions = field(default_factory=DebugOptions)

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        self.data_dir = Path(self.data_dir)
        self._manual_shutdown_requested = False

        self._settings = self._read_settings()
        self._loader = ScheduleLoader(self.data_dir)
        self._sampler = IdleSampler(self._settings.idle_threshold_seconds)
        self._reward_surface = RewardSurface()
        self.controller = NotificationController(
            idle_surface=IdleOverlaySurface(self._loader.resolve_asset),
            scheduled_surface=ScheduledMessageSurface(),
            vignette_surface=VignetteSurface(),
            reward_surface=self._reward_surface,
            dispatcher=QtDispatcher(self),
            settings=self._settings,
        )
        self._poll_loop = PollLoop(self._tick, self._settings.poll_interval_ms)

        self._tray = QSystemTrayIcon(self)
        tray_icon = QApplication.style().standardIcon(QStyle.SP_ComputerIcon)
        self._tray.setIcon(tray_icon)
        self._tray.setToolTip(f"{APP_NAME} v{APP_VERSION}")

        menu = QMenu()
        reload_action = QAction("Reload Schedule", menu)
        exit_action = QAction("Exit", menu)
        menu.addAction(reload_action)
        menu.addSeparator()
        menu.addAction(exit_action)
        self._tray.setContextMenu(menu)
        self._tray_menu = menu

        reload_action.triggered.connect(self._reload_schedule)
        exit_action.triggered.connect(self.shutdown)

        self._reload_timer = QTimer(self)
        self._reload_timer.setInterval(self._reload_interval_ms(self._settings))
        self._reload_timer.timeout.connect(self._reload_schedule)

        self._settings_timer = QTimer(self)
        self._settings_timer.setInterval(SETTINGS_REFRESH_INTERVAL_MS)
        self._settings_timer.timeout.connect(self._reload_settings)

    def start(self) -> None:
        self._logger.info("Starting {} v{}. Data folder {}", APP_NAME, APP_VERSION, self.data_dir)
        self._logger.info("Settings: {}", describe(self._settings))
        self._apply_tray_visibility(self._settings)
        self._loader.reload()
        self._reload_timer.start()
        self._settings_timer.start()
        self._run_debug_actions()
        self._poll_loop.start()

    def shutdown(self) -> None:
        if self._manual_shutdown_requested:
            return
        self._logger.info("Shutting down application on user request.")
        self._manual_shutdown_requested = True
        self._reload_timer.stop()
        self._settings_timer.stop()
        self.controller.close()
        # Poll ticks may be waiting on this thread for a blocking hand-off.
        self._poll_loop.stop(pump=QApplication.processEvents)
        self.controller.cleanup()
        self._reward_surface.close_all()
        self._tray.hide()
        QApplication.instance().quit()

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def _tick(self) -> None:
        self.controller.poll_from(self._sampler, self._loader.current_schedule)

    def _run_debug_actions(self) -> None:
        if self.debug.show_idle_message:
            self._logger.info("Debug: showing idle message")
            self.controller.defer(self.controller.show_idle_message)
        if self.debug.show_scheduled_message:
            item = ScheduleItem(
                at=datetime.now().time(),
                label=self.debug.scheduled_message_text or "",
                kind=self.debug.scheduled_message_kind,
            )
            self._logger.info("Debug: showing scheduled message '{}'", item.label)
            self.controller.defer(partial(self.controller.show_scheduled_message, item))

    def _reload_schedule(self) -> None:
        self._loader.reload()

    def _read_settings(self) -> HudSettings:
        settings = self.settings_manager.read_settings()
        if self.debug.idle_threshold_seconds:
            settings = settings.with_overrides(
                idle_threshold_seconds=self.debug.idle_threshold_seconds
            )
        return settings

    def _reload_settings(self) -> None:
        new_settings = self._read_settings()
        if new_settings != self._settings:
            self._logger.info("Detected registry settings change. Applying updates.")
            self._apply_settings(new_settings)

    def _apply_settings(self, settings: HudSettings) -> None:
        previous = self._settings
        self._settings = settings

        self.controller.apply_settings(settings)
        self._sampler.threshold_seconds = settings.idle_threshold_seconds
        self._apply_tray_visibility(settings)

        if previous.poll_interval_ms != settings.poll_interval_ms:
            self._poll_loop.set_interval_ms(settings.poll_interval_ms)
            self._logger.info("Polling interval updated to {} ms.", settings.poll_interval_ms)

        interval_ms = self._reload_interval_ms(settings)
        if self._reload_timer.interval() != interval_ms:
            self._reload_timer.setInterval(interval_ms)
            self._logger.info(
                "Schedule reload interval updated to {} minutes.",
                settings.schedule_reload_interval_minutes,
            )

    def _apply_tray_visibility(self, settings: HudSettings) -> None:
        if settings.show_tray_icon:
            if not self._tray.isVisible():
                self._tray.show()
        elif self._tray.isVisible():
            self._tray.hide()

    @staticmethod
    def _reload_interval_ms(settings: HudSettings) -> int:
        return max(1, settings.schedule_reload_interval_minutes) * 60 * 1000
