"""
Notification controller: turns idle time and the schedule into presentation commands.

Four independent sub-machines share one clock tick:

* idle message   - shown while the user is idle inside a tracking window
* rewards        - a growing streak of stars for staying active
* vignette       - the engagement overlay that grows during long active streaks
* scheduled alerts - schedule items surfaced as they come due

All state lives in :class:`ControllerState` and is only touched from
:meth:`NotificationController.poll`; surfaces are driven through a
:class:`~core.dispatch.CommandDispatcher` so they can live on another thread.
"""

from __future__ import annotations

import queue
import random
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import partial
from typing import Callable, Optional

from activity_hud import logger as app_logger
from core.dispatch import CommandDispatcher, ImmediateDispatcher
from core.effects import MINIMUM_VIGNETTE_FRAME, VignetteFrame, vignette_frame
from core.idle_monitor import IdleSampler
from core.scheduled_messages import match_now
from core.settings import HudSettings
from core.surfaces import Surface, SurfaceSlot
from shared.schedule import Schedule, ScheduleItem

_LOGGER = app_logger.get_logger()

DEFAULT_IDLE_MESSAGE = "You have been idle for a while"
# Rewards are only handed out when the user touched the machine very recently.
REWARD_MAX_IDLE_SECONDS = 5.0

ScheduleSource = Callable[[], Optional[Schedule]]


@dataclass
class ControllerState:
    idle_presented: bool = False
    last_scheduled_message_at: Optional[datetime] = None
    last_reward_check_at: Optional[datetime] = None
    activity_started_at: Optional[datetime] = None
    star_count: int = 0
    vignette_growth_started_at: Optional[datetime] = None
    vignette_presented: bool = False


@dataclass(frozen=True)
class IdleMessageParams:
    message: str
    threshold_seconds: float
    fade_in_delay_seconds: float
    sound_enabled: bool
    schedule_source: ScheduleSource


@dataclass(frozen=True)
class RewardParams:
    delay_ms: int


class NotificationController:
    def __init__(
        self,
        *,
        idle_surface: Surface,
        scheduled_surface: Surface,
        vignette_surface: Surface,
        reward_surface: Surface,
        dispatcher: Optional[CommandDispatcher] = None,
        settings: Optional[HudSettings] = None,
        rng: Optional[random.Random] = None,
        idle_message: str = DEFAULT_IDLE_MESSAGE,
    ) -> None:
        self._settings = settings or HudSettings()
        self._dispatcher = dispatcher or ImmediateDispatcher()
        self._rng = rng or random.Random()
        self._idle_message = idle_message

        self._idle_slot = SurfaceSlot(idle_surface, "idle message")
        self._scheduled_slot = SurfaceSlot(scheduled_surface, "scheduled message")
        self._vignette_slot = SurfaceSlot(vignette_surface, "activity vignette")
        self._reward_surface = reward_surface

        self.state = ControllerState()
        self._schedule: Optional[Schedule] = None
        self._last_vignette_frame: Optional[VignetteFrame] = None
        self._closed = threading.Event()
        self._deferred: "queue.SimpleQueue[Callable[[], None]]" = queue.SimpleQueue()

    @property
    def settings(self) -> HudSettings:
        return self._settings

    def apply_settings(self, settings: HudSettings) -> None:
        if settings != self._settings:
            _LOGGER.info("Controller settings updated.")
        self._settings = settings

    @property
    def is_closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """
        Stop presenting anything new. Polls become no-ops and show requests are
        dropped; :meth:`cleanup` still tears down what is already on screen.
        """
        if not self._closed.is_set():
            self._closed.set()
            _LOGGER.info("Notification controller closed")

    def defer(self, action: Callable[[], None]) -> None:
        """Run ``action`` on the polling thread at the start of the next poll."""
        self._deferred.put(action)

    def current_schedule(self) -> Optional[Schedule]:
        """Schedule seen by the most recent poll."""
        return self._schedule

    def poll_from(
        self,
        sampler: IdleSampler,
        schedule_source: ScheduleSource,
        now: Optional[datetime] = None,
    ) -> None:
        """Sample the collaborators and run one poll."""
        self.poll(now or datetime.now(), sampler.get_idle_seconds(), schedule_source())

    def poll(self, now: datetime, idle_seconds: float, schedule: Optional[Schedule]) -> None:
        try:
            self._poll(now, idle_seconds, schedule)
        except Exception:
            _LOGGER.exception("Notification poll failed")

    def _poll(self, now: datetime, idle_seconds: float, schedule: Optional[Schedule]) -> None:
        if self._closed.is_set():
            return
        self._schedule = schedule
        self._collect_surface_failures()
        self._run_deferred()

        is_idle = idle_seconds >= self._settings.idle_threshold_seconds
        tracking = schedule is not None and schedule.is_currently_tracking(now)

        self._update_idle_message(is_idle, tracking)
        self._update_rewards(now, idle_seconds, is_idle, tracking)
        self._update_vignette(now, is_idle, tracking)
        # The vignette reset blocks on the presentation thread, which may have
        # closed the controller in the meantime.
        if self._closed.is_set():
            return
        self._check_scheduled_message(now, schedule)

    # Idle message -------------------------------------------------------

    def _update_idle_message(self, is_idle: bool, tracking: bool) -> None:
        state = self.state
        # An active user must never be left looking at a stale idle overlay.
        if not is_idle and state.idle_presented:
            self.hide_idle_message()
            return

        if is_idle and not state.idle_presented and tracking:
            self.show_idle_message()
            return

        if state.idle_presented and not tracking:
            self.hide_idle_message()

    def show_idle_message(self) -> None:
        if self.state.idle_presented or self._closed.is_set():
            return
        self.state.idle_presented = True
        params = IdleMessageParams(
            message=self._idle_message,
            threshold_seconds=self._settings.idle_threshold_seconds,
            fade_in_delay_seconds=self._settings.idle_fade_in_delay_seconds,
            sound_enabled=self._settings.sound_enabled,
            schedule_source=self.current_schedule,
        )
        self._dispatcher.post(partial(self._idle_slot.show, params), "show idle message")
        _LOGGER.info("Idle message shown")

    def hide_idle_message(self) -> None:
        if not self.state.idle_presented and not self._idle_slot.is_live:
            return
        self.state.idle_presented = False
        self._dispatcher.post(self._idle_slot.hide, "hide idle message")
        _LOGGER.info("Idle message hidden")

    # Rewards ------------------------------------------------------------

    def _update_rewards(
        self, now: datetime, idle_seconds: float, is_idle: bool, tracking: bool
    ) -> None:
        state = self.state
        settings = self._settings

        if tracking and not is_idle and self._reward_check_due(now):
            if (
                idle_seconds < settings.reward_activity_window_seconds
                and idle_seconds < REWARD_MAX_IDLE_SECONDS
            ):
                state.star_count += 1
                self._show_rewards(state.star_count)
            elif idle_seconds >= settings.reward_activity_window_seconds:
                state.star_count = 0
            # Between the two thresholds the streak is kept but not extended.
            state.last_reward_check_at = now

        if is_idle or not tracking:
            state.star_count = 0

    def _reward_check_due(self, now: datetime) -> bool:
        last = self.state.last_reward_check_at
        if last is None:
            return True
        interval = timedelta(seconds=self._settings.reward_check_interval_seconds)
        return now - last >= interval

    def _show_rewards(self, count: int) -> None:
        max_delay_ms = self._settings.reward_check_interval_seconds * 1000
        for _ in range(count):
            params = RewardParams(delay_ms=self._rng.randint(1, max_delay_ms))
            self._dispatcher.post(partial(self._reward_surface.create, params), "show reward")
        _LOGGER.info("Reward shown: {} star(s) for staying active", count)

    # Vignette -----------------------------------------------------------

    def _update_vignette(self, now: datetime, is_idle: bool, tracking: bool) -> None:
        state = self.state
        if not tracking:
            if state.activity_started_at is not None:
                _LOGGER.info("Not in tracking period, hiding vignette")
            self._reset_vignette()
            return

        if is_idle:
            if state.activity_started_at is not None:
                _LOGGER.info("User became idle during tracking period, hiding vignette")
            self._reset_vignette()
            return

        if state.activity_started_at is None:
            state.activity_started_at = now
            _LOGGER.info("Activity tracking started at {}", now)

        active_seconds = (now - state.activity_started_at).total_seconds()
        if active_seconds < self._settings.vignette_delay_seconds:
            return

        if state.vignette_growth_started_at is None:
            state.vignette_growth_started_at = now
            _LOGGER.debug("Vignette growth started at {}", now)

        frame = vignette_frame(
            (now - state.vignette_growth_started_at).total_seconds(),
            stage_duration_seconds=self._settings.vignette_stage_duration_seconds,
            max_opacity=self._settings.vignette_max_opacity,
            max_size=self._settings.vignette_max_size_pixels,
        )

        if not state.vignette_presented:
            state.vignette_presented = True
            self._last_vignette_frame = frame
            self._dispatcher.post(partial(self._vignette_slot.show, frame), "show vignette")
            _LOGGER.info("Activity vignette shown")
            return

        if frame != self._last_vignette_frame:
            self._last_vignette_frame = frame
            self._dispatcher.post(partial(self._vignette_slot.update, frame), "update vignette")

    def _reset_vignette(self) -> None:
        state = self.state
        state.activity_started_at = None
        state.vignette_growth_started_at = None
        if not state.vignette_presented and not self._vignette_slot.is_live:
            return
        state.vignette_presented = False
        self._last_vignette_frame = None
        # Blocking: the old overlay must be gone before a new one may appear.
        self._dispatcher.send(self._tear_down_vignette, "hide vignette")

    def _tear_down_vignette(self) -> None:
        self._vignette_slot.update(MINIMUM_VIGNETTE_FRAME)
        self._vignette_slot.hide()

    # Scheduled messages -------------------------------------------------

    def _check_scheduled_message(self, now: datetime, schedule: Optional[Schedule]) -> None:
        item = match_now(schedule, now, self._settings.scheduled_message_cooldown_seconds)
        if item is None:
            return

        last = self.state.last_scheduled_message_at
        suppression = timedelta(minutes=self._settings.scheduled_message_suppression_minutes)
        if last is not None and now - last < suppression:
            return

        self.show_scheduled_message(item)
        self.state.last_scheduled_message_at = now

    def show_scheduled_message(self, item: ScheduleItem) -> None:
        if self._closed.is_set():
            return
        # A newer message replaces whatever is on screen.
        self._dispatcher.post(partial(self._scheduled_slot.replace, item), "show scheduled message")
        _LOGGER.info("Scheduled message shown: {}", item.label)

    # Housekeeping -------------------------------------------------------

    def _run_deferred(self) -> None:
        while True:
            try:
                action = self._deferred.get_nowait()
            except queue.Empty:
                return
            action()

    def _collect_surface_failures(self) -> None:
        if self._idle_slot.take_failure():
            _LOGGER.warning("Idle message surface failed; will retry.")
            self.state.idle_presented = False
        if self._vignette_slot.take_failure():
            _LOGGER.warning("Vignette surface failed; will retry.")
            self.state.vignette_presented = False
            self._last_vignette_frame = None
        self._scheduled_slot.take_failure()

    def cleanup(self) -> None:
        """Synchronously tear down every live surface. Safe to call repeatedly."""
        state = self.state
        state.idle_presented = False
        state.vignette_presented = False
        state.activity_started_at = None
        state.vignette_growth_started_at = None
        self._last_vignette_frame = None
        self._dispatcher.send(self._idle_slot.hide, "tear down idle message")
        self._dispatcher.send(self._tear_down_vignette, "tear down vignette")
        self._dispatcher.send(self._scheduled_slot.hide, "tear down scheduled message")
