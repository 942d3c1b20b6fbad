"""
Background thread that drives the notification controller at a fixed cadence.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from activity_hud import logger as app_logger

_LOGGER = app_logger.get_logger()

_PUMP_INTERVAL_SECONDS = 0.01


class PollLoop:
    """
    Calls ``tick`` every ``interval_ms`` on a dedicated thread until stopped.

    A tick that raises is logged and the loop carries on with the next one.
    """

    def __init__(
        self,
        tick: Callable[[], None],
        interval_ms: int = 300,
        *,
        name: str = "activity-hud-poll",
    ) -> None:
        self._tick = tick
        self._interval_ms = interval_ms
        self._name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    def set_interval_ms(self, interval_ms: int) -> None:
        """Takes effect from the next wait."""
        self._interval_ms = max(1, int(interval_ms))

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        _LOGGER.info("Poll loop started ({} ms interval)", self._interval_ms)

    def stop(
        self, timeout: float = 2.0, *, pump: Optional[Callable[[], None]] = None
    ) -> bool:
        """
        Stop the loop. Returns False when the thread did not finish within ``timeout``.

        A tick may be blocked on work owned by the stopping thread (a blocking
        hand-off to the GUI thread). Such callers pass ``pump``, which is called
        repeatedly while waiting so that work can complete.
        """
        thread = self._thread
        if thread is None:
            return True
        self._stop_event.set()
        if thread is not threading.current_thread():
            self._wait_for(thread, timeout, pump)
        if thread.is_alive():
            _LOGGER.warning("Poll loop did not stop within {} seconds", timeout)
            return False
        self._thread = None
        _LOGGER.info("Poll loop stopped")
        return True

    @staticmethod
    def _wait_for(
        thread: threading.Thread, timeout: float, pump: Optional[Callable[[], None]]
    ) -> None:
        if pump is None:
            thread.join(timeout)
            return
        deadline = time.monotonic() + timeout
        while thread.is_alive():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            pump()
            thread.join(min(remaining, _PUMP_INTERVAL_SECONDS))

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._tick()
            except Exception:
                _LOGGER.exception("Error in poll loop tick")
            if self._stop_event.wait(self._interval_ms / 1000.0):
                break
