"""
Idle sampling using Win32 GetLastInputInfo.
"""

from __future__ import annotations

import ctypes
from typing import Callable, Optional

from activity_hud import logger as app_logger

_LOGGER = app_logger.get_logger()

_TICK_MASK = 0xFFFFFFFF


class IdleSampler:
    """
    Reports how long the user has been away from keyboard and mouse.

    Sampling never raises: when the platform query fails the sampler reports
    zero idle time, so a broken query reads as "user active" and never
    produces a spurious idle overlay.
    """

    def __init__(self, threshold_seconds: float = 30) -> None:
        self.threshold_seconds = threshold_seconds
        self._idle_seconds_provider: Optional[Callable[[], float]] = None
        self._failure_logged = False

    def set_idle_seconds_provider(self, provider: Optional[Callable[[], float]]) -> None:
        """
        Override idle seconds acquisition. Primarily used for testing.
        """
        self._idle_seconds_provider = provider

    def get_idle_seconds(self) -> float:
        try:
            idle_seconds = self._read_idle_seconds()
        except (OSError, AttributeError, ValueError) as exc:
            if not self._failure_logged:
                _LOGGER.warning("Idle time query failed; assuming user is active: {}", exc)
                self._failure_logged = True
            return 0.0
        self._failure_logged = False
        return max(0.0, float(idle_seconds))

    def is_idle(self) -> bool:
        return self.get_idle_seconds() >= self.threshold_seconds

    def _read_idle_seconds(self) -> float:
        if self._idle_seconds_provider is not None:
            return self._idle_seconds_provider()

        last_input_info = _get_last_input_info()
        tick_count_ms = _get_tick_count_ms()
        # Both counters are 32-bit and wrap every ~49.7 days.
        idle_ms = (tick_count_ms - last_input_info) & _TICK_MASK
        return idle_ms / 1000.0


def _get_last_input_info() -> int:
    class LASTINPUTINFO(ctypes.Structure):
        _fields_ = [("cbSize", ctypes.c_uint), ("dwTime", ctypes.c_uint)]

    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    last_input = LASTINPUTINFO()
    last_input.cbSize = ctypes.sizeof(LASTINPUTINFO)

    if not user32.GetLastInputInfo(ctypes.byref(last_input)):
        raise ctypes.WinError()

    return last_input.dwTime


def _get_tick_count_ms() -> int:
    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    return int(kernel32.GetTickCount()) & _TICK_MASK
