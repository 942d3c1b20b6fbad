"""
Registry-backed configuration for the Activity HUD runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Dict, Optional, Tuple

try:
    import winreg
except ModuleNotFoundError:  # pragma: no cover - non-Windows environments
    winreg = None

from activity_hud import logger as app_logger

_LOGGER = app_logger.get_logger()

_BASE_SUBKEY = r"Software\ActivityHud\Settings"


@dataclass(frozen=True, eq=True)
class HudSettings:
    poll_interval_ms: int = 300
    idle_threshold_seconds: int = 30
    reward_check_interval_seconds: int = 20
    reward_activity_window_seconds: int = 20
    vignette_delay_seconds: int = 60
    vignette_stage_duration_seconds: int = 300
    scheduled_message_cooldown_seconds: int = 30
    scheduled_message_suppression_minutes: int = 1
    schedule_reload_interval_minutes: int = 5
    vignette_max_opacity: float = 0.6
    vignette_max_size_pixels: int = 40
    idle_fade_in_delay_seconds: int = 5
    sound_enabled: bool = True
    show_tray_icon: bool = True

    def with_overrides(self, **changes) -> "HudSettings":
        return replace(self, **changes)


# Registry value name -> (field, min, max). Opacity is stored as a percentage.
_DWORD_VALUES: Dict[str, Tuple[str, int, int]] = {
    "PollIntervalMs": ("poll_interval_ms", 50, 5000),
    "IdleThresholdSeconds": ("idle_threshold_seconds", 5, 3600),
    "RewardCheckIntervalSeconds": ("reward_check_interval_seconds", 1, 3600),
    "RewardActivityWindowSeconds": ("reward_activity_window_seconds", 1, 3600),
    "VignetteDelaySeconds": ("vignette_delay_seconds", 0, 86400),
    "VignetteStageDurationSeconds": ("vignette_stage_duration_seconds", 1, 86400),
    "ScheduledMessageCooldownSeconds": ("scheduled_message_cooldown_seconds", 1, 3600),
    "ScheduledMessageSuppressionMinutes": ("scheduled_message_suppression_minutes", 0, 1440),
    "ScheduleReloadIntervalMinutes": ("schedule_reload_interval_minutes", 1, 1440),
    "VignetteMaxSizePixels": ("vignette_max_size_pixels", 1, 400),
    "IdleFadeInDelaySeconds": ("idle_fade_in_delay_seconds", 0, 600),
}

_BOOL_VALUES: Dict[str, str] = {
    "SoundEnabled": "sound_enabled",
    "ShowTrayIcon": "show_tray_icon",
}


class HudSettingsManager:
    """Loads persisted settings from HKCU and clamps invalid data."""

    def __init__(self, *, hive: Optional[int] = None, winreg_module=winreg) -> None:
        self._winreg = winreg_module
        if hive is not None:
            self.hive = hive
        elif winreg_module is not None:
            self.hive = winreg_module.HKEY_CURRENT_USER
        else:
            self.hive = None

    def read_settings(self) -> HudSettings:
        defaults = HudSettings()
        if self._winreg is None:
            return defaults

        key = self._open_key()
        if key is None:
            return defaults

        try:
            values = {}
            for name, (field_name, low, high) in _DWORD_VALUES.items():
                values[field_name] = self._read_clamped(
                    key, name, getattr(defaults, field_name), low, high
                )
            for name, field_name in _BOOL_VALUES.items():
                values[field_name] = self._read_bool(key, name, getattr(defaults, field_name))
            percent = self._read_clamped(
                key, "VignetteMaxOpacityPercent", round(defaults.vignette_max_opacity * 100), 0, 100
            )
            values["vignette_max_opacity"] = percent / 100.0
            return HudSettings(**values)
        finally:
            self._winreg.CloseKey(key)

    def _open_key(self):
        try:
            return self._winreg.OpenKey(self.hive, _BASE_SUBKEY, 0, self._winreg.KEY_READ)
        except FileNotFoundError:
            return None

    def _read_bool(self, key, name: str, default: bool) -> bool:
        raw = self._read_dword(key, name)
        if raw is None:
            return default
        return bool(raw)

    def _read_clamped(self, key, name: str, default: int, low: int, high: int) -> int:
        raw = self._read_dword(key, name)
        if raw is None:
            return default
        if raw < low or raw > high:
            _LOGGER.warning(
                "Invalid value {} for {} found in registry. Clamping to safe bounds.",
                raw,
                name,
            )
        return max(low, min(high, raw))

    def _read_dword(self, key, name: str) -> Optional[int]:
        try:
            value, value_type = self._winreg.QueryValueEx(key, name)
        except FileNotFoundError:
            return None
        if value_type != self._winreg.REG_DWORD:
            _LOGGER.warning("Registry value {} has unexpected type {}.", name, value_type)
            return None
        return int(value)


def describe(settings: HudSettings) -> str:
    """Compact one-line rendering used in startup and change logs."""
    return ", ".join(f"{f.name}={getattr(settings, f.name)}" for f in fields(settings))
