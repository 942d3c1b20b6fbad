"""
Schedule discovery for the Activity HUD runtime.

Owns the current schedule snapshot. Every reload builds a fresh immutable
:class:`~shared.schedule.Schedule` and swaps it in whole, so readers on other
threads only ever see a complete schedule or ``None``.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from activity_hud import logger as app_logger
from shared.schedule import Schedule
from shared.schedule_schema import ScheduleValidationError, load_and_validate_schedule

SCHEDULE_FILE_NAME = "schedule.json"
DEFAULT_RELOAD_INTERVAL_MINUTES = 5

_LOGGER = app_logger.get_logger()


class ScheduleLoader:
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self._current: Optional[Schedule] = None

    @property
    def schedule_path(self) -> Path:
        return self.data_dir / SCHEDULE_FILE_NAME

    def current_schedule(self) -> Optional[Schedule]:
        with self._lock:
            return self._current

    def reload(self) -> Optional[Schedule]:
        """Read the schedule file again. Any failure leaves no schedule loaded."""
        schedule = self._load()
        with self._lock:
            previous, self._current = self._current, schedule
        if schedule is not None and schedule != previous:
            _LOGGER.info(
                "Schedule loaded from {} with {} items",
                self.schedule_path,
                len(schedule.items),
            )
        return schedule

    def resolve_asset(self, name: Optional[str]) -> Optional[Path]:
        """Resolve a file referenced by the schedule relative to the data folder."""
        if not name:
            return None
        path = Path(name)
        if not path.is_absolute():
            path = self.data_dir / path
        return path

    def _load(self) -> Optional[Schedule]:
        path = self.schedule_path
        if not path.exists():
            _LOGGER.warning("Schedule file not found at {}", path)
            return None

        try:
            return load_and_validate_schedule(path)
        except ScheduleValidationError as exc:
            _LOGGER.error("Failed to load schedule at {}: {}", path, exc)
            return None
