"""
Immutable schedule value shared by the loader, the controller and the timeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Optional, Tuple

_MINUTES_PER_DAY = 24 * 60


class ScheduleItemKind(Enum):
    START_TRACKING = "StartTracking"
    END_TRACKING = "EndTracking"
    ALERT = "Alert"
    SUCCESS = "Success"

    @property
    def is_alert_style(self) -> bool:
        return self in {ScheduleItemKind.ALERT, ScheduleItemKind.START_TRACKING}


@dataclass(frozen=True)
class ScheduleItem:
    at: time
    label: str
    kind: ScheduleItemKind


@dataclass(frozen=True)
class Schedule:
    """
    A day plan of labelled instants. Items keep their declaration order;
    tracking windows are derived per query from StartTracking/EndTracking pairs.
    """

    pad_minutes: int = 0
    items: Tuple[ScheduleItem, ...] = field(default_factory=tuple)
    alarm_sound_file: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    @property
    def starts_at(self) -> time:
        if not self.items:
            return time.min
        earliest = min(item.at for item in self.items)
        return _minutes_to_time(_to_minutes(earliest) - self.pad_minutes)

    @property
    def ends_at(self) -> time:
        if not self.items:
            return time.max
        latest = max(item.at for item in self.items)
        return _minutes_to_time(_to_minutes(latest) + self.pad_minutes)

    def timeline_bounds(self) -> Tuple[time, time]:
        return self.starts_at, self.ends_at

    def sorted_items(self) -> Tuple[ScheduleItem, ...]:
        return tuple(sorted(self.items, key=lambda item: item.at))

    def is_currently_tracking(self, now: datetime | time) -> bool:
        """
        Return whether ``now`` falls inside a tracking window: after the most
        recent StartTracking and strictly before the first EndTracking that
        follows it. An unterminated StartTracking never counts as tracking.
        """
        current = now.time() if isinstance(now, datetime) else now

        starts = [
            item.at
            for item in self.items
            if item.kind is ScheduleItemKind.START_TRACKING and item.at <= current
        ]
        if not starts:
            return False
        last_start = max(starts)

        ends = [
            item.at
            for item in self.items
            if item.kind is ScheduleItemKind.END_TRACKING and item.at > last_start
        ]
        if not ends:
            return False
        return current < min(ends)


def _to_minutes(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60 + value.microsecond / 60_000_000


def _minutes_to_time(minutes: float) -> time:
    if minutes <= 0:
        return time.min
    if minutes >= _MINUTES_PER_DAY:
        return time.max
    total_seconds = round(minutes * 60, 6)
    whole = int(total_seconds)
    micro = int(round((total_seconds - whole) * 1_000_000))
    hours, remainder = divmod(whole, 3600)
    mins, secs = divmod(remainder, 60)
    return time(hours, mins, secs, min(micro, 999_999))
