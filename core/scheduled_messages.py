"""
Lookup of the schedule item that is due right now.
"""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Tuple

from shared.schedule import Schedule, ScheduleItem

DEFAULT_COOLDOWN_SECONDS = 30
_SECONDS_PER_DAY = 24 * 60 * 60


def match_now(
    schedule: Optional[Schedule],
    now: datetime | time,
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
) -> Optional[ScheduleItem]:
    """
    Return the first item, in declaration order, that came due less than
    ``cooldown_seconds`` ago. An item that is still ahead of ``now`` never
    matches; the elapsed time wraps around midnight.
    """
    if schedule is None:
        return None

    current = now.time() if isinstance(now, datetime) else now
    for item in schedule.items:
        if seconds_since(item.at, current) < cooldown_seconds:
            return item
    return None


def all_scheduled_messages(schedule: Optional[Schedule]) -> Tuple[ScheduleItem, ...]:
    if schedule is None:
        return ()
    return schedule.items


def seconds_since(earlier: time, later: time) -> float:
    """Seconds from ``earlier`` forward to ``later``, wrapping past midnight."""
    return (_seconds_of_day(later) - _seconds_of_day(earlier)) % _SECONDS_PER_DAY


def _seconds_of_day(value: time) -> float:
    return value.hour * 3600 + value.minute * 60 + value.second + value.microsecond / 1_000_000
