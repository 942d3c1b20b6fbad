"""
Timeline discretisation for the idle overlay.

The schedule span is cut into fixed ten-minute buckets. Each bucket carries the
colour of the schedule interval it starts in plus current/past flags and the
label of any item that falls inside it. Nothing here keeps state, so the idle
overlay regenerates the whole list on every refresh tick.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import List, NamedTuple, Optional, Sequence

from shared.schedule import Schedule, ScheduleItem

MINUTES_PER_SEGMENT = 10
DARKEN_FACTOR = 0.5


class Rgb(NamedTuple):
    red: int
    green: int
    blue: int


ACTIVE_COLOR = Rgb(0, 200, 0)
NEUTRAL_COLOR = Rgb(128, 128, 128)
HIGHLIGHT_COLOR = Rgb(255, 255, 0)


@dataclass(frozen=True)
class TimelineSegment:
    starts_at_minutes: float
    base_color: Rgb
    is_current: bool
    is_past: bool
    label_above: Optional[str] = None
    label_strikethrough: bool = False


def generate_timeline(schedule: Schedule, now: datetime | time) -> List[TimelineSegment]:
    current = _minutes_of_day(now.time() if isinstance(now, datetime) else now)
    start, end = (_minutes_of_day(bound) for bound in schedule.timeline_bounds())

    total_segments = max(0, int(end - start)) // MINUTES_PER_SEGMENT
    sorted_items = schedule.sorted_items()

    segments: List[TimelineSegment] = []
    for index in range(total_segments):
        segment_start = start + index * MINUTES_PER_SEGMENT
        segment_end = segment_start + MINUTES_PER_SEGMENT

        label: Optional[str] = None
        strikethrough = False
        item = _first_item_between(sorted_items, segment_start, segment_end)
        if item is not None:
            label = item.label
            strikethrough = current > _minutes_of_day(item.at)

        segments.append(
            TimelineSegment(
                starts_at_minutes=segment_start,
                base_color=_base_color_for(segment_start, sorted_items),
                is_current=segment_start <= current < segment_end,
                is_past=current >= segment_end,
                label_above=label,
                label_strikethrough=strikethrough,
            )
        )
    return segments


def darken(color: Rgb, factor: float = DARKEN_FACTOR) -> Rgb:
    return Rgb(int(color.red * factor), int(color.green * factor), int(color.blue * factor))


def blink(color: Rgb, highlight_phase: bool) -> Rgb:
    return HIGHLIGHT_COLOR if highlight_phase else color


def display_color(segment: TimelineSegment, blink_phase: bool) -> Rgb:
    """Colour a segment is painted with on a given refresh tick."""
    color = segment.base_color
    if segment.is_past:
        color = darken(color)
    if segment.is_current:
        color = blink(color, blink_phase)
    return color


def label_color(segment: TimelineSegment) -> Rgb:
    return darken(ACTIVE_COLOR) if segment.is_past else ACTIVE_COLOR


def _base_color_for(minutes: float, sorted_items: Sequence[ScheduleItem]) -> Rgb:
    if not sorted_items:
        return NEUTRAL_COLOR

    boundaries = [_minutes_of_day(item.at) for item in sorted_items]
    if minutes < boundaries[0] or minutes >= boundaries[-1]:
        return NEUTRAL_COLOR

    for index in range(len(boundaries) - 1):
        if boundaries[index] <= minutes < boundaries[index + 1]:
            return ACTIVE_COLOR if index % 2 == 0 else NEUTRAL_COLOR
    return NEUTRAL_COLOR


def _first_item_between(
    sorted_items: Sequence[ScheduleItem], start: float, end: float
) -> Optional[ScheduleItem]:
    for item in sorted_items:
        if start <= _minutes_of_day(item.at) < end:
            return item
    return None


def _minutes_of_day(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60 + value.microsecond / 60_000_000
