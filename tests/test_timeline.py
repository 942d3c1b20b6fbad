"""
Tests for timeline discretisation and segment colouring.
"""

from datetime import time

from core.timeline import (
    ACTIVE_COLOR,
    HIGHLIGHT_COLOR,
    NEUTRAL_COLOR,
    darken,
    display_color,
    generate_timeline,
    label_color,
)
from shared.schedule import Schedule, ScheduleItem, ScheduleItemKind


def _workday():
    return Schedule(
        pad_minutes=10,
        items=(
            ScheduleItem(time(8, 0), "Start", ScheduleItemKind.START_TRACKING),
            ScheduleItem(time(10, 0), "End", ScheduleItemKind.END_TRACKING),
        ),
    )


class TestGenerateTimeline:
    def test_segment_count_covers_padded_span(self):
        segments = generate_timeline(_workday(), time(9, 5))

        assert len(segments) == 14
        assert segments[0].starts_at_minutes == 7 * 60 + 50
        assert segments[-1].starts_at_minutes == 10 * 60

    def test_current_and_past_flags(self):
        segments = generate_timeline(_workday(), time(9, 5))

        assert [index for index, s in enumerate(segments) if s.is_current] == [7]
        assert all(s.is_past for s in segments[:7])
        assert not any(s.is_past for s in segments[7:])

    def test_base_colours_follow_intervals(self):
        segments = generate_timeline(_workday(), time(9, 5))

        assert segments[0].base_color == NEUTRAL_COLOR
        assert all(s.base_color == ACTIVE_COLOR for s in segments[1:13])
        assert segments[13].base_color == NEUTRAL_COLOR

    def test_labels_and_strikethrough(self):
        segments = generate_timeline(_workday(), time(9, 5))
        labelled = {i: s for i, s in enumerate(segments) if s.label_above}

        assert sorted(labelled) == [1, 13]
        assert labelled[1].label_above == "Start"
        assert labelled[1].label_strikethrough
        assert labelled[13].label_above == "End"
        assert not labelled[13].label_strikethrough

    def test_empty_schedule_spans_whole_day(self):
        segments = generate_timeline(Schedule(), time(12, 0))

        assert len(segments) == 143
        assert all(s.base_color == NEUTRAL_COLOR for s in segments)
        assert not any(s.label_above for s in segments)


class TestColours:
    def test_darken_halves_channels(self):
        assert darken(ACTIVE_COLOR) == (0, 100, 0)

    def test_display_colour(self):
        segments = generate_timeline(_workday(), time(9, 5))

        assert display_color(segments[1], blink_phase=True) == darken(ACTIVE_COLOR)
        assert display_color(segments[7], blink_phase=True) == HIGHLIGHT_COLOR
        assert display_color(segments[7], blink_phase=False) == ACTIVE_COLOR
        assert display_color(segments[10], blink_phase=True) == ACTIVE_COLOR

    def test_label_colour_dims_in_the_past(self):
        segments = generate_timeline(_workday(), time(9, 5))

        assert label_color(segments[1]) == darken(ACTIVE_COLOR)
        assert label_color(segments[13]) == ACTIVE_COLOR
