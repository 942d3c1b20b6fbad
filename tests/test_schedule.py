"""
Tests for the Schedule value: tracking windows and timeline bounds.
"""

from datetime import datetime, time

from shared.schedule import Schedule, ScheduleItem, ScheduleItemKind

START = ScheduleItemKind.START_TRACKING
END = ScheduleItemKind.END_TRACKING


def _item(hour, minute, kind, label=""):
    return ScheduleItem(at=time(hour, minute), label=label, kind=kind)


class TestTracking:
    def test_empty_schedule_never_tracks(self):
        schedule = Schedule()

        for hour in range(24):
            assert not schedule.is_currently_tracking(time(hour, 30))

    def test_window_is_half_open(self):
        schedule = Schedule(items=(_item(8, 0, START), _item(9, 0, END)))

        assert not schedule.is_currently_tracking(time(7, 59, 59))
        assert schedule.is_currently_tracking(time(8, 0))
        assert schedule.is_currently_tracking(time(8, 59, 59))
        assert not schedule.is_currently_tracking(time(9, 0))
        assert not schedule.is_currently_tracking(time(12, 0))

    def test_accepts_datetime(self):
        schedule = Schedule(items=(_item(8, 0, START), _item(9, 0, END)))

        assert schedule.is_currently_tracking(datetime(2024, 5, 6, 8, 30))

    def test_unterminated_start_never_tracks(self):
        schedule = Schedule(items=(_item(8, 0, START),))

        assert not schedule.is_currently_tracking(time(8, 0))
        assert not schedule.is_currently_tracking(time(23, 0))

    def test_several_windows(self):
        schedule = Schedule(
            items=(
                _item(8, 0, START),
                _item(9, 0, END),
                _item(13, 0, START),
                _item(14, 0, END),
            )
        )

        assert schedule.is_currently_tracking(time(8, 30))
        assert not schedule.is_currently_tracking(time(10, 0))
        assert schedule.is_currently_tracking(time(13, 30))
        assert not schedule.is_currently_tracking(time(14, 30))

    def test_alerts_do_not_open_windows(self):
        schedule = Schedule(
            items=(_item(8, 0, ScheduleItemKind.ALERT), _item(9, 0, END))
        )

        assert not schedule.is_currently_tracking(time(8, 30))

    def test_items_list_is_frozen_into_tuple(self):
        schedule = Schedule(items=[_item(8, 0, START)])

        assert isinstance(schedule.items, tuple)


class TestBounds:
    def test_empty_schedule_spans_the_day(self):
        schedule = Schedule()

        assert schedule.starts_at == time.min
        assert schedule.ends_at == time.max

    def test_padding_extends_both_ends(self):
        schedule = Schedule(
            pad_minutes=10, items=(_item(10, 0, END), _item(8, 0, START))
        )

        assert schedule.timeline_bounds() == (time(7, 50), time(10, 10))

    def test_padding_is_clamped_to_the_day(self):
        schedule = Schedule(
            pad_minutes=30, items=(_item(0, 10, START), _item(23, 50, END))
        )

        assert schedule.starts_at == time.min
        assert schedule.ends_at == time.max

    def test_sorted_items_keeps_declaration_order_untouched(self):
        late, early = _item(10, 0, END), _item(8, 0, START)
        schedule = Schedule(items=(late, early))

        assert schedule.sorted_items() == (early, late)
        assert schedule.items == (late, early)


class TestKinds:
    def test_alert_style(self):
        assert ScheduleItemKind.ALERT.is_alert_style
        assert ScheduleItemKind.START_TRACKING.is_alert_style
        assert not ScheduleItemKind.SUCCESS.is_alert_style
        assert not ScheduleItemKind.END_TRACKING.is_alert_style
