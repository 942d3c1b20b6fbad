"""
Tests for schedule.json parsing and validation.
"""

import json
from datetime import time

import pytest

from shared.schedule import ScheduleItemKind
from shared.schedule_schema import (
    ScheduleValidationError,
    load_and_validate_schedule,
    parse_schedule,
    parse_time_of_day,
)


class TestParseSchedule:
    def test_full_document(self):
        schedule = parse_schedule(
            {
                "padMinutes": 10,
                "schedule": [
                    {"at": "8.00", "label": "Start", "kind": "StartTracking"},
                    {"at": "17.30", "label": "Home time", "kind": "EndTracking"},
                ],
                "alarmSoundFile": "alarm.wav",
            }
        )

        assert schedule.pad_minutes == 10
        assert [item.at for item in schedule.items] == [time(8, 0), time(17, 30)]
        assert schedule.items[1].label == "Home time"
        assert schedule.items[0].kind is ScheduleItemKind.START_TRACKING
        assert schedule.alarm_sound_file == "alarm.wav"

    def test_keys_and_kinds_are_case_insensitive(self):
        schedule = parse_schedule(
            {"PadMinutes": 5, "Schedule": [{"At": "9:15", "Label": "x", "Kind": "endtracking"}]}
        )

        assert schedule.pad_minutes == 5
        assert schedule.items[0].kind is ScheduleItemKind.END_TRACKING

    def test_missing_fields_use_defaults(self):
        schedule = parse_schedule({})

        assert schedule.pad_minutes == 0
        assert schedule.items == ()
        assert schedule.alarm_sound_file is None

    def test_null_label_becomes_empty(self):
        schedule = parse_schedule({"schedule": [{"at": "8.00", "label": None, "kind": "Alert"}]})

        assert schedule.items[0].label == ""

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {"padMinutes": -1},
            {"padMinutes": True},
            {"padMinutes": "ten"},
            {"schedule": {"at": "8.00"}},
            {"schedule": ["8.00"]},
            {"schedule": [{"at": "8.00", "kind": "Lunch"}]},
            {"schedule": [{"at": "8.00"}]},
            {"schedule": [{"at": "8.00", "label": 3, "kind": "Alert"}]},
            {"alarmSoundFile": 1},
        ],
    )
    def test_invalid_documents(self, document):
        with pytest.raises(ScheduleValidationError):
            parse_schedule(document)


class TestParseTimeOfDay:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("8.00", time(8, 0)),
            ("08.05", time(8, 5)),
            ("8:00", time(8, 0)),
            ("08:05:30", time(8, 5, 30)),
            ("23.59", time(23, 59)),
            ("", time(0, 0)),
        ],
    )
    def test_accepted_formats(self, value, expected):
        assert parse_time_of_day(value) == expected

    @pytest.mark.parametrize("value", ["25.00", "8.75", "noon", 8, None])
    def test_rejected_values(self, value):
        with pytest.raises(ScheduleValidationError):
            parse_time_of_day(value)


class TestLoadFromFile:
    def test_reads_file_with_bom(self, tmp_path):
        path = tmp_path / "schedule.json"
        document = {"schedule": [{"at": "8.00", "label": "Start", "kind": "StartTracking"}]}
        path.write_text(json.dumps(document), encoding="utf-8-sig")

        schedule = load_and_validate_schedule(path)

        assert schedule.items[0].label == "Start"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "schedule.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ScheduleValidationError):
            load_and_validate_schedule(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScheduleValidationError):
            load_and_validate_schedule(tmp_path / "absent.json")
