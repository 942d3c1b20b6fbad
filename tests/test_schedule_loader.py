"""
Tests for ScheduleLoader.
"""

import json

from core.schedule_loader import ScheduleLoader

VALID = {
    "padMinutes": 5,
    "schedule": [
        {"at": "8.00", "label": "Start", "kind": "StartTracking"},
        {"at": "17.00", "label": "End", "kind": "EndTracking"},
    ],
}


def _write(path, document):
    path.write_text(json.dumps(document), encoding="utf-8")


class TestScheduleLoader:
    def test_missing_file_leaves_no_schedule(self, tmp_path):
        loader = ScheduleLoader(tmp_path)

        assert loader.reload() is None
        assert loader.current_schedule() is None

    def test_loads_schedule(self, tmp_path):
        _write(tmp_path / "schedule.json", VALID)
        loader = ScheduleLoader(tmp_path)

        schedule = loader.reload()

        assert schedule is not None
        assert loader.current_schedule() is schedule
        assert len(schedule.items) == 2

    def test_broken_file_replaces_previous_schedule(self, tmp_path):
        path = tmp_path / "schedule.json"
        _write(path, VALID)
        loader = ScheduleLoader(tmp_path)
        loader.reload()

        path.write_text("{broken", encoding="utf-8")

        assert loader.reload() is None
        assert loader.current_schedule() is None

    def test_resolve_asset(self, tmp_path):
        loader = ScheduleLoader(tmp_path)
        absolute = tmp_path / "sounds" / "alarm.wav"

        assert loader.resolve_asset("alarm.wav") == tmp_path / "alarm.wav"
        assert loader.resolve_asset(str(absolute)) == absolute
        assert loader.resolve_asset(None) is None
        assert loader.resolve_asset("") is None
