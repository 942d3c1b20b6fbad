"""
Tests for command-line parsing of the entry point.
"""

from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets")

from activity_hud.main import build_parser, debug_options_from_args, main  # noqa: E402
from shared.schedule import ScheduleItemKind  # noqa: E402


def _options(*argv):
    return debug_options_from_args(build_parser().parse_args(list(argv)))


class TestArguments:
    def test_data_folder_only(self):
        args = build_parser().parse_args(["C:/hud"])
        options = debug_options_from_args(args)

        assert args.data_folder == Path("C:/hud")
        assert not options.show_idle_message
        assert not options.show_scheduled_message
        assert options.idle_threshold_seconds is None

    def test_debug_idle(self):
        options = _options("data", "--debug-idle", "--debug-idle-time", "10")

        assert options.show_idle_message
        assert options.idle_threshold_seconds == 10

    def test_scheduled_alert_default_text(self):
        options = _options("data", "--debug-scheduled-alert")

        assert options.scheduled_message_text == "Debug scheduled message"
        assert options.scheduled_message_kind is ScheduleItemKind.START_TRACKING

    def test_scheduled_success_with_text(self):
        options = _options("data", "--debug-scheduled-success", "Well done")

        assert options.scheduled_message_text == "Well done"
        assert options.scheduled_message_kind is ScheduleItemKind.END_TRACKING

    def test_non_positive_idle_time_is_ignored(self):
        assert _options("data", "--debug-idle-time", "0").idle_threshold_seconds is None

    def test_missing_data_folder_exits(self, tmp_path):
        assert main(["activity-hud", str(tmp_path / "absent")]) == 2
