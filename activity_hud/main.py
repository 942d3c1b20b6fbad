"""
Entry point for the Activity HUD application.
"""

from __future__ import annotations

import argparse
import ctypes
import sys
import time
from pathlib import Path
from typing import Optional, Sequence, Tuple

from PySide6.QtWidgets import QApplication

from activity_hud import APP_NAME, APP_VERSION
from activity_hud import logger as app_logger
from core.app import DebugOptions, HudCoordinator
from core.schedule_loader import SCHEDULE_FILE_NAME
from shared.schedule import ScheduleItemKind

_LOGGER = app_logger.get_logger()
_MUTEX_NAME = "Global\\ActivityHudMutex"
_ERROR_ALREADY_EXISTS = 183
LOG_FILE_NAME = "activity_hud.log"
DEFAULT_DEBUG_TEXT = "Debug scheduled message"


class _InstanceGuard:
    """Simple named mutex guard to prevent concurrent instances."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._handle = None
        self._kernel32 = ctypes.WinDLL("kernel32", use_last_error=True) if sys.platform == "win32" else None

    def acquire(self) -> bool:
        if self._kernel32 is None:
            return True
        ctypes.set_last_error(0)
        handle = self._kernel32.CreateMutexW(None, False, self._name)
        if not handle:
            # If we cannot create the mutex we allow the instance.
            return True
        last_error = ctypes.get_last_error()
        if last_error == _ERROR_ALREADY_EXISTS:
            self._kernel32.CloseHandle(handle)
            return False
        self._handle = handle
        return True

    def release(self) -> None:
        if self._kernel32 is None or not self._handle:
            return
        self._kernel32.ReleaseMutex(self._handle)
        self._kernel32.CloseHandle(self._handle)
        self._handle = None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activity-hud",
        description="Idle reminders, scheduled alerts and activity rewards.",
    )
    parser.add_argument("data_folder", type=Path, help=f"folder containing {SCHEDULE_FILE_NAME}")
    parser.add_argument(
        "--debug-idle",
        action="store_true",
        help="show the idle message immediately",
    )
    parser.add_argument(
        "--debug-scheduled-alert",
        nargs="?",
        const=DEFAULT_DEBUG_TEXT,
        metavar="TEXT",
        help="show an alert-style scheduled message immediately",
    )
    parser.add_argument(
        "--debug-scheduled-success",
        nargs="?",
        const=DEFAULT_DEBUG_TEXT,
        metavar="TEXT",
        help="show a success-style scheduled message immediately",
    )
    parser.add_argument(
        "--debug-idle-time",
        type=int,
        metavar="SECONDS",
        help="override the idle threshold",
    )
    parser.add_argument("--version", action="version", version=f"{APP_NAME} {APP_VERSION}")
    return parser


def debug_options_from_args(args: argparse.Namespace) -> DebugOptions:
    """The success flag wins when both scheduled-message flags are given."""
    text: Optional[str] = None
    kind = ScheduleItemKind.START_TRACKING
    if args.debug_scheduled_alert is not None:
        text = args.debug_scheduled_alert
    if args.debug_scheduled_success is not None:
        text = args.debug_scheduled_success
        kind = ScheduleItemKind.END_TRACKING

    idle_time = args.debug_idle_time if args.debug_idle_time and args.debug_idle_time > 0 else None
    return DebugOptions(
        show_idle_message=args.debug_idle,
        scheduled_message_text=text,
        scheduled_message_kind=kind,
        idle_threshold_seconds=idle_time,
    )


def _run_application_once(
    qt_argv: Sequence[str], data_dir: Path, debug: DebugOptions
) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication(list(qt_argv))
    app.setQuitOnLastWindowClosed(False)
    coordinator = HudCoordinator(data_dir, debug=debug)
    coordinator.start()
    exit_code = app.exec()
    manual_shutdown = getattr(coordinator, "manual_shutdown_requested", False)
    return exit_code, bool(manual_shutdown)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Launch the application with single-instance + recovery safeguards."""
    argv = list(sys.argv if argv is None else argv)
    args = build_parser().parse_args(argv[1:])
    data_dir: Path = args.data_folder

    if not data_dir.is_dir():
        _LOGGER.error("Data folder {} does not exist", data_dir)
        return 2

    app_logger.configure(data_dir / LOG_FILE_NAME, force=True)
    debug = debug_options_from_args(args)

    guard = _InstanceGuard(_MUTEX_NAME)
    if not guard.acquire():
        _LOGGER.debug("Activity HUD instance already running; exiting.")
        return 0

    backoff_seconds = 2
    max_backoff = 30

    try:
        while True:
            try:
                exit_code, manual = _run_application_once(argv[:1], data_dir, debug)
            except Exception:  # pragma: no cover - crash guard
                _LOGGER.exception("HUD crashed; attempting automatic recovery.")
                exit_code = 1
                manual = False

            if manual:
                return exit_code

            _LOGGER.warning(
                "HUD exited unexpectedly (code={}). Restarting in {} seconds.",
                exit_code,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, max_backoff)
    finally:
        guard.release()


if __name__ == "__main__":
    raise SystemExit(main())
