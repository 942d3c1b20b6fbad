"""
Schedule file validation utilities.

Turns the JSON document found in ``schedule.json`` into an immutable
:class:`~shared.schedule.Schedule`.
"""

from __future__ import annotations

import json
from datetime import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schedule import Schedule, ScheduleItem, ScheduleItemKind


class ScheduleValidationError(ValueError):
    """Raised when a schedule file is missing required data or is malformed."""


def load_and_validate_schedule(path: Path) -> Schedule:
    """
    Load a schedule JSON file and validate it.

    Property names are matched case-insensitively so ``padMinutes`` and
    ``PadMinutes`` are both accepted.
    """
    try:
        contents = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise ScheduleValidationError(f"Schedule file not found: {path}") from exc
    except OSError as exc:
        raise ScheduleValidationError(f"Unable to read schedule: {path}") from exc

    try:
        raw_schedule = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise ScheduleValidationError(f"Schedule is not valid JSON: {exc}") from exc

    return parse_schedule(raw_schedule)


def parse_schedule(raw_schedule: Any) -> Schedule:
    if not isinstance(raw_schedule, dict):
        raise ScheduleValidationError("Schedule root must be a JSON object.")

    fields = _lower_keys(raw_schedule)

    pad_minutes = _validate_pad_minutes(fields.get("padminutes"))

    raw_items = fields.get("schedule")
    if raw_items is None:
        raw_items = []
    if not isinstance(raw_items, list):
        raise ScheduleValidationError("schedule must be a list of items.")

    items: List[ScheduleItem] = []
    for index, raw_item in enumerate(raw_items):
        items.append(_parse_item(raw_item, index=index))

    alarm = fields.get("alarmsoundfile")
    alarm_value: Optional[str] = None
    if alarm is not None:
        if not isinstance(alarm, str):
            raise ScheduleValidationError("alarmSoundFile must be a string.")
        alarm_value = alarm.strip() or None

    return Schedule(pad_minutes=pad_minutes, items=tuple(items), alarm_sound_file=alarm_value)


def parse_time_of_day(value: Any) -> time:
    """
    Parse a time of day written as ``8.00``, ``08.00``, ``8:00`` or an
    ISO-8601 ``HH:MM[:SS]`` value. Empty values map to midnight.
    """
    if not isinstance(value, str):
        raise ScheduleValidationError("at must be a string such as '8.00'.")

    cleaned = value.strip()
    if not cleaned:
        return time.min

    parts = cleaned.replace(":", ".").split(".")
    if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
        hours, minutes = int(parts[0]), int(parts[1])
        seconds = int(parts[2]) if len(parts) >= 3 and parts[2].isdigit() else 0
        try:
            return time(hours, minutes, seconds)
        except ValueError as exc:
            raise ScheduleValidationError(f"at value '{value}' is out of range.") from exc

    try:
        return time.fromisoformat(cleaned)
    except ValueError as exc:
        raise ScheduleValidationError(
            f"at value '{value}' must look like 8.00, 08:00 or 08:00:00."
        ) from exc


def _parse_item(raw_item: Any, *, index: int) -> ScheduleItem:
    if not isinstance(raw_item, dict):
        raise ScheduleValidationError(f"schedule[{index}] must be a JSON object.")

    fields = _lower_keys(raw_item)
    at = parse_time_of_day(fields.get("at", ""))

    label = fields.get("label", "")
    if label is None:
        label = ""
    if not isinstance(label, str):
        raise ScheduleValidationError(f"schedule[{index}].label must be a string.")

    kind = _parse_kind(fields.get("kind"), index=index)
    return ScheduleItem(at=at, label=label.strip(), kind=kind)


def _parse_kind(value: Any, *, index: int) -> ScheduleItemKind:
    if not isinstance(value, str) or not value.strip():
        raise ScheduleValidationError(f"schedule[{index}].kind is required.")

    lowered = value.strip().lower()
    for kind in ScheduleItemKind:
        if kind.value.lower() == lowered:
            return kind

    allowed = ", ".join(kind.value for kind in ScheduleItemKind)
    raise ScheduleValidationError(f"schedule[{index}].kind must be one of: {allowed}.")


def _validate_pad_minutes(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ScheduleValidationError("padMinutes must be a non-negative integer.")
    try:
        pad = int(value)
    except (TypeError, ValueError) as exc:
        raise ScheduleValidationError("padMinutes must be a non-negative integer.") from exc
    if pad < 0:
        raise ScheduleValidationError("padMinutes must not be negative.")
    return pad


def _lower_keys(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {str(key).lower(): value for key, value in raw.items()}
