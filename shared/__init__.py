"""
Schedule model and schema shared by the Activity HUD runtime.
"""

from .schedule import Schedule, ScheduleItem, ScheduleItemKind  # noqa: F401
from .schedule_schema import ScheduleValidationError, load_and_validate_schedule  # noqa: F401
