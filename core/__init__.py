"""
Activity HUD runtime: controller, idle sampling, effects and Qt surfaces.
"""

from .controller import ControllerState, NotificationController  # noqa: F401
from .dispatch import CommandDispatcher, ImmediateDispatcher  # noqa: F401
from .settings import HudSettings, HudSettingsManager  # noqa: F401
from .surfaces import Surface, SurfaceSlot  # noqa: F401
