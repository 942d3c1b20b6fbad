"""
Submission of presentation commands to the thread that owns the surfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from activity_hud import logger as app_logger

_LOGGER = app_logger.get_logger()

Command = Callable[[], None]


class CommandDispatcher(ABC):
    """
    Two submission modes: ``post`` queues the command and returns at once,
    ``send`` returns only after the command has run.
    """

    @abstractmethod
    def post(self, command: Command, description: str = "") -> None:
        ...

    @abstractmethod
    def send(self, command: Command, description: str = "") -> None:
        ...

    @staticmethod
    def run_guarded(command: Command, description: str = "") -> None:
        try:
            command()
        except Exception:
            _LOGGER.exception("Presentation command '{}' failed", description or command)


class ImmediateDispatcher(CommandDispatcher):
    """Runs every command inline. Used when the caller already owns the surfaces."""

    def post(self, command: Command, description: str = "") -> None:
        self.run_guarded(command, description)

    def send(self, command: Command, description: str = "") -> None:
        self.run_guarded(command, description)
