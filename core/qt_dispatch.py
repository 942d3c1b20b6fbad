"""
Qt-backed command dispatcher delivering commands to the GUI thread.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, QThread, Qt, Signal, Slot

from core.dispatch import Command, CommandDispatcher


class _Envelope:
    __slots__ = ("command", "description")

    def __init__(self, command: Command, description: str) -> None:
        self.command = command
        self.description = description


class _GuiBridge(QObject):
    queued = Signal(object)
    blocking = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.queued.connect(self._deliver, Qt.ConnectionType.QueuedConnection)
        self.blocking.connect(self._deliver, Qt.ConnectionType.BlockingQueuedConnection)

    @Slot(object)
    def _deliver(self, envelope: _Envelope) -> None:
        CommandDispatcher.run_guarded(envelope.command, envelope.description)


class QtDispatcher(CommandDispatcher):
    """
    Must be constructed on the GUI thread. ``post`` uses a queued connection,
    ``send`` a blocking queued one; when called from the GUI thread itself
    ``send`` runs inline because a blocking connection would deadlock.
    """

    def __init__(self, parent: QObject | None = None) -> None:
        self._bridge = _GuiBridge(parent)

    def post(self, command: Command, description: str = "") -> None:
        self._bridge.queued.emit(_Envelope(command, description))

    def send(self, command: Command, description: str = "") -> None:
        if QThread.currentThread() == self._bridge.thread():
            self.run_guarded(command, description)
            return
        self._bridge.blocking.emit(_Envelope(command, description))
