"""
Presentation surface contract and the slot that owns one live surface.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

from activity_hud import logger as app_logger

_LOGGER = app_logger.get_logger()


class Surface(ABC):
    """
    Something the controller can put on screen.

    ``create`` returns an opaque handle which is later passed back to
    ``update`` and ``destroy``. Implementations run on the presentation thread.
    """

    @abstractmethod
    def create(self, params: Any) -> Any:
        ...

    def update(self, handle: Any, params: Any) -> None:
        """Push new parameters to a live surface. Most surfaces are static."""

    @abstractmethod
    def destroy(self, handle: Any) -> None:
        ...


class SurfaceSlot:
    """
    Holds at most one live handle of a surface.

    All methods except :meth:`take_failure` and :attr:`is_live` are meant to be
    executed on the presentation thread. Creation and teardown are idempotent,
    and a failing surface call is logged and leaves the slot empty so the
    controller can retry on a later poll.
    """

    def __init__(self, surface: Surface, name: str) -> None:
        self.name = name
        self._surface = surface
        self._handle: Optional[Any] = None
        self._failed = False
        self._lock = threading.Lock()

    @property
    def is_live(self) -> bool:
        return self._handle is not None

    @property
    def handle(self) -> Optional[Any]:
        return self._handle

    def show(self, params: Any) -> bool:
        if self._handle is not None:
            return False
        try:
            self._handle = self._surface.create(params)
        except Exception:
            _LOGGER.exception("Failed to create {} surface", self.name)
            self._handle = None
            self._mark_failed()
            return False
        return True

    def update(self, params: Any) -> None:
        if self._handle is None:
            return
        try:
            self._surface.update(self._handle, params)
        except Exception:
            _LOGGER.exception("Failed to update {} surface; discarding it", self.name)
            self._discard()
            self._mark_failed()

    def hide(self) -> None:
        if self._handle is None:
            return
        self._discard()

    def replace(self, params: Any) -> bool:
        self.hide()
        return self.show(params)

    def take_failure(self) -> bool:
        """Return whether a surface call failed since the last check, and clear the flag."""
        with self._lock:
            failed, self._failed = self._failed, False
        return failed

    def _discard(self) -> None:
        handle, self._handle = self._handle, None
        try:
            self._surface.destroy(handle)
        except Exception:
            _LOGGER.exception("Failed to destroy {} surface", self.name)

    def _mark_failed(self) -> None:
        with self._lock:
            self._failed = True
