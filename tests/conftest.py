from __future__ import annotations

import os
import random
import sys
import tempfile
from pathlib import Path
from typing import Any, List, Tuple

# Keep test log files out of the user profile; must run before the first
# activity_hud.logger import.
os.environ.setdefault(
    "ACTIVITY_HUD_LOG_DIR", str(Path(tempfile.gettempdir()) / "activity-hud-tests")
)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest  # noqa: E402

from core.surfaces import Surface  # noqa: E402


class RecordingSurface(Surface):
    """Surface double that records every call and hands out numbered handles."""

    def __init__(self, fail_create: int = 0) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.live: List[int] = []
        self._next_handle = 0
        self._fail_create = fail_create

    def create(self, params: Any) -> int:
        if self._fail_create:
            self._fail_create -= 1
            self.calls.append(("create-failed", params))
            raise RuntimeError("surface unavailable")
        self._next_handle += 1
        self.calls.append(("create", params))
        self.live.append(self._next_handle)
        return self._next_handle

    def update(self, handle: int, params: Any) -> None:
        self.calls.append(("update", params))

    def destroy(self, handle: int) -> None:
        self.calls.append(("destroy", handle))
        self.live.remove(handle)

    def count(self, kind: str) -> int:
        return sum(1 for name, _ in self.calls if name == kind)


@pytest.fixture
def surfaces():
    return {
        "idle": RecordingSurface(),
        "scheduled": RecordingSurface(),
        "vignette": RecordingSurface(),
        "reward": RecordingSurface(),
    }


@pytest.fixture
def rng():
    return random.Random(1234)
