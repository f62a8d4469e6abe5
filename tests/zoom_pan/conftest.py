# tests/zoom_pan/conftest.py
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def pytest_configure() -> None:
    # Ensure `src` is importable when running tests from the repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists():
        sys.path.insert(0, str(src_dir))


class RecordingDeferrer:
    """Collects deferred callables; `run()` flushes them like a zero-delay timer."""

    def __init__(self) -> None:
        self.pending: list[Callable[[], None]] = []

    def __call__(self, fn: Callable[[], None]) -> None:
        self.pending.append(fn)

    def run(self) -> int:
        fns, self.pending = self.pending, []
        for fn in fns:
            fn()
        return len(fns)


@pytest.fixture
def deferrer() -> RecordingDeferrer:
    return RecordingDeferrer()


@pytest.fixture
def zoom_calls() -> list[float]:
    return []


@pytest.fixture
def controller(deferrer: RecordingDeferrer, zoom_calls: list[float]):
    from nicezoom.zoom_pan.controller import ZoomPanController
    from nicezoom.zoom_pan.transform import GestureConfig

    return ZoomPanController(
        GestureConfig(on_user_zoom=zoom_calls.append),
        defer=deferrer,
        name="test",
    )
