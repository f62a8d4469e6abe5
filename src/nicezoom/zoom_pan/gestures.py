# nicezoom/src/nicezoom/zoom_pan/gestures.py

"""Event payload parsing and ephemeral gesture sessions.

Payloads are the plain dicts NiceGUI hands over in ``GenericEventArguments.args``.
Coordinates arrive in browser client space; the container rect (also in client
space) is sent alongside whenever a handler needs container-local positions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import numpy as np


def as_float(value: Any) -> Optional[float]:
    """Finite float from a JSON payload value, else None."""
    # bool is an int subclass; never treat a flag as a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not np.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class PointerPoint:
    """A pointer or touch contact in client coordinates."""

    x: float
    y: float

    @classmethod
    def from_args(cls, args: Optional[Mapping[str, Any]]) -> Optional["PointerPoint"]:
        if not args:
            return None
        x = as_float(args.get("clientX"))
        y = as_float(args.get("clientY"))
        if x is None or y is None:
            return None
        return cls(x, y)


@dataclass(frozen=True)
class ContainerRect:
    """Bounding box of the viewport container in client coordinates."""

    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_args(cls, args: Optional[Mapping[str, Any]]) -> Optional["ContainerRect"]:
        """Parse ``args["rect"]``; None when the container is not laid out yet."""
        if not args:
            return None
        rect = args.get("rect")
        if not isinstance(rect, Mapping):
            return None
        values = [as_float(rect.get(k)) for k in ("left", "top", "width", "height")]
        if any(v is None for v in values):
            return None
        left, top, width, height = values
        if width <= 0 or height <= 0:
            return None
        return cls(left, top, width, height)

    def to_local(self, point: PointerPoint) -> tuple[float, float]:
        return point.x - self.left, point.y - self.top


def touch_points(args: Optional[Mapping[str, Any]]) -> list[PointerPoint]:
    """Active touch contacts in the payload, skipping malformed entries."""
    if not args:
        return []
    touches = args.get("touches")
    if not isinstance(touches, Sequence) or isinstance(touches, (str, bytes)):
        return []
    points = []
    for t in touches:
        if isinstance(t, Mapping):
            p = PointerPoint.from_args(t)
            if p is not None:
                points.append(p)
    return points


def pinch_distance(a: PointerPoint, b: PointerPoint) -> float:
    """Euclidean distance between two touch contacts."""
    return float(np.hypot(a.x - b.x, a.y - b.y))


def pinch_midpoint(a: PointerPoint, b: PointerPoint) -> PointerPoint:
    mid = np.mean([[a.x, a.y], [b.x, b.y]], axis=0)
    return PointerPoint(float(mid[0]), float(mid[1]))


@dataclass(frozen=True)
class DragSession:
    """Open while a button or single touch is held and panning is permitted."""

    origin_pointer: PointerPoint
    origin_translate: tuple[float, float]
    source: str = "pointer"  # "pointer" or "touch"

    def translate_for(self, pointer: PointerPoint) -> tuple[float, float]:
        """Snapshot translation plus the pointer delta since the press."""
        ox, oy = self.origin_translate
        return (
            ox + (pointer.x - self.origin_pointer.x),
            oy + (pointer.y - self.origin_pointer.y),
        )


@dataclass
class PinchSession:
    """Open while exactly two touches are active.

    `last_distance` is a rolling baseline, advanced after every applied frame.
    """

    last_distance: float
