# nicezoom/src/nicezoom/zoom_pan/transform.py

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Callable, Optional

# Scales within this distance of 1.0 count as "native size".
NATIVE_SCALE_TOLERANCE = 1e-3

OnUserZoom = Callable[[float], None]


@dataclass(frozen=True)
class ViewportTransform:
    """Scale plus translation of the content inside the viewport.

    Translation is in container-local pixels and is applied before the
    scale, with the transform origin at the top-left corner.
    """

    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViewportTransform":
        return cls(**data)

    def content_point(self, x: float, y: float) -> tuple[float, float]:
        """Container point -> content coordinate currently drawn under it."""
        return (x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale

    def translated_to(self, translate_x: float, translate_y: float) -> "ViewportTransform":
        return replace(self, translate_x=translate_x, translate_y=translate_y)


IDENTITY = ViewportTransform()


@dataclass(frozen=True)
class GestureConfig:
    """Per-instance gesture configuration.

    Frozen: callers swap in a new instance between interactions instead of
    mutating this one.
    """

    min_scale: float = 0.5
    max_scale: float = 2.0
    scale_step: float = 0.1
    enable_drag: bool = True
    # Scale change per pixel of finger-distance change.
    pinch_sensitivity: float = 0.005
    on_user_zoom: Optional[OnUserZoom] = None

    def __post_init__(self) -> None:
        if self.min_scale <= 0:
            raise ValueError(f"min_scale must be positive, got {self.min_scale}")
        if self.min_scale > self.max_scale:
            raise ValueError(
                f"min_scale ({self.min_scale}) must not exceed max_scale ({self.max_scale})"
            )
        if self.scale_step <= 0:
            raise ValueError(f"scale_step must be positive, got {self.scale_step}")
        if self.pinch_sensitivity <= 0:
            raise ValueError(f"pinch_sensitivity must be positive, got {self.pinch_sensitivity}")


def round_scale(value: float) -> float:
    """Round to 2 decimals, halves away from zero for positive scales."""
    return math.floor(value * 100.0 + 0.5) / 100.0


def clamp_scale(value: float, min_scale: float, max_scale: float) -> float:
    """Round `value` to 2 decimals and clamp it into [min_scale, max_scale]."""
    return min(max_scale, max(min_scale, round_scale(value)))


def is_zoomed(scale: float) -> bool:
    """True when `scale` is anything other than native size."""
    return abs(scale - 1.0) > NATIVE_SCALE_TOLERANCE


def zoom_about(
    transform: ViewportTransform,
    new_scale: float,
    focal_x: float,
    focal_y: float,
) -> ViewportTransform:
    """Rescale to `new_scale` keeping the content under (focal_x, focal_y) fixed.

    The focal point is in container-local pixels. The content coordinate under
    it, (F - T) / S, is the same before and after.
    """
    ratio = new_scale / transform.scale
    return ViewportTransform(
        scale=new_scale,
        translate_x=focal_x - ratio * (focal_x - transform.translate_x),
        translate_y=focal_y - ratio * (focal_y - transform.translate_y),
    )


def fit_scale(
    container_width: float,
    container_height: float,
    content_width: float,
    content_height: float,
) -> Optional[float]:
    """Largest scale at which the content fits the container, capped at 1.0.

    Returns None when any dimension is unknown (zero or negative).
    """
    if min(container_width, container_height, content_width, content_height) <= 0:
        return None
    return min(container_width / content_width, container_height / content_height, 1.0)
