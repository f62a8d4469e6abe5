# nicezoom/src/nicezoom/zoom_pan/style.py

"""Project a ViewportTransform into CSS for the container and content elements."""

from __future__ import annotations

import math
from typing import Dict

from .transform import ViewportTransform, is_zoomed

CONTENT_TRANSITION = "transform 0.15s ease-out"

StyleDict = Dict[str, str]


def cursor_hint(transform: ViewportTransform, *, dragging: bool, enable_drag: bool) -> str:
    """'grabbing' during a drag, 'grab' where a drag could start, else 'default'."""
    if dragging:
        return "grabbing"
    if enable_drag and is_zoomed(transform.scale):
        return "grab"
    return "default"


def container_style(transform: ViewportTransform, *, dragging: bool, enable_drag: bool) -> StyleDict:
    return {
        "overflow": "hidden",
        "position": "relative",
        "cursor": cursor_hint(transform, dragging=dragging, enable_drag=enable_drag),
        "touch-action": "none",
    }


def content_style(transform: ViewportTransform, *, dragging: bool) -> StyleDict:
    return {
        "transform": (
            f"translate({transform.translate_x}px, {transform.translate_y}px) "
            f"scale({transform.scale})"
        ),
        "transform-origin": "0 0",
        "transition": "none" if dragging else CONTENT_TRANSITION,
        "will-change": "transform",
    }


def zoom_percent(scale: float) -> int:
    """Scale as a whole percentage, halves rounded up."""
    return int(math.floor(scale * 100.0 + 0.5))


def zoom_label(scale: float) -> str:
    """'' at exactly 100%, otherwise e.g. '110%'."""
    if scale == 1:
        return ""
    return f"{zoom_percent(scale)}%"


def style_to_css(style: StyleDict) -> str:
    """{'overflow': 'hidden', ...} -> 'overflow: hidden; ...'"""
    return " ".join(f"{key}: {value};" for key, value in style.items())
