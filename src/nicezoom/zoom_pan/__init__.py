"""Zoom/pan viewport - anchor-preserving wheel/pinch zoom, drag pan, reset."""

from .controller import ZoomPanController
from .lifecycle import ListenerRegistry, ShadowCell
from .transform import GestureConfig, ViewportTransform, clamp_scale, fit_scale, zoom_about
from .zoom_pan_viewport import ZoomPanViewport

__all__ = [
    "GestureConfig",
    "ListenerRegistry",
    "ShadowCell",
    "ViewportTransform",
    "ZoomPanController",
    "ZoomPanViewport",
    "clamp_scale",
    "fit_scale",
    "zoom_about",
]
