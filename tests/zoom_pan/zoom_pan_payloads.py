# tests/zoom_pan/zoom_pan_payloads.py
"""Browser event payloads shaped like the js_hooks emitters send them."""

from __future__ import annotations


def wheel_args(client_x: float, client_y: float, delta_y: float = -100.0, *, ctrl: bool = True, rect=None) -> dict:
    return {
        "deltaY": delta_y,
        "ctrlKey": ctrl,
        "metaKey": False,
        "clientX": client_x,
        "clientY": client_y,
        "rect": rect if rect is not None else {"left": 0, "top": 0, "width": 400, "height": 300},
    }


def touch_args(*points: tuple[float, float], rect=None) -> dict:
    return {
        "touches": [{"clientX": x, "clientY": y} for x, y in points],
        "rect": rect if rect is not None else {"left": 0, "top": 0, "width": 400, "height": 300},
    }
