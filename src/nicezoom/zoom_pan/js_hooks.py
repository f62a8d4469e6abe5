# nicezoom/src/nicezoom/zoom_pan/js_hooks.py
# Browser-side snippets for ZoomPanViewport.
# Each js_handler decides preventDefault locally (it must happen synchronously in
# the browser) and emits a plain JSON payload for the Python handlers.

from __future__ import annotations

import json

# data-* attributes mirrored from Python onto the container element
PAN_ATTR = "data-nicezoom-pan"
_PAN_DATASET = "nicezoomPan"
_DRAG_DATASET = "nicezoomDrag"

# window mousemove/mouseup, re-dispatched on the container element
RELAY_MOVE = "nicezoommove"
RELAY_UP = "nicezoomup"


def dom_id(element_id: int) -> str:
    """NiceGUI renders element `n` with DOM id 'c<n>'."""
    return f"c{element_id}"


def window_key(element_id: int) -> str:
    """Instance-scoped key for the window-level listeners."""
    return f"nicezoom_{dom_id(element_id)}"


def _container(element_id: int) -> str:
    return f"document.getElementById({json.dumps(dom_id(element_id))})"


def _rect() -> str:
    return (
        "(() => { const r = el.getBoundingClientRect(); "
        "return {left: r.left, top: r.top, width: r.width, height: r.height}; })()"
    )


def js_wheel(element_id: int) -> str:
    """Ctrl/Cmd + wheel only; anything else scrolls the page as usual."""
    return f"""
(e) => {{
  if (!e.ctrlKey && !e.metaKey) return;
  e.preventDefault();
  e.stopPropagation();
  const el = {_container(element_id)};
  if (!el) return;
  emit({{
    deltaY: e.deltaY, ctrlKey: e.ctrlKey, metaKey: e.metaKey,
    clientX: e.clientX, clientY: e.clientY, rect: {_rect()},
  }});
}}
""".strip()


def js_dblclick() -> str:
    return """
(e) => {
  e.preventDefault();
  emit({});
}
""".strip()


def js_relay() -> str:
    """js_handler for the relayed window events: forward the detail payload."""
    return "(e) => emit(e.detail || {})"


def js_install_window_listeners(element_id: int) -> str:
    """Install window-level move/up listeners once per mount.

    They forward only while this container has a drag open, and also end the
    drag when the pointer leaves the page or the window loses focus. Events are
    re-dispatched on the container element, so the Python side subscribes on
    the container and its handlers go away with it.
    """
    key = json.dumps(window_key(element_id))
    move_event = json.dumps(RELAY_MOVE)
    up_event = json.dumps(RELAY_UP)
    return f"""
if (!window[{key}]) {{
  const el = {_container(element_id)};
  const dragging = () => el && el.isConnected && el.dataset.{_DRAG_DATASET} === '1';
  const relay = (name, detail) => el.dispatchEvent(new CustomEvent(name, {{detail}}));
  const move = (ev) => {{
    if (!dragging()) return;
    relay({move_event}, {{clientX: ev.clientX, clientY: ev.clientY, buttons: ev.buttons}});
  }};
  const up = (ev) => {{
    if (!dragging()) return;
    el.dataset.{_DRAG_DATASET} = '0';
    relay({up_event}, {{}});
  }};
  window.addEventListener('mousemove', move);
  window.addEventListener('mouseup', up);
  window.addEventListener('blur', up);
  document.documentElement.addEventListener('mouseleave', up);
  window[{key}] = () => {{
    window.removeEventListener('mousemove', move);
    window.removeEventListener('mouseup', up);
    window.removeEventListener('blur', up);
    document.documentElement.removeEventListener('mouseleave', up);
    delete window[{key}];
  }};
}}
""".strip()


def js_mousedown(element_id: int) -> str:
    return f"""
(e) => {{
  const el = {_container(element_id)};
  if (!el || e.button !== 0 || el.dataset.{_PAN_DATASET} !== '1') return;
  {js_install_window_listeners(element_id)}
  el.dataset.{_DRAG_DATASET} = '1';
  e.preventDefault();
  emit({{button: e.button, clientX: e.clientX, clientY: e.clientY}});
}}
""".strip()


def js_remove_window_listeners(element_id: int) -> str:
    key = json.dumps(window_key(element_id))
    return f"if (window[{key}]) window[{key}]();"


def _touch_payload() -> str:
    return (
        "{touches: Array.from(e.touches, (t) => ({clientX: t.clientX, clientY: t.clientY})), "
        f"rect: {_rect()}}}"
    )


def _touch_handled() -> str:
    return (
        "e.touches.length === 2 "
        f"|| (e.touches.length === 1 && el.dataset.{_PAN_DATASET} === '1')"
    )


def js_touchstart(element_id: int) -> str:
    """Always reported; only a two-finger start blocks the browser default.

    A one-finger start is left alone: the browser synthesizes click and
    dblclick from it, and double-tap reset and taps on the content rely on
    those. One-finger panning is blocked in touchmove instead.
    """
    return f"""
(e) => {{
  const el = {_container(element_id)};
  if (!el) return;
  if (e.touches.length === 2) e.preventDefault();
  emit({_touch_payload()});
}}
""".strip()


def js_touchmove(element_id: int) -> str:
    """Reported only while a pinch or a one-finger pan can be in progress."""
    return f"""
(e) => {{
  const el = {_container(element_id)};
  if (!el || !({_touch_handled()})) return;
  e.preventDefault();
  emit({_touch_payload()});
}}
""".strip()


def js_touchend(element_id: int) -> str:
    """touchend / touchcancel; `touches` holds the contacts still down."""
    return f"""
(e) => {{
  const el = {_container(element_id)};
  if (!el) return;
  emit({_touch_payload()});
}}
""".strip()


def js_measure_fit(container_id: int, content_id: int) -> str:
    """Container client size and untransformed content size, or null."""
    return f"""
(() => {{
  const c = document.getElementById({json.dumps(dom_id(container_id))});
  const n = document.getElementById({json.dumps(dom_id(content_id))});
  if (!c || !n) return null;
  return {{
    container_width: c.clientWidth, container_height: c.clientHeight,
    content_width: n.scrollWidth, content_height: n.scrollHeight,
  }};
}})()
""".strip()
