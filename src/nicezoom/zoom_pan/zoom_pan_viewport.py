# nicezoom/src/nicezoom/zoom_pan/zoom_pan_viewport.py

"""NiceGUI viewport that zooms and pans arbitrary content.

Usage:
    ```python
    viewport = ZoomPanViewport(config=GestureConfig(max_scale=3.0))
    viewport.render_toolbar()
    with viewport.render():
        ui.mermaid(diagram)
    ```

Ctrl/Cmd + wheel zooms toward the cursor, drag pans while zoomed, two-finger
pinch zooms toward the finger midpoint, double-click resets to 100%.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from nicegui import ui

from nicezoom.utils.logging import get_logger

from . import js_hooks
from .controller import ZoomPanController
from .lifecycle import ListenerRegistry
from .style import style_to_css, zoom_percent
from .transform import GestureConfig, ViewportTransform, fit_scale

logger = get_logger(__name__)


def _safe_call(func: Callable, *args, **kwargs) -> Any:
    """Safely call a function, catching 'client deleted' RuntimeErrors only."""
    try:
        return func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise
    return None


def _payload(e: Any) -> dict:
    """The single dict a js_handler emitted, or {}."""
    args = getattr(e, "args", None)
    if isinstance(args, list) and args:
        args = args[0]
    return args if isinstance(args, dict) else {}


class ZoomPanViewport:
    """Reusable zoom/pan container for fixed 2D content (charts, diagrams).

    Construction creates no UI; `render()` builds it inside the current
    container and registers every browser listener exactly once. Listeners
    read live state through the controller, so state and config changes never
    re-register anything. `unmount()` removes the UI and detaches listeners.
    """

    def __init__(
        self,
        *,
        config: GestureConfig | None = None,
        show_badge: bool = True,
        name: str = "zoom-pan",
    ) -> None:
        self.controller = ZoomPanController(config, defer=self._defer, name=name)
        self.controller.on_change(self._on_transform_changed)
        self._show_badge = show_badge
        self._name = name

        self._container: Optional[ui.element] = None
        self._content: Optional[ui.element] = None
        self._badge: Optional[ui.label] = None
        self._percent_label: Optional[ui.label] = None
        self._listeners: Optional[ListenerRegistry] = None

    # ------------- properties -------------

    @property
    def scale(self) -> float:
        return self.controller.scale

    @property
    def translate_x(self) -> float:
        return self.controller.translate_x

    @property
    def translate_y(self) -> float:
        return self.controller.translate_y

    @property
    def zoom_label(self) -> str:
        return self.controller.zoom_label

    @property
    def content(self) -> Optional[ui.element]:
        return self._content

    @property
    def listeners(self) -> Optional[ListenerRegistry]:
        return self._listeners

    # ------------- public API -------------

    def reset(self) -> None:
        self.controller.reset()

    def set_scale(self, value: float) -> None:
        self.controller.set_scale(value)

    def configure(self, **changes: Any) -> GestureConfig:
        return self.controller.configure(**changes)

    async def fit(self) -> Optional[float]:
        """Scale so the whole content fits the container (never above 100%)."""
        if self._container is None or self._content is None:
            return None
        js = js_hooks.js_measure_fit(self._container.id, self._content.id)
        try:
            size = await self._container.client.run_javascript(js)
        except Exception:
            logger.exception("fit: could not measure geometry")
            return None
        if not isinstance(size, dict):
            return None

        scale = fit_scale(
            float(size.get("container_width") or 0),
            float(size.get("container_height") or 0),
            float(size.get("content_width") or 0),
            float(size.get("content_height") or 0),
        )
        if scale is None:
            logger.debug(f"fit: geometry not available yet {size}")
            return None
        self.controller.set_scale(scale)
        return self.controller.scale

    # ------------- rendering -------------

    def render(self) -> ui.element:
        """Build the viewport in the current container and return the content element.

        Put the zoomable content inside the returned element. Calling render()
        again unmounts the previous instance first.
        """
        if self._container is not None:
            self.unmount()

        with ui.element("div").classes("w-full h-full") as container:
            self._container = container
            self._content = ui.element("div")
            if self._show_badge:
                self._badge = (
                    ui.label("")
                    .classes("absolute top-2 right-2 text-xs px-2 py-0.5 rounded bg-gray-800 text-white opacity-70")
                    .style("pointer-events: none;")
                )

        self._attach_listeners()
        self._on_transform_changed(self.controller.transform)
        logger.info(f"{self._name}: mounted as {js_hooks.dom_id(container.id)}")
        return self._content

    def render_toolbar(self) -> ui.row:
        """Zoom out / percent / zoom in / reset / fit buttons."""
        with ui.row().classes("items-center gap-1") as row:
            ui.button(icon="zoom_out", on_click=self.controller.zoom_out).props("flat dense").tooltip("Zoom out")
            self._percent_label = ui.label(f"{zoom_percent(self.scale)}%").classes(
                "text-xs font-mono w-10 text-center select-none"
            )
            ui.button(icon="zoom_in", on_click=self.controller.zoom_in).props("flat dense").tooltip("Zoom in")
            ui.button("100%", on_click=self.controller.reset).props("flat dense").tooltip("Reset zoom")
            ui.button(icon="fit_screen", on_click=self.fit).props("flat dense").tooltip("Fit to view")
        return row

    def unmount(self) -> None:
        """Detach listeners, drop gesture sessions and delete the UI."""
        if self._listeners is not None:
            self._listeners.teardown()
            self._listeners = None
        self.controller.cancel_gestures()

        container = self._container
        self._container = None
        self._content = None
        self._badge = None
        if container is not None:
            _safe_call(container.delete)
            logger.info(f"{self._name}: unmounted")

    # ------------- internals: listeners -------------

    def _attach_listeners(self) -> None:
        container = self._container
        cid = container.id
        registry = ListenerRegistry(owner=f"{self._name}:{js_hooks.dom_id(cid)}")
        ctl = self.controller

        def on_container(js_handler: str) -> Callable[[str, Callable], Any]:
            return lambda event, handler: container.on(event, handler, js_handler=js_handler)

        registry.register("container", "wheel", lambda e: ctl.handle_wheel(_payload(e)), on_container(js_hooks.js_wheel(cid)))
        registry.register("container", "dblclick", lambda e: ctl.handle_double_click(_payload(e)), on_container(js_hooks.js_dblclick()))
        registry.register("container", "mousedown", lambda e: ctl.handle_pointer_down(_payload(e)), on_container(js_hooks.js_mousedown(cid)))
        registry.register("container", "touchstart", lambda e: ctl.handle_touch_start(_payload(e)), on_container(js_hooks.js_touchstart(cid)))
        registry.register("container", "touchmove", lambda e: ctl.handle_touch_move(_payload(e)), on_container(js_hooks.js_touchmove(cid)))
        registry.register("container", "touchend", lambda e: ctl.handle_touch_end(_payload(e)), on_container(js_hooks.js_touchend(cid)))
        registry.register("container", "touchcancel", lambda e: ctl.handle_touch_end(_payload(e)), on_container(js_hooks.js_touchend(cid)))

        # move/release are watched on the whole window so drags leaving the viewport still end;
        # the browser relays them onto the container, so these subscriptions die with it
        relay = on_container(js_hooks.js_relay())
        registry.register("window", js_hooks.RELAY_MOVE, lambda e: ctl.handle_pointer_move(_payload(e)), relay)
        registry.register("window", js_hooks.RELAY_UP, lambda e: ctl.handle_pointer_up(_payload(e)), relay)
        registry.on_teardown(
            lambda: container.client.run_javascript(js_hooks.js_remove_window_listeners(cid))
        )

        self._listeners = registry

    # ------------- internals: state -> view -------------

    def _on_transform_changed(self, transform: ViewportTransform) -> None:
        """Push projected styles to the browser."""
        if self._container is None or self._content is None:
            return
        ctl = self.controller
        pan_flag = "1" if ctl.can_pan else "0"

        _safe_call(self._container.style, replace=style_to_css(ctl.container_style))
        _safe_call(self._container.props, f'{js_hooks.PAN_ATTR}="{pan_flag}"')
        _safe_call(self._content.style, replace=style_to_css(ctl.content_style))

        label = ctl.zoom_label
        if self._badge is not None:
            self._badge.text = label
            self._badge.visible = bool(label)
        if self._percent_label is not None:
            self._percent_label.text = f"{zoom_percent(transform.scale)}%"

    def _defer(self, fn: Callable[[], None]) -> None:
        """Run `fn` on a zero-delay timer, outside the current event handler."""
        if self._container is None:
            self.controller.defer_after_handler(fn)
            return

        def _schedule() -> None:
            with self._container:
                ui.timer(0, fn, once=True)

        _safe_call(_schedule)
