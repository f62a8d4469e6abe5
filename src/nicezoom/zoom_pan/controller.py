# nicezoom/src/nicezoom/zoom_pan/controller.py

from __future__ import annotations

import asyncio
import functools
import math
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional

from nicezoom.utils.logging import get_logger

from .gestures import (
    ContainerRect,
    DragSession,
    PinchSession,
    PointerPoint,
    as_float,
    pinch_distance,
    pinch_midpoint,
    touch_points,
)
from .lifecycle import ShadowCell
from .style import StyleDict, container_style, content_style, zoom_label
from .transform import (
    IDENTITY,
    GestureConfig,
    OnUserZoom,
    ViewportTransform,
    clamp_scale,
    is_zoomed,
    zoom_about,
)

logger = get_logger(__name__)

EventArgs = Optional[Mapping[str, Any]]
# defer(fn) must run fn later, after the current event handler has returned
Defer = Callable[[Callable[[], None]], Any]


def _dispatch(method: Callable[..., bool]) -> Callable[..., bool]:
    """Mark a browser event handler; callbacks it queued run once it has returned."""

    @functools.wraps(method)
    def wrapper(self: ZoomPanController, *args: Any, **kwargs: Any) -> bool:
        self._dispatch_depth += 1
        try:
            return method(self, *args, **kwargs)
        finally:
            self._dispatch_depth -= 1
            if not self._dispatch_depth:
                self._run_pending()

    return wrapper


class ZoomPanController:
    """Zoom/pan state machine for one viewport.

    Owns the ViewportTransform plus the ephemeral drag and pinch sessions.
    The `handle_*` methods take the plain dict payloads of browser events and
    return True when the event was consumed (so the browser default should be
    suppressed). Every handler reads transform, config and callbacks from
    shadow cells, so handlers can be bound once and never re-bound.

    Events (via callback registration):
        on_change(handler): Handler called as handler(transform) after every
            committed transform or drag start/stop.
        GestureConfig.on_user_zoom: called as on_user_zoom(scale) on a deferred
            tick after wheel, pinch or double-click zoom.
    """

    def __init__(
        self,
        config: GestureConfig | None = None,
        *,
        defer: Defer | None = None,
        name: str = "zoom-pan",
    ) -> None:
        self.name = name
        cfg = config if config is not None else GestureConfig()

        self._config: ShadowCell[GestureConfig] = ShadowCell(cfg)
        self._on_user_zoom: ShadowCell[Optional[OnUserZoom]] = ShadowCell(cfg.on_user_zoom)
        self._state: ShadowCell[ViewportTransform] = ShadowCell(IDENTITY)

        self._drag: Optional[DragSession] = None
        self._pinch: Optional[PinchSession] = None

        self._defer: Defer = defer if defer is not None else self.defer_after_handler
        self._pending: List[Callable[[], None]] = []
        self._dispatch_depth = 0
        self._change_handlers: List[Callable[[ViewportTransform], None]] = []
        self._closed = False

    # ------------- properties -------------

    @property
    def transform(self) -> ViewportTransform:
        return self._state.value

    @property
    def scale(self) -> float:
        return self._state.value.scale

    @property
    def translate_x(self) -> float:
        return self._state.value.translate_x

    @property
    def translate_y(self) -> float:
        return self._state.value.translate_y

    @property
    def config(self) -> GestureConfig:
        return self._config.value

    @property
    def on_user_zoom(self) -> Optional[OnUserZoom]:
        return self._on_user_zoom.value

    @on_user_zoom.setter
    def on_user_zoom(self, callback: Optional[OnUserZoom]) -> None:
        self._on_user_zoom.value = callback

    @property
    def dragging(self) -> bool:
        return self._drag is not None

    @property
    def pinching(self) -> bool:
        return self._pinch is not None

    @property
    def can_pan(self) -> bool:
        """Whether a press would start a drag right now."""
        return self._config.value.enable_drag and is_zoomed(self._state.value.scale)

    # ------------- projected output -------------

    @property
    def container_style(self) -> StyleDict:
        return container_style(
            self._state.value,
            dragging=self.dragging,
            enable_drag=self._config.value.enable_drag,
        )

    @property
    def content_style(self) -> StyleDict:
        return content_style(self._state.value, dragging=self.dragging)

    @property
    def zoom_label(self) -> str:
        return zoom_label(self._state.value.scale)

    # ------------- public API -------------

    def on_change(self, handler: Callable[[ViewportTransform], None]) -> None:
        """Register callback for state changes.

        Handler is called with: transform (ViewportTransform)
        """
        self._change_handlers.append(handler)

    def configure(self, **changes: Any) -> GestureConfig:
        """Replace config fields between interactions, e.g. configure(max_scale=4.0)."""
        cfg = replace(self._config.value, **changes)
        self._config.value = cfg
        if "on_user_zoom" in changes:
            self._on_user_zoom.value = cfg.on_user_zoom

        scale = self._state.value.scale
        if not cfg.min_scale <= scale <= cfg.max_scale:
            self.set_scale(scale)
        else:
            # drag permission or cursor hint may have changed
            self._emit_change()
        return cfg

    def reset(self) -> None:
        """Back to (1, 0, 0) and drop any open drag."""
        self._drag = None
        self._commit(IDENTITY)
        logger.debug(f"{self.name}: reset")

    def set_scale(self, value: float) -> None:
        """Programmatic zoom: clamp, round and recenter translation to the origin.

        An open drag is dropped, otherwise its next move would restore the
        translation it started from.
        """
        cfg = self._config.value
        self._drag = None
        self._commit(ViewportTransform(scale=clamp_scale(value, cfg.min_scale, cfg.max_scale)))

    def zoom_in(self) -> None:
        self.set_scale(self._state.value.scale + self._config.value.scale_step)

    def zoom_out(self) -> None:
        self.set_scale(self._state.value.scale - self._config.value.scale_step)

    def update(self, transform: ViewportTransform) -> None:
        """Replace the whole transform at once.

        The scale is clamped and rounded like any other change; the
        translation is kept as given. Raises ValueError for non-finite values.
        """
        values = (transform.scale, transform.translate_x, transform.translate_y)
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"transform values must be finite, got {transform}")
        cfg = self._config.value
        self._commit(replace(transform, scale=clamp_scale(transform.scale, cfg.min_scale, cfg.max_scale)))

    def cancel_gestures(self) -> None:
        """Drop any open drag or pinch session."""
        self._pinch = None
        self._end_drag()

    def close(self) -> None:
        """Drop sessions and pending notifications; handlers become inert."""
        self.cancel_gestures()
        self._closed = True
        self._change_handlers.clear()
        self._pending.clear()

    @property
    def dispatching(self) -> bool:
        """True while a browser event handler is running."""
        return self._dispatch_depth > 0

    def defer_after_handler(self, fn: Callable[[], None]) -> None:
        """Default deferrer.

        Uses the next iteration of the running asyncio loop. Without a loop,
        `fn` is queued and runs once the current `handle_*` call has returned.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._pending.append(fn)
            if not self._dispatch_depth:
                self._run_pending()
            return
        loop.call_soon(fn)

    # ------------- wheel -------------

    @_dispatch
    def handle_wheel(self, args: EventArgs) -> bool:
        """Ctrl/Cmd + wheel zooms toward the cursor. Plain wheel is ignored."""
        if self._closed or not args:
            return False
        if not (args.get("ctrlKey") or args.get("metaKey")):
            return False

        delta = as_float(args.get("deltaY"))
        if not delta:
            return True

        rect = ContainerRect.from_args(args)
        pointer = PointerPoint.from_args(args)
        if rect is None or pointer is None:
            logger.debug(f"{self.name}: wheel without container geometry, ignored")
            return True

        direction = 1 if delta < 0 else -1
        focal_x, focal_y = rect.to_local(pointer)
        cfg = self._config.value
        prev = self._state.value
        new_scale = clamp_scale(prev.scale + direction * cfg.scale_step, cfg.min_scale, cfg.max_scale)

        self._commit(zoom_about(prev, new_scale, focal_x, focal_y))
        if new_scale != prev.scale:
            self._notify_user_zoom(new_scale)
        return True

    # ------------- double click / tap -------------

    @_dispatch
    def handle_double_click(self, args: EventArgs = None) -> bool:
        if self._closed:
            return False
        self.reset()
        self._notify_user_zoom(1.0)
        return True

    # ------------- mouse drag -------------

    @_dispatch
    def handle_pointer_down(self, args: EventArgs) -> bool:
        """Left press starts a drag when panning is permitted."""
        if self._closed or not args:
            return False
        if args.get("button", 0) != 0:
            return False
        if not self.can_pan:
            return False
        pointer = PointerPoint.from_args(args)
        if pointer is None:
            return False
        # drag and pinch never run together
        self._pinch = None
        self._begin_drag(pointer, source="pointer")
        return True

    @_dispatch
    def handle_pointer_move(self, args: EventArgs) -> bool:
        drag = self._drag
        if self._closed or drag is None or drag.source != "pointer":
            return False
        args = args or {}

        buttons = args.get("buttons")
        if isinstance(buttons, int) and not buttons & 1:
            # the release happened somewhere we never heard about
            logger.debug(f"{self.name}: move without button held, closing stale drag")
            self._end_drag()
            return False

        pointer = PointerPoint.from_args(args)
        if pointer is None:
            return False
        self._commit(self._state.value.translated_to(*drag.translate_for(pointer)))
        return True

    @_dispatch
    def handle_pointer_up(self, args: EventArgs = None) -> bool:
        """Release, or the pointer leaving the page, ends a mouse drag."""
        if self._drag is None or self._drag.source != "pointer":
            return False
        self._end_drag()
        return True

    # ------------- touch -------------

    @_dispatch
    def handle_touch_start(self, args: EventArgs) -> bool:
        if self._closed:
            return False
        touches = touch_points(args)

        if len(touches) == 2:
            self._end_drag()
            self._pinch = PinchSession(last_distance=pinch_distance(*touches))
            logger.debug(f"{self.name}: pinch started at distance {self._pinch.last_distance:.1f}")
            return True

        # anything still open here missed its end event
        self._pinch = None
        self._end_drag()
        if len(touches) == 1:
            return self._begin_touch_pan(touches[0])
        return False

    @_dispatch
    def handle_touch_move(self, args: EventArgs) -> bool:
        if self._closed:
            return False
        touches = touch_points(args)

        if len(touches) == 2:
            if self._pinch is None:
                # second finger's touchstart was lost; start from here
                self._end_drag()
                self._pinch = PinchSession(last_distance=pinch_distance(*touches))
                return True
            return self._apply_pinch(touches[0], touches[1], ContainerRect.from_args(args))

        drag = self._drag
        if len(touches) == 1 and drag is not None and drag.source == "touch":
            self._commit(self._state.value.translated_to(*drag.translate_for(touches[0])))
            return True
        return False

    @_dispatch
    def handle_touch_end(self, args: EventArgs) -> bool:
        """Touch end or cancel. `args["touches"]` lists the contacts still down."""
        if self._closed:
            return False
        remaining = touch_points(args)

        if len(remaining) < 2 and self._pinch is not None:
            self._pinch = None
            logger.debug(f"{self.name}: pinch ended")

        if not remaining:
            self._end_drag()
            return False
        if len(remaining) == 1:
            # re-anchor on the finger left behind so the content does not jump
            self._end_drag()
            return self._begin_touch_pan(remaining[0])
        return False

    # ------------- internals -------------

    def _apply_pinch(self, a: PointerPoint, b: PointerPoint, rect: Optional[ContainerRect]) -> bool:
        if rect is None:
            logger.debug(f"{self.name}: pinch without container geometry, frame ignored")
            return True

        new_distance = pinch_distance(a, b)
        delta = new_distance - self._pinch.last_distance

        cfg = self._config.value
        prev = self._state.value
        new_scale = clamp_scale(prev.scale + delta * cfg.pinch_sensitivity, cfg.min_scale, cfg.max_scale)
        focal_x, focal_y = rect.to_local(pinch_midpoint(a, b))

        self._commit(zoom_about(prev, new_scale, focal_x, focal_y))
        self._pinch.last_distance = new_distance
        if new_scale != prev.scale:
            self._notify_user_zoom(new_scale)
        return True

    def _begin_touch_pan(self, touch: PointerPoint) -> bool:
        if not self.can_pan:
            return False
        self._begin_drag(touch, source="touch")
        return True

    def _begin_drag(self, pointer: PointerPoint, *, source: str) -> None:
        state = self._state.value
        self._drag = DragSession(
            origin_pointer=pointer,
            origin_translate=(state.translate_x, state.translate_y),
            source=source,
        )
        logger.debug(f"{self.name}: {source} drag started at ({pointer.x:.1f}, {pointer.y:.1f})")
        self._emit_change()

    def _end_drag(self) -> None:
        if self._drag is None:
            return
        source = self._drag.source
        self._drag = None
        logger.debug(f"{self.name}: {source} drag ended")
        self._emit_change()

    def _commit(self, transform: ViewportTransform) -> None:
        self._state.value = transform
        self._emit_change()

    def _emit_change(self) -> None:
        transform = self._state.value
        for handler in list(self._change_handlers):
            try:
                handler(transform)
            except Exception:
                logger.exception("Error in zoom-pan change handler")

    def _run_pending(self) -> None:
        while self._pending:
            pending, self._pending = self._pending, []
            for fn in pending:
                fn()

    def _notify_user_zoom(self, scale: float) -> None:
        if self._on_user_zoom.value is None:
            return

        def _fire() -> None:
            # read the cell at fire time; the callback may have been swapped
            callback = self._on_user_zoom.value
            if self._closed or callback is None:
                return
            try:
                callback(scale)
            except Exception:
                logger.exception("Error in on_user_zoom handler")

        self._defer(_fire)
