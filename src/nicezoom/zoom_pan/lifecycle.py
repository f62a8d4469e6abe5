# nicezoom/src/nicezoom/zoom_pan/lifecycle.py

"""Shadow cells and an instance-scoped listener registry.

Long-lived input handlers are registered once per mount and read everything
they need (transform, config, callbacks) from `ShadowCell` objects that are
written synchronously on every change. Nothing is ever re-subscribed because
a value changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar

from nicezoom.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Handler = Callable[[Any], Any]
# subscribe(event_name, handler) binds a handler to some event source
Subscribe = Callable[[str, Handler], Any]


class ShadowCell(Generic[T]):
    """Mutable cell mirroring a value that may be replaced at any time."""

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"ShadowCell({self.value!r})"


@dataclass
class ListenerHandle:
    """One registered listener. Inactive handles swallow events."""

    target: str
    event: str
    handler: Handler
    active: bool = True


@dataclass
class ListenerRegistry:
    """Attach/detach bookkeeping for one widget instance.

    Every listener goes through `register()`, which wraps the handler so that
    it becomes a no-op once `teardown()` has run. Extra cleanup (for example
    removing browser-side window listeners) is queued with `on_teardown()` and
    runs exactly once.
    """

    owner: str
    handles: List[ListenerHandle] = field(default_factory=list)
    attach_count: int = 0
    _teardown_fns: List[Callable[[], None]] = field(default_factory=list)
    _torn_down: bool = False

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def register(self, target: str, event: str, handler: Handler, subscribe: Subscribe) -> ListenerHandle:
        """Bind `handler` to `event` on `target` via `subscribe`."""
        if self._torn_down:
            raise RuntimeError(f"{self.owner}: cannot register '{event}' after teardown")

        handle = ListenerHandle(target=target, event=event, handler=handler)

        def _guarded(e: Any = None) -> Any:
            if not handle.active:
                return None
            return handle.handler(e)

        subscribe(event, _guarded)
        self.handles.append(handle)
        self.attach_count += 1
        logger.debug(f"{self.owner}: attached {target}:{event}")
        return handle

    def on_teardown(self, fn: Callable[[], None]) -> None:
        self._teardown_fns.append(fn)

    def teardown(self) -> None:
        """Deactivate every listener and run queued cleanup. Idempotent."""
        if self._torn_down:
            return
        self._torn_down = True
        for handle in self.handles:
            handle.active = False
        fns, self._teardown_fns = self._teardown_fns, []
        for fn in fns:
            try:
                fn()
            except RuntimeError as e:
                # the browser side is already gone when the client was deleted
                if "deleted" not in str(e).lower():
                    raise
        logger.debug(f"{self.owner}: detached {len(self.handles)} listeners")

    def find(self, target: str, event: str) -> Optional[ListenerHandle]:
        for handle in self.handles:
            if handle.target == target and handle.event == event:
                return handle
        return None
