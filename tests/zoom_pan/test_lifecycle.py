# tests/zoom_pan/test_lifecycle.py

from __future__ import annotations

import pytest

from nicezoom.zoom_pan.lifecycle import ListenerRegistry, ShadowCell
from nicezoom.zoom_pan.transform import ViewportTransform

from zoom_pan_payloads import wheel_args


class FakeEventSource:
    """Stands in for element.on: remembers subscriptions."""

    def __init__(self) -> None:
        self.subscriptions: dict[str, list] = {}

    def subscribe(self, event: str, handler) -> None:
        self.subscriptions.setdefault(event, []).append(handler)

    def fire(self, event: str, payload=None) -> None:
        for handler in self.subscriptions.get(event, []):
            handler(payload)


def test_shadow_cell_holds_latest_value():
    cell = ShadowCell(1)
    cell.value = 2
    assert cell.value == 2
    assert repr(cell) == "ShadowCell(2)"


def test_listeners_attach_once_across_state_updates(controller):
    source = FakeEventSource()
    registry = ListenerRegistry(owner="test")
    registry.register("container", "wheel", controller.handle_wheel, source.subscribe)
    registry.register("container", "dblclick", controller.handle_double_click, source.subscribe)

    for i in range(25):
        controller.update(ViewportTransform(scale=1.5, translate_x=float(i), translate_y=0.0))
        controller.configure(scale_step=0.1 + i / 100)
        source.fire("wheel", wheel_args(10, 10))

    assert registry.attach_count == 2
    assert {k: len(v) for k, v in source.subscriptions.items()} == {"wheel": 1, "dblclick": 1}


def test_registered_handler_sees_current_config(controller):
    source = FakeEventSource()
    registry = ListenerRegistry(owner="test")
    registry.register("container", "wheel", controller.handle_wheel, source.subscribe)

    controller.configure(scale_step=0.5)
    source.fire("wheel", wheel_args(0, 0))
    assert controller.scale == 1.5


def test_teardown_silences_handlers_and_runs_cleanup_once(controller):
    source = FakeEventSource()
    cleanups: list[str] = []
    registry = ListenerRegistry(owner="test")
    registry.register("container", "wheel", controller.handle_wheel, source.subscribe)
    registry.on_teardown(lambda: cleanups.append("window"))

    registry.teardown()
    registry.teardown()

    source.fire("wheel", wheel_args(0, 0))
    assert controller.scale == 1.0
    assert cleanups == ["window"]
    assert registry.torn_down
    assert all(not h.active for h in registry.handles)


def test_register_after_teardown_raises():
    registry = ListenerRegistry(owner="test")
    registry.teardown()
    with pytest.raises(RuntimeError):
        registry.register("container", "wheel", lambda e: None, lambda event, h: None)


def test_teardown_ignores_deleted_client():
    registry = ListenerRegistry(owner="test")

    def gone() -> None:
        raise RuntimeError("The client this element belongs to has been deleted.")

    registry.on_teardown(gone)
    registry.teardown()
    assert registry.torn_down


def test_registries_are_instance_scoped():
    a = ListenerRegistry(owner="a")
    b = ListenerRegistry(owner="b")
    a.register("container", "wheel", lambda e: None, lambda event, h: None)
    a.teardown()
    assert b.attach_count == 0
    assert not b.torn_down
    assert a.find("container", "wheel") is not None
    assert b.find("container", "wheel") is None
